from core.extensions import db
from core.imports import datetime


class Document(db.Model):
    """One JSON document in a named collection, keyed by (collection, id)."""
    __tablename__ = "documents"

    collection = db.Column(db.String(64), primary_key=True)
    id = db.Column(db.String(128), primary_key=True)
    data = db.Column(db.JSON, nullable=False, default=dict)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
