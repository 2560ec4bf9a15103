from core.extensions import db
from core.imports import uuid
from models.documentModel import Document

ORDERS = "orders"
PRODUCTS = "products"
RAW_MATERIALS = "rawMaterials"
RAW_MATERIAL_PURCHASES = "rawMaterialPurchases"
LABOR_COSTS = "laborCosts"
USERS = "users"


class DocumentNotFound(LookupError):
    def __init__(self, collection, doc_id):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class DocumentStore:
    """
    Keyed JSON collections on top of the SQLAlchemy session.

    Every write commits on its own; there are no multi-document transactions
    and the last write wins. Database errors propagate to the caller.
    """

    def __init__(self, session):
        self.session = session

    @staticmethod
    def _as_dict(doc):
        return {"id": doc.id, **(doc.data or {})}

    def _row(self, collection, doc_id):
        return self.session.get(Document, (collection, str(doc_id)))

    def get(self, collection, doc_id):
        row = self._row(collection, doc_id)
        return self._as_dict(row) if row else None

    def exists(self, collection, doc_id):
        return self._row(collection, doc_id) is not None

    def list(self, collection, order_by=None, descending=False):
        rows = self.session.query(Document).filter_by(collection=collection).all()
        docs = [self._as_dict(row) for row in rows]
        if order_by:
            # documents missing the key sort last either way
            present = [d for d in docs if d.get(order_by) is not None]
            missing = [d for d in docs if d.get(order_by) is None]
            present.sort(key=lambda d: str(d[order_by]), reverse=descending)
            docs = present + missing
        return docs

    def add(self, collection, data):
        doc_id = uuid.uuid4().hex
        self.set(collection, doc_id, data)
        return doc_id

    def set(self, collection, doc_id, data):
        payload = {k: v for k, v in data.items() if k != "id"}
        row = self._row(collection, doc_id)
        if row:
            row.data = payload
        else:
            row = Document(collection=collection, id=str(doc_id), data=payload)
            self.session.add(row)
        self.session.commit()
        return self._as_dict(row)

    def update(self, collection, doc_id, fields):
        """Shallow-merge `fields` into an existing document."""
        row = self._row(collection, doc_id)
        if not row:
            raise DocumentNotFound(collection, doc_id)
        merged = dict(row.data or {})
        merged.update({k: v for k, v in fields.items() if k != "id"})
        row.data = merged
        self.session.commit()
        return self._as_dict(row)

    def delete(self, collection, doc_id):
        row = self._row(collection, doc_id)
        if not row:
            return False
        self.session.delete(row)
        self.session.commit()
        return True


def get_store():
    return DocumentStore(db.session)
