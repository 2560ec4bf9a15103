import logging

from core.imports import jsonify, Flask, SQLAlchemyError
from core.config import Config
from core.extensions import db, jwt, swagger, cors, bcrypt, migrate
from core.store import DocumentNotFound
from routes.auth import auth_bp, seed_admin_user
from routes.webhooks import webhooks_bp
from routes.orders import orders_bp
from routes.products import products_bp
from routes.inventory import inventory_bp
from routes.labor import labor_bp
from routes.dashboard import dashboard_bp


def register_error_handlers(app):
    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        app.logger.exception("Document store failure")
        return jsonify({"message": "Storage error, please try again"}), 500

    @app.errorhandler(DocumentNotFound)
    def handle_missing_document(error):
        return jsonify({"message": str(error)}), 404


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    db.init_app(app)
    jwt.init_app(app)
    swagger.init_app(app)
    cors.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

    app.register_blueprint(webhooks_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(labor_bp)
    app.register_blueprint(dashboard_bp)

    register_error_handlers(app)

    @app.route('/ping')
    def ping():
        return "Ping received", 200

    return app


app = create_app()


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        seed_admin_user()

    app.run(debug=True)
