import pytest
from flask_jwt_extended import create_access_token

from core.config import Config
from core.extensions import db
from core.store import get_store
from main import create_app
from routes.auth import create_user
from services.currency import CurrencyTable


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    BCRYPT_LOG_ROUNDS = 4
    WEBHOOK_SECRET = None
    CURRENCY_RATES_TO_NGN = {"NGN": 1, "USD": 1500, "GBP": 1900, "EUR": 1650, "CAD": 1100}
    ADMIN_EMAIL = "admin@example.com"
    ADMIN_PASSWORD = "secret"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return get_store()


def _headers(user):
    token = create_access_token(identity=str(user["id"]), additional_claims={"role": user["role"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(store):
    return _headers(create_user(store, "admin@example.com", "secret", role="admin"))


@pytest.fixture
def staff_headers(store):
    return _headers(create_user(store, "staff@example.com", "secret", role="user"))


@pytest.fixture
def rates():
    return CurrencyTable.from_mapping(TestConfig.CURRENCY_RATES_TO_NGN)


@pytest.fixture
def woo_payload():
    return {
        "id": 1042,
        "status": "processing",
        "currency": "usd",
        "total": "100.00",
        "shipping_total": "12.50",
        "date_created": "2026-03-01T10:00:00",
        "customer_note": "Please gift wrap",
        "billing": {
            "first_name": "Ada",
            "last_name": "Obi",
            "email": "ada@example.com",
            "phone": "08012345678",
        },
        "shipping": {
            "address_1": "12 Allen Avenue",
            "city": "Ikeja",
            "state": "Lagos",
            "country": "NG",
            "postcode": "100001",
        },
        "line_items": [
            {
                "product_id": 77,
                "quantity": 2,
                "price": "40.00",
                "meta_data": [{"key": "_internal_product_id", "value": "bag-1"}],
            },
            {"product_id": 78, "quantity": 1, "price": "20.00"},
        ],
        "meta_data": [
            {"key": "_tracking_number", "value": "TRK123"},
            {"key": "_carrier", "value": "DHL"},
        ],
    }


@pytest.fixture
def catalog():
    return {
        "bag-1": {
            "id": "bag-1",
            "name": "Beaded bag",
            "materials": [
                {"materialId": "beads", "quantity": 2},
                {"materialId": "fabric", "quantity": 1},
            ],
            "timeToMake": 2,
        },
    }


@pytest.fixture
def inventory():
    return {
        "beads": {"id": "beads", "name": "Glass beads", "unit": "pack", "currentQuantity": 10, "lastPurchasePrice": 1000},
        "fabric": {"id": "fabric", "name": "Ankara", "unit": "yard", "currentQuantity": 1, "lastPurchasePrice": 3000},
    }
