from core.imports import os, json, timedelta, load_dotenv

load_dotenv()

# Static multipliers to NGN. NGN is always 1.
DEFAULT_CURRENCY_RATES = {
    "NGN": 1,
    "USD": 1500,
    "GBP": 1900,
    "EUR": 1650,
    "CAD": 1100,
}


def load_currency_rates():
    """Default rates, overridden by CURRENCY_RATES (JSON) and then RATE_<CODE>_NGN."""
    rates = dict(DEFAULT_CURRENCY_RATES)

    raw = os.environ.get("CURRENCY_RATES")
    if raw:
        rates.update({code.upper(): float(rate) for code, rate in json.loads(raw).items()})

    for code in list(rates):
        override = os.environ.get(f"RATE_{code}_NGN")
        if override:
            rates[code] = float(override)

    rates["NGN"] = 1
    return rates


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///backoffice.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    WEBHOOK_SECRET = os.environ.get("WEBHOOK_SECRET")
    CURRENCY_RATES_TO_NGN = load_currency_rates()
    DEFAULT_DELIVERY_DAYS = int(os.environ.get("DEFAULT_DELIVERY_DAYS", 14))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")
