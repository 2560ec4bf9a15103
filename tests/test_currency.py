import pytest

from services.currency import Currency, CurrencyTable, convert_to_ngn, map_currency


@pytest.mark.parametrize("code,rate", [("USD", 1500), ("GBP", 1900), ("EUR", 1650), ("CAD", 1100)])
def test_convert_uses_table_rate(rates, code, rate):
    assert convert_to_ngn(12.5, code, rates) == 12.5 * rate
    assert convert_to_ngn(12.5, Currency(code), rates) == 12.5 * rate


def test_ngn_is_identity(rates):
    assert convert_to_ngn(4200, "NGN", rates) == 4200


def test_unknown_currency_passes_through(rates):
    assert convert_to_ngn(99, "JPY", rates) == 99
    assert convert_to_ngn(99, None, rates) == 99


def test_table_pins_ngn_to_one():
    table = CurrencyTable.from_mapping({"NGN": 7, "usd": 1000})
    assert table.rate_for("NGN") == 1
    assert table.rate_for("USD") == 1000


def test_tables_are_independent():
    cheap = CurrencyTable.from_mapping({"USD": 1000})
    dear = CurrencyTable.from_mapping({"USD": 2000})
    assert convert_to_ngn(1, "USD", cheap) == 1000
    assert convert_to_ngn(1, "USD", dear) == 2000


@pytest.mark.parametrize("raw,expected", [
    ("ngn", Currency.NGN),
    ("USD", Currency.USD),
    ("gbp", Currency.GBP),
    ("Eur", Currency.EUR),
    ("cad", Currency.CAD),
    ("JPY", Currency.USD),
    ("", Currency.USD),
    (None, Currency.USD),
])
def test_map_currency(raw, expected):
    assert map_currency(raw) is expected
