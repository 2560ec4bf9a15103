from dataclasses import dataclass, field
from enum import Enum


class Currency(str, Enum):
    NGN = "NGN"
    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"
    CAD = "CAD"


@dataclass(frozen=True)
class CurrencyTable:
    """Multipliers to NGN keyed by currency code. NGN is pinned to 1."""
    rates: dict = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping):
        rates = {str(code).upper(): float(rate) for code, rate in (mapping or {}).items()}
        rates[Currency.NGN.value] = 1.0
        return cls(rates=rates)

    def rate_for(self, currency):
        if currency is None:
            return None
        code = currency.value if isinstance(currency, Currency) else str(currency).upper()
        return self.rates.get(code)


def convert_to_ngn(amount: float, currency, table: CurrencyTable) -> float:
    """Convert `amount` to NGN. Unknown currencies pass the amount through unchanged."""
    rate = table.rate_for(currency)
    if rate is None:
        return amount
    return amount * rate


def map_currency(code) -> Currency:
    try:
        return Currency(str(code or "").upper())
    except ValueError:
        return Currency.USD
