"""Money, currency and price record models.

Amounts are integers in the currency's minor unit (cents, pence, ...).
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from enum import Enum

from portfolio_performance.core.exceptions import ValidationError


class Currency(str, Enum):
    """Supported ISO 4217 currencies (GBX is pence sterling)."""

    USD = "USD"
    GBP = "GBP"
    GBX = "GBX"
    EUR = "EUR"
    CAD = "CAD"
    CHF = "CHF"
    JPY = "JPY"
    AUD = "AUD"
    DKK = "DKK"
    HKD = "HKD"
    CNY = "CNY"
    MXN = "MXN"
    INR = "INR"
    BRL = "BRL"
    KRW = "KRW"
    SEK = "SEK"
    PLN = "PLN"
    NOK = "NOK"
    ZAR = "ZAR"
    SGD = "SGD"
    ILS = "ILS"
    CZK = "CZK"
    HUF = "HUF"

    @classmethod
    def from_code(cls, value: str) -> "Currency":
        """Parse a currency code as reported by market data vendors."""
        if value == "GBp":
            return cls.GBX
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f'Could not find currency "{value}"') from None


@dataclass(frozen=True)
class Money:
    """An amount of money in integer minor units."""

    currency: Currency
    amount: int

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        return cls(currency=currency, amount=0)


@dataclass(frozen=True)
class OHLC:
    """Open/high/low/close record for one period."""

    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal


def money_amount_string_to_integer(
    money: str,
    decimal_separator: str = ".",
    expected_decimals: int = 2,
) -> int:
    """
    Convert a decimal amount string to integer minor units.

    "101.11" -> 10111, "90.1" -> 9010, "90" -> 9000. Digits beyond
    expected_decimals are floored away.
    """
    normalized = money.strip().replace(decimal_separator, ".")
    try:
        amount = Decimal(normalized).scaleb(expected_decimals)
    except InvalidOperation:
        raise ValidationError(f"Invalid money amount: {money!r}") from None
    if not amount.is_finite():
        raise ValidationError(f"Invalid money amount: {money!r}")
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))
