"""Currency metadata, detection and formatting helpers."""

from decimal import Decimal
from typing import NamedTuple, Optional, Union


class Currency(NamedTuple):
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCIES = (
    Currency("USD", "US Dollar", "$"),
    Currency("EUR", "Euro", "€"),
    Currency("GBP", "British Pound", "£"),
    Currency("JPY", "Japanese Yen", "¥"),
    Currency("CAD", "Canadian Dollar", "C$"),
    Currency("AUD", "Australian Dollar", "A$"),
    Currency("CHF", "Swiss Franc", "CHF"),
    Currency("CNY", "Chinese Yuan", "¥"),
    Currency("INR", "Indian Rupee", "₹"),
    Currency("SGD", "Singapore Dollar", "S$"),
)

# Ambiguous symbols resolve to the first currency that uses them
_SYMBOL_TO_CODE = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "₹": "INR",
}

_DISPLAY_SYMBOLS = {
    currency.code: currency.symbol + " " if currency.symbol == currency.code else currency.symbol
    for currency in SUPPORTED_CURRENCIES
}


def detect_currency_from_symbol(text: str) -> Optional[str]:
    """Return the ISO code for the first known currency symbol found in ``text``."""
    for symbol, code in _SYMBOL_TO_CODE.items():
        if symbol in text:
            return code
    return None


def detect_currency_from_code(text: str) -> Optional[str]:
    """Return the first supported ISO code appearing in ``text``, case-insensitively."""
    upper_text = text.upper()
    for currency in SUPPORTED_CURRENCIES:
        if currency.code in upper_text:
            return currency.code
    return None


def format_amount(amount: Union[Decimal, float], currency: str) -> str:
    """Format the absolute amount with the currency symbol, e.g. ``€1,234.50``."""
    symbol = _DISPLAY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{abs(amount):,.2f}"
