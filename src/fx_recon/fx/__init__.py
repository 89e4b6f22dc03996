"""Exchange rates and currency normalization."""

from .cache import RateCache
from .client import RateClient
from .currencies import (
    SUPPORTED_CURRENCIES,
    detect_currency_from_code,
    detect_currency_from_symbol,
    format_amount,
)
from .normalizer import CurrencyNormalizer
from .providers import FrankfurterProvider, ProviderQuote, RateProvider

__all__ = [
    "RateCache",
    "RateClient",
    "CurrencyNormalizer",
    "FrankfurterProvider",
    "ProviderQuote",
    "RateProvider",
    "SUPPORTED_CURRENCIES",
    "detect_currency_from_code",
    "detect_currency_from_symbol",
    "format_amount",
]
