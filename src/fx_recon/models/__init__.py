"""Data models for reconciliation."""

from .transaction import (
    DEFAULT_CURRENCY,
    AnyTransaction,
    Transaction,
    ConvertedTransaction,
    RateSource,
    RateRequest,
    FXRate,
    MatchedPair,
    ReconciliationSummary,
    ReconciliationResult,
    rate_cache_key,
)

__all__ = [
    "DEFAULT_CURRENCY",
    "AnyTransaction",
    "Transaction",
    "ConvertedTransaction",
    "RateSource",
    "RateRequest",
    "FXRate",
    "MatchedPair",
    "ReconciliationSummary",
    "ReconciliationResult",
    "rate_cache_key",
]
