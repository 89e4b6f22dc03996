"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    EmptyInputSet,
    RateUnavailable,
    RateProviderError,
    SimilarityProviderError,
    ConfigurationError,
    TransactionParseError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "EmptyInputSet",
    "RateUnavailable",
    "RateProviderError",
    "SimilarityProviderError",
    "ConfigurationError",
    "TransactionParseError",
    "setup_logging",
]
