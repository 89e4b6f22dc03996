"""Custom exceptions for the reconciliation application."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class EmptyInputSet(ReconciliationError):
    """One of the two transaction sets handed to the engine is empty."""

    def __init__(self, side: str):
        self.side = side
        super().__init__(f"No {side} transactions to reconcile")


class RateUnavailable(ReconciliationError):
    """Neither the exact-date nor the latest rate could be fetched."""

    def __init__(self, date, source_currency: str, target_currency: str):
        self.date = date
        self.source_currency = source_currency
        self.target_currency = target_currency
        super().__init__(
            f"Failed to fetch FX rate for {source_currency} to {target_currency} on {date}"
        )


class RateProviderError(ReconciliationError):
    """A single request to the rate provider failed."""

    pass


class SimilarityProviderError(ReconciliationError):
    """The embedding provider is unavailable or failed."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class TransactionParseError(ReconciliationError):
    """Error parsing a transaction file."""

    pass
