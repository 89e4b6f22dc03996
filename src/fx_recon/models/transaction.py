"""Data models for transactions, exchange rates and reconciliation results."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import NamedTuple, Optional, Union

DEFAULT_CURRENCY = "USD"


def rate_cache_key(rate_date: date, source_currency: str, target_currency: str) -> str:
    """Build the cache key identifying one resolvable exchange rate."""
    return f"{rate_date.isoformat()}|{source_currency}|{target_currency}"


@dataclass(frozen=True)
class Transaction:
    """
    A normalized transaction from either side of a reconciliation.

    Produced by ingestion and never modified afterwards. The sign of
    ``amount`` follows whatever convention the source uses.
    """

    date: date
    description: str
    amount: Decimal
    currency: str = DEFAULT_CURRENCY
    reference: Optional[str] = None

    @property
    def reporting_amount(self) -> Decimal:
        """Amount used for matching and totals."""
        return self.amount


@dataclass(frozen=True)
class ConvertedTransaction:
    """A transaction whose amount has been expressed in a base currency."""

    transaction: Transaction
    converted_amount: Decimal
    base_currency: str
    # None when the rate lookup failed and the amount was left as-is
    conversion_rate: Optional[float] = None

    @property
    def date(self) -> date:
        return self.transaction.date

    @property
    def description(self) -> str:
        return self.transaction.description

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount

    @property
    def currency(self) -> str:
        return self.transaction.currency

    @property
    def reference(self) -> Optional[str]:
        return self.transaction.reference

    @property
    def reporting_amount(self) -> Decimal:
        return self.converted_amount

    @property
    def is_converted(self) -> bool:
        return self.conversion_rate is not None


AnyTransaction = Union[Transaction, ConvertedTransaction]


class RateSource(Enum):
    """Where an exchange rate came from."""

    NO_CONVERSION = "no-conversion"
    EXACT_DATE = "api-exact-date"
    LATEST_FALLBACK = "api-latest-fallback"


class RateRequest(NamedTuple):
    """A (date, source, target) triple to resolve."""

    date: date
    source_currency: str
    target_currency: str

    @property
    def cache_key(self) -> str:
        return rate_cache_key(self.date, self.source_currency, self.target_currency)


@dataclass(frozen=True)
class FXRate:
    """
    Exchange rate for converting ``source_currency`` into ``target_currency``.

    ``date`` is the date the rate was requested for; ``effective_date`` is
    the date the provider says the quote applies to, which differs from the
    request on a latest-rate fallback.
    """

    date: date
    source_currency: str
    target_currency: str
    rate: float
    source: RateSource
    effective_date: Optional[date] = None

    def __post_init__(self) -> None:
        if self.rate <= 0:
            raise ValueError(f"FX rate must be positive, got {self.rate}")

    @property
    def cache_key(self) -> str:
        return rate_cache_key(self.date, self.source_currency, self.target_currency)


@dataclass(frozen=True)
class MatchedPair:
    """One bank transaction paired with one account transaction."""

    bank_transaction: AnyTransaction
    account_transaction: AnyTransaction
    match_reason: str
    similarity: Optional[float] = None

    @property
    def description(self) -> str:
        """Bank description, or the account description when the bank one is empty."""
        return self.bank_transaction.description or self.account_transaction.description

    @property
    def date(self) -> date:
        return self.bank_transaction.date

    @property
    def bank_amount(self) -> Decimal:
        return self.bank_transaction.reporting_amount

    @property
    def account_amount(self) -> Decimal:
        return self.account_transaction.reporting_amount


@dataclass
class ReconciliationSummary:
    """Counts and absolute-value totals for a reconciliation run."""

    base_currency: str

    total_matched: int
    total_unmatched: int
    unmatched_bank_count: int
    unmatched_accounts_count: int

    # Absolute sums of reporting amounts
    matched_amount: Decimal
    unmatched_bank_amount: Decimal
    unmatched_accounts_amount: Decimal

    # Absolute sums of original amounts keyed by original currency
    matched_by_currency: dict[str, Decimal] = field(default_factory=dict)
    unmatched_bank_by_currency: dict[str, Decimal] = field(default_factory=dict)
    unmatched_accounts_by_currency: dict[str, Decimal] = field(default_factory=dict)

    @property
    def total_bank_transactions(self) -> int:
        return self.total_matched + self.unmatched_bank_count

    @property
    def total_account_transactions(self) -> int:
        return self.total_matched + self.unmatched_accounts_count

    @property
    def match_rate_bank(self) -> float:
        """Percentage of bank transactions matched."""
        if self.total_bank_transactions == 0:
            return 0.0
        return (self.total_matched / self.total_bank_transactions) * 100

    @property
    def match_rate_accounts(self) -> float:
        """Percentage of account transactions matched."""
        if self.total_account_transactions == 0:
            return 0.0
        return (self.total_matched / self.total_account_transactions) * 100


@dataclass
class ReconciliationResult:
    """Output of a reconciliation run."""

    matched: list[MatchedPair]
    unmatched_bank: list[AnyTransaction]
    unmatched_accounts: list[AnyTransaction]
    summary: ReconciliationSummary
    processing_time_seconds: float = 0.0
