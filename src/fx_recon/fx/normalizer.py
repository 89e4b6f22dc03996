"""Conversion of transaction amounts into a reporting currency."""

from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence
import logging

from ..models.transaction import (
    ConvertedTransaction,
    RateRequest,
    Transaction,
)
from ..utils.exceptions import RateUnavailable
from .client import RateClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class CurrencyNormalizer:
    """
    Produces :class:`ConvertedTransaction` records in a base currency.

    A failed rate lookup never drops a transaction: the record keeps its
    original amount and ``conversion_rate`` stays ``None``.
    """

    def __init__(self, rate_client: RateClient):
        self.rate_client = rate_client

    def convert(self, transaction: Transaction, base_currency: str) -> ConvertedTransaction:
        """Convert one transaction into ``base_currency``."""
        if transaction.currency == base_currency:
            return ConvertedTransaction(
                transaction=transaction,
                converted_amount=transaction.amount,
                base_currency=base_currency,
                conversion_rate=1.0,
            )

        try:
            fx_rate = self.rate_client.rate(transaction.date, transaction.currency, base_currency)
        except RateUnavailable as e:
            logger.warning(f"Leaving amount unconverted: {e}")
            return self._unconverted(transaction, base_currency)

        return ConvertedTransaction(
            transaction=transaction,
            converted_amount=transaction.amount * Decimal(str(fx_rate.rate)),
            base_currency=base_currency,
            conversion_rate=fx_rate.rate,
        )

    def convert_batch(
        self,
        transactions: Sequence[Transaction],
        base_currency: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> list[ConvertedTransaction]:
        """
        Convert many transactions, fetching each distinct rate once up front.

        Args:
            transactions: Transactions to convert
            base_currency: Reporting currency
            on_progress: Called as ``on_progress(done, total)`` after each record

        Returns:
            Converted records in input order
        """
        self._prime_cache(transactions, base_currency)

        total = len(transactions)
        converted: list[ConvertedTransaction] = []
        for done, transaction in enumerate(transactions, start=1):
            converted.append(self.convert(transaction, base_currency))
            if on_progress:
                on_progress(done, total)

        failed = sum(1 for txn in converted if not txn.is_converted)
        if failed:
            logger.warning(f"{failed} of {total} transactions could not be converted to {base_currency}")

        return converted

    def _prime_cache(self, transactions: Iterable[Transaction], base_currency: str) -> None:
        """Warm the rate cache; unavailable keys stay marked as such in the cache."""
        requests = [
            RateRequest(txn.date, txn.currency, base_currency)
            for txn in transactions
            if txn.currency != base_currency
        ]
        if requests:
            self.rate_client.batch_rates(requests, return_exceptions=True)

    @staticmethod
    def _unconverted(transaction: Transaction, base_currency: str) -> ConvertedTransaction:
        return ConvertedTransaction(
            transaction=transaction,
            converted_amount=transaction.amount,
            base_currency=base_currency,
            conversion_rate=None,
        )
