"""Totals for a finished reconciliation."""

from decimal import Decimal
from typing import Iterable, Sequence

from ..models.transaction import AnyTransaction, MatchedPair, ReconciliationSummary


def currency_totals(transactions: Iterable[AnyTransaction]) -> dict[str, Decimal]:
    """Absolute original amounts summed per original currency."""
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        totals[txn.currency] = totals.get(txn.currency, Decimal("0")) + abs(txn.amount)
    return totals


def _absolute_total(transactions: Iterable[AnyTransaction]) -> Decimal:
    return sum((abs(txn.reporting_amount) for txn in transactions), Decimal("0"))


def build_summary(
    matched: Sequence[MatchedPair],
    unmatched_bank: Sequence[AnyTransaction],
    unmatched_accounts: Sequence[AnyTransaction],
    base_currency: str,
) -> ReconciliationSummary:
    """
    Fold the final buckets into a summary.

    Matched totals are taken from the bank side of each pair.
    """
    matched_bank = [pair.bank_transaction for pair in matched]

    return ReconciliationSummary(
        base_currency=base_currency,
        total_matched=len(matched),
        total_unmatched=len(unmatched_bank) + len(unmatched_accounts),
        unmatched_bank_count=len(unmatched_bank),
        unmatched_accounts_count=len(unmatched_accounts),
        matched_amount=_absolute_total(matched_bank),
        unmatched_bank_amount=_absolute_total(unmatched_bank),
        unmatched_accounts_amount=_absolute_total(unmatched_accounts),
        matched_by_currency=currency_totals(matched_bank),
        unmatched_bank_by_currency=currency_totals(unmatched_bank),
        unmatched_accounts_by_currency=currency_totals(unmatched_accounts),
    )
