"""
Acceptance rules for pairing a bank transaction with an account transaction.

The amount check is a hard gate, equal references accept outright, and the
remaining rules combine date proximity with description similarity.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from ..config import MatchingConfig, ThresholdConfig
from ..models.transaction import AnyTransaction

# Returns (score, name of the scorer that produced it)
SimilarityFn = Callable[[str, str], tuple[float, str]]

REASON_REFERENCE = "reference"
REASON_DATE_AMOUNT_DESCRIPTION = "date+amount+description"
REASON_DATE_DESCRIPTION = "date+description"
REASON_AMOUNT_DESCRIPTION = "amount+description"


@dataclass(frozen=True)
class MatchDecision:
    """Outcome of evaluating one candidate pair."""

    accepted: bool
    reason: str
    similarity: Optional[float] = None


class MatchRules:
    """Match predicate built from the matching configuration."""

    def __init__(self, config: MatchingConfig):
        self.amount_tolerance = Decimal(str(config.amount_tolerance))
        self.date_tolerance_days = config.date_tolerance_days
        self.thresholds: dict[str, ThresholdConfig] = {
            "lexical": config.lexical,
            "semantic": config.semantic,
        }

    def amount_matches(self, bank_txn: AnyTransaction, account_txn: AnyTransaction) -> bool:
        """Absolute values agree within the tolerance, so sign conventions don't matter."""
        difference = abs(abs(bank_txn.reporting_amount) - abs(account_txn.reporting_amount))
        return difference <= self.amount_tolerance

    def date_matches(self, bank_txn: AnyTransaction, account_txn: AnyTransaction) -> bool:
        return abs((bank_txn.date - account_txn.date).days) <= self.date_tolerance_days

    @staticmethod
    def references_match(bank_txn: AnyTransaction, account_txn: AnyTransaction) -> bool:
        return bool(bank_txn.reference) and bank_txn.reference == account_txn.reference

    def evaluate(
        self,
        bank_txn: AnyTransaction,
        account_txn: AnyTransaction,
        similarity: SimilarityFn,
    ) -> MatchDecision:
        """
        Decide whether two transactions are the same event.

        Args:
            bank_txn: Bank-side transaction
            account_txn: Ledger-side transaction
            similarity: Description scorer, only called once the amount gate passes

        Returns:
            The decision, with the rule that accepted it
        """
        if not self.amount_matches(bank_txn, account_txn):
            return MatchDecision(False, "amount mismatch")

        if self.references_match(bank_txn, account_txn):
            return MatchDecision(True, REASON_REFERENCE)

        date_match = self.date_matches(bank_txn, account_txn)
        score, scorer_name = similarity(bank_txn.description, account_txn.description)
        thresholds = self.thresholds.get(scorer_name, self.thresholds["lexical"])

        # Amount already agrees past the gate above
        if date_match and score > thresholds.date_amount:
            return MatchDecision(True, REASON_DATE_AMOUNT_DESCRIPTION, score)
        if date_match and score > thresholds.date_only:
            return MatchDecision(True, REASON_DATE_DESCRIPTION, score)
        if score > thresholds.amount_only:
            return MatchDecision(True, REASON_AMOUNT_DESCRIPTION, score)

        return MatchDecision(False, "description mismatch", score)
