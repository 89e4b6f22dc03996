"""
Greedy matching engine for transaction reconciliation.

Bank transactions are visited from last to first; each takes the first
remaining account transaction (also scanned from last to first) that the
match rules accept. Matched transactions leave the candidate pool
immediately. This is first-fit, not a globally optimal assignment.
"""

from datetime import datetime
from typing import Callable, Optional, Sequence
import logging

from ..config import ReconConfig
from ..fx.normalizer import CurrencyNormalizer
from ..models.transaction import (
    AnyTransaction,
    MatchedPair,
    ReconciliationResult,
    Transaction,
)
from ..similarity import EmbeddingProvider, LexicalScorer, SimilarityScorer, build_scorer
from ..utils.exceptions import EmptyInputSet
from .aggregator import build_summary
from .rules import MatchRules

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """
    Pairs bank transactions with account transactions one-to-one.

    Similarity is scored with the configured strategy; when the semantic
    strategy is not ready or its provider fails, the lexical scorer and the
    lexical thresholds are used instead.
    """

    def __init__(
        self,
        config: ReconConfig,
        scorer: Optional[SimilarityScorer] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        normalizer: Optional[CurrencyNormalizer] = None,
    ):
        """
        Initialize the reconciliation engine.

        Args:
            config: Application configuration
            scorer: Similarity strategy; built from ``config.matching`` when omitted
            embedding_provider: Used to build a semantic scorer when enabled
            normalizer: Converts mixed-currency input to the base currency
        """
        self.config = config
        self.rules = MatchRules(config.matching)
        self.scorer = scorer or build_scorer(config.matching, embedding_provider)
        self.fallback_scorer = LexicalScorer()
        self.normalizer = normalizer
        self._fallback_reported = False

    @property
    def base_currency(self) -> str:
        return self.config.currency.base_currency

    def reconcile(
        self,
        bank_transactions: Sequence[AnyTransaction],
        account_transactions: Sequence[AnyTransaction],
        on_progress: Optional[Callable[[int, int], None]] = None,
    ) -> ReconciliationResult:
        """
        Perform reconciliation between bank and account transactions.

        Args:
            bank_transactions: Bank statement side
            account_transactions: Ledger side
            on_progress: Called as ``on_progress(done, total)`` after each bank transaction

        Returns:
            Matched pairs, residual transactions and summary

        Raises:
            EmptyInputSet: If either side has no transactions
        """
        if not bank_transactions:
            raise EmptyInputSet("bank")
        if not account_transactions:
            raise EmptyInputSet("account")

        start_time = datetime.now()
        self._fallback_reported = False
        self.scorer.clear()
        logger.info(
            f"Starting reconciliation: {len(bank_transactions)} bank txns, "
            f"{len(account_transactions)} account txns"
        )
        if self.scorer.name == "semantic" and not self.scorer.is_ready():
            logger.info("Embedding provider not ready, using lexical similarity")

        working = self._to_base_currency(list(bank_transactions) + list(account_transactions))
        unmatched_bank = working[: len(bank_transactions)]
        unmatched_accounts = working[len(bank_transactions) :]

        matched: list[MatchedPair] = []
        total = len(unmatched_bank)

        # Reverse scans keep earlier indices valid after a deletion
        for done, i in enumerate(range(len(unmatched_bank) - 1, -1, -1), start=1):
            bank_txn = unmatched_bank[i]

            for j in range(len(unmatched_accounts) - 1, -1, -1):
                account_txn = unmatched_accounts[j]
                decision = self.rules.evaluate(bank_txn, account_txn, self._similarity)
                if not decision.accepted:
                    continue

                logger.debug(
                    f"Matched {bank_txn.date} {bank_txn.description!r} with "
                    f"{account_txn.date} {account_txn.description!r} ({decision.reason})"
                )
                matched.append(
                    MatchedPair(
                        bank_transaction=bank_txn,
                        account_transaction=account_txn,
                        match_reason=decision.reason,
                        similarity=decision.similarity,
                    )
                )
                del unmatched_bank[i]
                del unmatched_accounts[j]
                break

            if on_progress:
                on_progress(done, total)

        summary = build_summary(matched, unmatched_bank, unmatched_accounts, self.base_currency)
        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Reconciliation complete in {elapsed:.2f}s: {len(matched)} matches, "
            f"{len(unmatched_bank)} bank-only, {len(unmatched_accounts)} account-only"
        )

        return ReconciliationResult(
            matched=matched,
            unmatched_bank=unmatched_bank,
            unmatched_accounts=unmatched_accounts,
            summary=summary,
            processing_time_seconds=elapsed,
        )

    def _similarity(self, first: str, second: str) -> tuple[float, str]:
        """Score with the configured strategy, falling back to lexical."""
        scorer = self.scorer
        if scorer is not self.fallback_scorer and scorer.is_ready():
            try:
                return scorer.score(first, second), scorer.name
            except Exception as e:
                if not self._fallback_reported:
                    logger.warning(f"{scorer.name} similarity failed, using lexical: {e}")
                    self._fallback_reported = True
                else:
                    logger.debug(f"{scorer.name} similarity failed, using lexical: {e}")

        return self.fallback_scorer.score(first, second), self.fallback_scorer.name

    def _to_base_currency(self, transactions: Sequence[AnyTransaction]) -> list[AnyTransaction]:
        """
        Return a working copy with plain transactions converted when needed.

        Both sides go through one ``convert_batch`` call so every distinct
        rate is requested once per run. Already converted records are kept
        as they are.
        """
        working = list(transactions)
        plain = [
            index
            for index, txn in enumerate(working)
            if isinstance(txn, Transaction) and txn.currency != self.base_currency
        ]
        if not plain:
            return working

        if self.normalizer is None:
            logger.warning(
                f"{len(plain)} transactions are not in {self.base_currency} "
                f"and no currency normalizer is configured; comparing raw amounts"
            )
            return working

        logger.info(f"Converting {len(plain)} transactions to {self.base_currency}")
        converted = self.normalizer.convert_batch(
            [working[index] for index in plain], self.base_currency
        )
        for index, txn in zip(plain, converted):
            working[index] = txn
        return working
