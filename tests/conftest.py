"""Shared fixtures and fakes for the test suite."""

from datetime import date
from decimal import Decimal
from typing import Optional
import threading
import time

import pytest

from fx_recon.config import ReconConfig
from fx_recon.fx.providers import ProviderQuote, RateProvider
from fx_recon.models.transaction import Transaction
from fx_recon.similarity.base import EmbeddingProvider
from fx_recon.utils.exceptions import RateProviderError

LATEST_DATE = date(2024, 2, 1)


def make_txn(
    amount,
    description: str = "",
    txn_date: str = "2024-01-01",
    currency: str = "USD",
    reference: Optional[str] = None,
) -> Transaction:
    return Transaction(
        date=date.fromisoformat(txn_date),
        description=description,
        amount=Decimal(str(amount)),
        currency=currency,
        reference=reference,
    )


class FakeRateProvider(RateProvider):
    """In-memory provider that records every call."""

    def __init__(
        self,
        rates: dict,
        missing_dates: Optional[set] = None,
        latest_fails: bool = False,
        delay: float = 0.0,
        historical_error: Optional[Exception] = None,
        latest_error: Optional[Exception] = None,
    ):
        self.rates = rates
        self.missing_dates = missing_dates or set()
        self.latest_fails = latest_fails
        self.delay = delay
        self.historical_error = historical_error
        self.latest_error = latest_error
        self.historical_calls: list[tuple] = []
        self.latest_calls: list[tuple] = []
        self._lock = threading.Lock()

    def historical(self, rate_date, source_currency, target_currency):
        with self._lock:
            self.historical_calls.append((rate_date, source_currency, target_currency))
        if self.delay:
            time.sleep(self.delay)
        if self.historical_error is not None:
            raise self.historical_error
        pair = (source_currency, target_currency)
        if rate_date in self.missing_dates or pair not in self.rates:
            raise RateProviderError(f"no quote for {pair} on {rate_date}")
        return ProviderQuote(rate_date, self.rates[pair])

    def latest(self, source_currency, target_currency):
        with self._lock:
            self.latest_calls.append((source_currency, target_currency))
        if self.latest_error is not None:
            raise self.latest_error
        pair = (source_currency, target_currency)
        if self.latest_fails or pair not in self.rates:
            raise RateProviderError(f"no latest quote for {pair}")
        return ProviderQuote(LATEST_DATE, self.rates[pair])


class FakeEmbeddingProvider(EmbeddingProvider):
    """Returns fixed vectors keyed by normalized text."""

    def __init__(self, vectors: dict, ready: bool = True, error: Optional[Exception] = None):
        self.vectors = vectors
        self.ready = ready
        self.error = error
        self.calls: list[str] = []

    def embed(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.vectors[text]

    def is_ready(self):
        return self.ready


@pytest.fixture
def config() -> ReconConfig:
    return ReconConfig()


@pytest.fixture
def semantic_config() -> ReconConfig:
    cfg = ReconConfig()
    cfg.matching.use_semantic_similarity = True
    return cfg


@pytest.fixture
def eur_usd_provider() -> FakeRateProvider:
    return FakeRateProvider({("EUR", "USD"): 1.1, ("GBP", "USD"): 1.25, ("JPY", "USD"): 0.007})
