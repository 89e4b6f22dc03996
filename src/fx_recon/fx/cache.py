"""Thread-safe exchange-rate cache."""

from typing import Callable, Optional
import threading

from ..models.transaction import FXRate, RateRequest
from ..utils.exceptions import RateUnavailable


class RateCache:
    """
    Memoizes resolved rates keyed by ``date|source|target``.

    Entries are never evicted or refreshed. ``get_or_fetch`` serializes
    callers per key, so concurrent lookups of one missing key result in a
    single fetch. A key whose fetch raised :class:`RateUnavailable` is
    remembered as unavailable until :meth:`clear` and is not fetched again.
    """

    def __init__(self) -> None:
        self._rates: dict[str, FXRate] = {}
        self._unavailable: dict[str, RateRequest] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> Optional[FXRate]:
        with self._lock:
            return self._rates.get(key)

    def put(self, key: str, rate: FXRate) -> FXRate:
        """Store ``rate`` unless the key is already cached; return the cached value."""
        with self._lock:
            self._unavailable.pop(key, None)
            return self._rates.setdefault(key, rate)

    def is_unavailable(self, key: str) -> bool:
        with self._lock:
            return key in self._unavailable

    def get_or_fetch(self, key: str, fetch: Callable[[], FXRate]) -> FXRate:
        """
        Return the cached rate for ``key``, calling ``fetch`` on a miss.

        Raises:
            RateUnavailable: If ``fetch`` fails now or failed for this key before
        """
        rate = self.get(key)
        if rate is not None:
            return rate

        with self._key_lock(key):
            rate = self.get(key)
            if rate is not None:
                return rate

            with self._lock:
                failed = self._unavailable.get(key)
            if failed is not None:
                raise RateUnavailable(*failed)

            try:
                return self.put(key, fetch())
            except RateUnavailable as e:
                with self._lock:
                    self._unavailable[key] = RateRequest(
                        e.date, e.source_currency, e.target_currency
                    )
                raise

    def clear(self) -> None:
        with self._lock:
            self._rates.clear()
            self._unavailable.clear()
            self._key_locks.clear()

    def _key_lock(self, key: str) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._rates

    def __len__(self) -> int:
        with self._lock:
            return len(self._rates)
