"""
Exchange-rate client.

Resolves a rate for a (date, source, target) triple through the cache,
asking the provider for the exact date first and for the latest quote if
that fails.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Callable, Iterable, Optional, Union
import logging

from ..config import ReconConfig
from ..models.transaction import FXRate, RateRequest, RateSource, rate_cache_key
from ..utils.exceptions import RateProviderError, RateUnavailable
from .cache import RateCache
from .providers import FrankfurterProvider, ProviderQuote, RateProvider

logger = logging.getLogger(__name__)


class RateClient:
    """Cached access to a :class:`RateProvider`."""

    def __init__(
        self,
        provider: RateProvider,
        cache: Optional[RateCache] = None,
        max_workers: int = 8,
    ):
        """
        Args:
            provider: Where missing rates are fetched from
            cache: Shared cache; a private one is created when omitted
            max_workers: Upper bound on concurrent fetches in ``batch_rates``
        """
        self.provider = provider
        self.cache = cache if cache is not None else RateCache()
        self.max_workers = max_workers

    @classmethod
    def from_config(cls, config: ReconConfig, cache: Optional[RateCache] = None) -> "RateClient":
        provider = FrankfurterProvider(
            base_url=config.fx.provider_url,
            timeout=config.fx.timeout_seconds,
        )
        return cls(provider, cache=cache, max_workers=config.fx.max_workers)

    def rate(self, rate_date: date, source_currency: str, target_currency: str) -> FXRate:
        """
        Resolve the rate converting ``source_currency`` into ``target_currency``.

        Raises:
            RateUnavailable: If both the exact-date and latest lookups fail, now
                or on an earlier call for the same key
        """
        if source_currency == target_currency:
            return FXRate(
                date=rate_date,
                source_currency=source_currency,
                target_currency=target_currency,
                rate=1.0,
                source=RateSource.NO_CONVERSION,
                effective_date=rate_date,
            )

        key = rate_cache_key(rate_date, source_currency, target_currency)
        return self.cache.get_or_fetch(
            key, lambda: self._fetch(rate_date, source_currency, target_currency)
        )

    def batch_rates(
        self,
        requests: Iterable[Union[RateRequest, tuple]],
        return_exceptions: bool = False,
    ) -> list[Union[FXRate, RateUnavailable]]:
        """
        Resolve many rates, fetching each distinct key once.

        Requests are deduplicated by cache key (first occurrence wins the
        position in the result) and resolved concurrently. Afterwards the
        cache holds every rate that could be fetched.

        Args:
            requests: (date, source, target) triples
            return_exceptions: Put ``RateUnavailable`` errors in the result
                list instead of raising the first one

        Returns:
            One entry per distinct request
        """
        unique: dict[str, RateRequest] = {}
        for request in requests:
            request = RateRequest(*request)
            unique.setdefault(request.cache_key, request)

        if not unique:
            return []

        pending = list(unique.values())
        logger.debug(f"Resolving {len(pending)} distinct FX rates")

        workers = min(self.max_workers, len(pending))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fx-rate") as executor:
            futures = [executor.submit(self.rate, *request) for request in pending]

        results: list[Union[FXRate, RateUnavailable]] = []
        for future in futures:
            try:
                results.append(future.result())
            except RateUnavailable as e:
                if not return_exceptions:
                    raise
                results.append(e)

        return results

    def clear_cache(self) -> None:
        self.cache.clear()

    def _fetch(self, rate_date: date, source_currency: str, target_currency: str) -> FXRate:
        logger.debug(f"FX cache miss: {source_currency}->{target_currency} on {rate_date}")
        try:
            quote = self._quote(self.provider.historical, rate_date, source_currency, target_currency)
            source = RateSource.EXACT_DATE
        except Exception as e:
            logger.info(
                f"No {source_currency}->{target_currency} quote for {rate_date}, "
                f"trying latest: {e}"
            )
            try:
                quote = self._quote(self.provider.latest, source_currency, target_currency)
                source = RateSource.LATEST_FALLBACK
            except Exception as latest_error:
                logger.error(
                    f"FX rate unavailable for {source_currency}->{target_currency} "
                    f"on {rate_date}: {latest_error}"
                )
                raise RateUnavailable(rate_date, source_currency, target_currency) from latest_error

        return FXRate(
            date=rate_date,
            source_currency=source_currency,
            target_currency=target_currency,
            rate=quote.rate,
            source=source,
            effective_date=quote.date,
        )

    @staticmethod
    def _quote(lookup: Callable[..., ProviderQuote], *args) -> ProviderQuote:
        """Call one provider lookup; any failure, including a non-positive rate, raises."""
        quote = lookup(*args)
        if not quote.rate > 0:
            raise RateProviderError(f"Provider returned a non-positive rate: {quote.rate}")
        return quote
