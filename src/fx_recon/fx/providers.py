"""
Exchange-rate provider boundary.

The client only needs two lookups from a provider: the quote for an exact
historical date and the latest available quote.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, NamedTuple, Optional
import logging

import httpx

from ..utils.exceptions import RateProviderError

logger = logging.getLogger(__name__)

FRANKFURTER_URL = "https://api.frankfurter.app"


class ProviderQuote(NamedTuple):
    """A rate and the date the provider says it applies to."""

    date: date
    rate: float


class RateProvider(ABC):
    """Source of historical exchange rates."""

    @abstractmethod
    def historical(
        self, rate_date: date, source_currency: str, target_currency: str
    ) -> ProviderQuote:
        """
        Quote for an exact date.

        Raises:
            RateProviderError: If there is no quote for that date or the request fails
        """
        pass

    @abstractmethod
    def latest(self, source_currency: str, target_currency: str) -> ProviderQuote:
        """
        Most recent available quote.

        Raises:
            RateProviderError: If the request fails
        """
        pass


class FrankfurterProvider(RateProvider):
    """Rates from the Frankfurter API (ECB reference rates)."""

    def __init__(
        self,
        base_url: str = FRANKFURTER_URL,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            base_url: API root, without a trailing slash
            timeout: Request timeout in seconds
            client: Preconfigured HTTP client (its lifecycle stays with the caller)
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def historical(
        self, rate_date: date, source_currency: str, target_currency: str
    ) -> ProviderQuote:
        return self._get(rate_date.isoformat(), source_currency, target_currency)

    def latest(self, source_currency: str, target_currency: str) -> ProviderQuote:
        return self._get("latest", source_currency, target_currency)

    def _get(self, path: str, source_currency: str, target_currency: str) -> ProviderQuote:
        url = f"{self.base_url}/{path}"
        try:
            response = self._client.get(
                url, params={"from": source_currency, "to": target_currency}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise RateProviderError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            raise RateProviderError(f"Invalid JSON from {url}: {e}") from e

        return self._parse_quote(payload, target_currency, url)

    @staticmethod
    def _parse_quote(payload: Any, target_currency: str, url: str) -> ProviderQuote:
        try:
            rate = float(payload["rates"][target_currency])
            quote_date = date.fromisoformat(payload["date"])
        except (KeyError, TypeError, ValueError) as e:
            raise RateProviderError(f"Unexpected payload from {url}: {payload!r}") from e

        if rate <= 0:
            raise RateProviderError(f"Non-positive rate {rate} from {url}")

        return ProviderQuote(date=quote_date, rate=rate)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "FrankfurterProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
