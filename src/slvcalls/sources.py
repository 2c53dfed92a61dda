"""
Price-history providers.

Every provider implements ``latest(n)`` and returns up to ``n`` daily bars
in chronological order.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Protocol

import httpx

from .config import ALPHA_VANTAGE_URL, COMPACT_ROWS, DEFAULT_HTTP_TIMEOUT, DEFAULT_SYMBOL
from .core import PriceBar
from .store import Store

logger = logging.getLogger(__name__)

SERIES_KEY = "Time Series (Daily)"


class PriceSource(Protocol):
    def latest(self, n: int) -> List[PriceBar]:
        ...


def parse_daily_series(payload: dict, n: int) -> List[PriceBar]:
    """Turn an Alpha Vantage TIME_SERIES_DAILY payload into bars.

    The payload lists newest dates first; the first ``n`` are kept and
    returned oldest first.
    """
    series = payload.get(SERIES_KEY) if isinstance(payload, dict) else None
    if not series or not isinstance(series, dict):
        raise ValueError("Invalid API response")
    bars = []
    for day, values in series.items():
        if len(bars) >= n:
            break
        try:
            bars.append(PriceBar(
                date=day,
                close=float(values["4. close"]),
                high=float(values["2. high"]),
                low=float(values["3. low"]),
                volume=int(values["5. volume"]),
            ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid API response: bad row {day}") from e
    bars.reverse()
    return bars


class AlphaVantageSource:
    """Daily bars from the Alpha Vantage REST API."""

    def __init__(self, api_key: str, symbol: str = DEFAULT_SYMBOL,
                 client: Optional[httpx.Client] = None,
                 timeout: float = DEFAULT_HTTP_TIMEOUT):
        self.api_key = api_key
        self.symbol = symbol
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def latest(self, n: int) -> List[PriceBar]:
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": self.symbol,
            "outputsize": "compact" if n <= COMPACT_ROWS else "full",
            "apikey": self.api_key,
        }
        response = self._client.get(ALPHA_VANTAGE_URL, params=params)
        response.raise_for_status()
        bars = parse_daily_series(response.json(), n)
        logger.info("Fetched %d %s bars from Alpha Vantage", len(bars), self.symbol)
        return bars

    def close(self):
        if self._owns_client:
            self._client.close()


class StoredPriceSource:
    """Bars already persisted in the local store."""

    def __init__(self, store: Store):
        self.store = store

    def latest(self, n: int) -> List[PriceBar]:
        return self.store.recent_prices(n)


class CachedPriceSource:
    """Fetch from ``remote`` and persist; fall back to the store on failure."""

    def __init__(self, remote: PriceSource, store: Store):
        self.remote = remote
        self.store = store

    def latest(self, n: int) -> List[PriceBar]:
        try:
            bars = self.remote.latest(n)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching prices: %s; using cached rows", e)
            return self.store.recent_prices(n)
        self.store.upsert_prices(bars)
        return bars
