"""Spot prices from the Binance ticker endpoint, with a short-lived cache."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx

BINANCE_API_URL = "https://api.binance.com/api/v3/ticker/price"
CACHE_DURATION = 0.5
REQUEST_TIMEOUT = 2.0


class PriceFeedError(Exception):
    """Raised when a price cannot be fetched or parsed."""


@dataclass(frozen=True)
class _CachedPrice:
    price: float
    timestamp: float


class BinanceClient:
    """Async client for Binance spot prices; results are cached for half a second."""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        api_url: str = BINANCE_API_URL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        self._api_url = api_url
        self._clock = clock
        self._cache: dict[str, _CachedPrice] = {}

    async def get_price(self, symbol: str) -> float:
        """Latest price for a symbol such as ``BTCUSDT`` (case-insensitive)."""
        symbol = symbol.upper()

        cached = self._cache.get(symbol)
        if cached is not None and self._clock() - cached.timestamp < CACHE_DURATION:
            return cached.price

        try:
            response = await self._http.get(self._api_url, params={"symbol": symbol})
        except httpx.HTTPError as exc:
            raise PriceFeedError(f"request for {symbol} failed: {exc}") from exc

        if not response.is_success:
            raise PriceFeedError(f"Binance API returned status {response.status_code}")

        try:
            raw = response.json()["price"]
            if not isinstance(raw, str):
                raise TypeError("price is not a string")
            price = float(raw)
        except (ValueError, KeyError, TypeError) as exc:
            raise PriceFeedError(f"invalid price response for {symbol}: {exc}") from exc

        self._cache[symbol] = _CachedPrice(price=price, timestamp=self._clock())
        return price

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "BinanceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


_SYMBOL_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("dogecoin", "doge"), "DOGEUSDT"),
    (("shiba inu", "shib"), "SHIBUSDT"),
    (("cardano", "ada"), "ADAUSDT"),
    (("xrp", "ripple"), "XRPUSDT"),
    # "sol " / "sol?" rather than "sol" so that "resolution" does not match.
    (("solana", "sol ", "sol?"), "SOLUSDT"),
    (("bnb", "binance coin"), "BNBUSDT"),
    # ETH before BTC so "ETH flip BTC" resolves to ETH.
    (("ethereum", "eth"), "ETHUSDT"),
    (("bitcoin", "btc"), "BTCUSDT"),
    (("avalanche", "avax"), "AVAXUSDT"),
    (("polygon", "matic"), "MATICUSDT"),
    (("polkadot", "dot"), "DOTUSDT"),
    (("tron", "trx"), "TRXUSDT"),
    (("litecoin", "ltc"), "LTCUSDT"),
    (("chainlink", "link"), "LINKUSDT"),
    (("near protocol", "near"), "NEARUSDT"),
    (("uniswap", "uni"), "UNIUSDT"),
    (("bitcoin cash", "bch"), "BCHUSDT"),
)


def symbol_from_question(question: str) -> Optional[str]:
    """Binance trading pair a market question is about, or None."""
    text = question.lower()
    for keywords, symbol in _SYMBOL_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return symbol
    return None