"""Snipe crypto up/down markets when the spot price has already moved past the strike."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional

from marketsniper.arbitrage import NoAction, Snipe, TradeAction
from marketsniper.models import MarketData
from marketsniper.pricefeed import BinanceClient, PriceFeedError, symbol_from_question

logger = logging.getLogger(__name__)

DEFAULT_SNIPE_SIZE_USD = 1.0
MAX_ENTRY_PRICE = 0.99
ABOVE_KEYWORDS = ("above", "over", "greater than")

_EDGE_JUNK = re.compile(r"^[^0-9.,]+|[^0-9.,]+$")


def _clean_number(word: str) -> str:
    """Strip everything but digits, dots and commas from both ends, then drop commas."""
    return _EDGE_JUNK.sub("", word).replace(",", "")


def _parse_number(text: str) -> Optional[float]:
    # float() would accept digit separators such as "1_000"; prices never use them.
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def extract_strike_price(question: str) -> Optional[float]:
    """Strike price of a question such as "Bitcoin above $65,500.00 at 5:00 PM ET?".

    The number right after the first "$" is used; without a "$", the first
    positive number in the question.
    """
    if "$" not in question:
        for word in question.split():
            price = _parse_number(_clean_number(word))
            if price is not None and price > 0.0:
                return price
        return None

    after_dollar = question.split("$")[1].split()
    if not after_dollar:
        return None
    return _parse_number(_clean_number(after_dollar[0]))


@dataclass
class PredictiveConfig:
    """Settings for the predictive strategy."""

    enabled: bool
    binance_signal_threshold_pct: float


class PredictiveStrategy:
    """Trades "above/over" price markets using the live Binance spot price as a signal."""

    def __init__(self, config: PredictiveConfig, binance: BinanceClient) -> None:
        self.config = config
        self.binance = binance

    async def check_opportunity(self, market: MarketData) -> TradeAction:
        """Snipe YES when spot is clearly above the strike, NO when clearly below."""
        if not self.config.enabled:
            return NoAction()

        symbol = symbol_from_question(market.question)
        if symbol is None:
            return NoAction()

        strike = extract_strike_price(market.question)
        if strike is None:
            logger.debug("Failed to extract strike price from: %s", market.question)
            return NoAction()

        try:
            spot = await self.binance.get_price(symbol)
        except PriceFeedError as exc:
            logger.debug("Failed to fetch Binance price for %s: %s", symbol, exc)
            return NoAction()

        question = market.question.lower()
        if not any(keyword in question for keyword in ABOVE_KEYWORDS):
            return NoAction()

        band = self.config.binance_signal_threshold_pct / 100.0
        if spot > strike * (1.0 + band):
            side, price = "YES", market.yes_price
        elif spot < strike * (1.0 - band):
            side, price = "NO", market.no_price
        else:
            return NoAction()

        if price >= MAX_ENTRY_PRICE:
            return NoAction()

        diff_pct = abs((spot - strike) / strike) * 100.0 if strike != 0.0 else math.inf
        logger.info(
            "Predictive signal (%s): %s | Binance %.2f | strike %.2f | diff %.2f%%",
            side, market.question, spot, strike, diff_pct,
        )
        return Snipe(market_id=market.id, side=side, price=price, size_usd=DEFAULT_SNIPE_SIZE_USD)