"""Intra-market YES/NO arbitrage detection and order book depth analysis."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from marketsniper.models import MarketData, OrderBook, OrderLevel
from marketsniper.position_sizing import (
    PositionSizer,
    estimate_volatility,
    estimate_win_probability,
)

logger = logging.getLogger(__name__)

FEE_PER_TRADE_BPS = 40
TOTAL_FEE_BPS = FEE_PER_TRADE_BPS * 2
SIZING_CAPITAL = 1000.0
CLOSE_CALL_WINDOW_BPS = 50
SAMPLE_LOG_RATE = 0.001

_BPS = 10000.0
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _to_bps(fraction: float) -> int:
    """Convert a fraction to whole basis points, truncating toward zero."""
    value = fraction * _BPS
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


@dataclass
class ArbitrageConfig:
    """Settings for the arbitrage strategy."""

    min_edge_bps: int
    max_position_size_usd: float
    use_dynamic_sizing: bool
    kelly_fraction: float
    min_position_pct: float
    max_position_pct: float


@dataclass(frozen=True)
class BuyBoth:
    """Buy both YES and NO of one market for a locked-in profit."""

    market_id: str
    yes_price: float
    no_price: float
    size_usd: float
    expected_profit_bps: int


@dataclass(frozen=True)
class Snipe:
    """Buy one side ("YES" or "NO") of a market."""

    market_id: str
    side: str
    price: float
    size_usd: float


@dataclass(frozen=True)
class NoAction:
    """No trade."""


TradeAction = Union[BuyBoth, Snipe, NoAction]


@dataclass(frozen=True)
class OrderbookDepth:
    """Depth analysis of one order book for a given order size."""

    total_bid_liquidity: float
    total_ask_liquidity: float
    weighted_bid_price: float
    weighted_ask_price: float
    slippage_bps: int
    imbalance_ratio: float


def _weighted_price(levels: Sequence[OrderLevel], order_size_usd: float) -> tuple[float, float]:
    """Average fill price walking the levels, and the size filled."""
    if not levels:
        return 0.0, 0.0

    remaining = order_size_usd
    total_cost = 0.0
    filled = 0.0
    for level in levels:
        if remaining <= 0.0:
            break
        take = min(level.size, remaining)
        total_cost += take * level.price
        filled += take
        remaining -= take

    if filled > 0.0:
        return total_cost / filled, filled
    return levels[0].price, 0.0


class ArbitrageStrategy:
    """Finds markets where YES + NO costs less than the $1 payout, after fees."""

    def __init__(self, config: ArbitrageConfig) -> None:
        self.config = config
        self._sizer: Optional[PositionSizer] = (
            PositionSizer(config.kelly_fraction, config.min_position_pct, config.max_position_pct)
            if config.use_dynamic_sizing
            else None
        )

    def check_opportunity(self, market: MarketData) -> TradeAction:
        """Compare the best YES and NO asks against the $1 payout net of fees."""
        yes_ask = market.yes_price
        no_ask = market.no_price
        total_cost = yes_ask + no_ask

        spread_bps = _to_bps(1.0 - total_cost)
        net_spread_bps = spread_bps - TOTAL_FEE_BPS

        if random.random() < SAMPLE_LOG_RATE:
            logger.info(
                "Sample check [%s]: yes=%.3f no=%.3f cost=%.3f spread=%dbps fees=%dbps net=%dbps",
                market.question, yes_ask, no_ask, total_cost, spread_bps, TOTAL_FEE_BPS, net_spread_bps,
            )

        if net_spread_bps <= self.config.min_edge_bps:
            if net_spread_bps > self.config.min_edge_bps - CLOSE_CALL_WINDOW_BPS:
                logger.debug(
                    "Close call [%s]: net edge %d bps (target %d)",
                    market.question, net_spread_bps, self.config.min_edge_bps,
                )
            return NoAction()

        if yes_ask <= 0.0 or no_ask <= 0.0:
            logger.debug("Missing prices for %s: YES=%.4f, NO=%.4f", market.id, yes_ask, no_ask)
            return NoAction()

        size_usd = self._position_size(net_spread_bps, market.id, 0, True)
        return BuyBoth(
            market_id=market.id,
            yes_price=yes_ask,
            no_price=no_ask,
            size_usd=size_usd,
            expected_profit_bps=net_spread_bps,
        )

    def _position_size(self, edge_bps: int, market_id: str, slippage_bps: int, is_atomic: bool) -> float:
        if self._sizer is None:
            return self.config.max_position_size_usd
        win_prob = estimate_win_probability(is_atomic, slippage_bps)
        volatility = estimate_volatility(market_id)
        return self._sizer.calculate_optimal_size(edge_bps, win_prob, SIZING_CAPITAL, volatility)

    def analyze_orderbook_depth(self, orderbook: OrderBook, order_size_usd: float) -> OrderbookDepth:
        """Weighted fill prices, slippage and liquidity imbalance for an order size."""
        weighted_bid, _ = _weighted_price(orderbook.bids, order_size_usd)
        weighted_ask, _ = _weighted_price(orderbook.asks, order_size_usd)

        best_bid = orderbook.best_bid()
        best_bid = 0.0 if best_bid is None else best_bid
        best_ask = orderbook.best_ask()
        best_ask = 1.0 if best_ask is None else best_ask

        bid_slippage = _to_bps((best_bid - weighted_bid) / best_bid) if best_bid > 0.0 else 0
        ask_slippage = _to_bps((weighted_ask - best_ask) / best_ask) if best_ask > 0.0 else 0

        total_bid = orderbook.total_bid_liquidity()
        total_ask = orderbook.total_ask_liquidity()
        imbalance = total_bid / total_ask if total_ask > 0.0 else 0.0

        return OrderbookDepth(
            total_bid_liquidity=total_bid,
            total_ask_liquidity=total_ask,
            weighted_bid_price=weighted_bid,
            weighted_ask_price=weighted_ask,
            slippage_bps=bid_slippage + ask_slippage,
            imbalance_ratio=imbalance,
        )

    def check_orderbook_opportunity(
        self,
        market_id: str,
        yes_orderbook: OrderBook,
        no_orderbook: OrderBook,
        order_size_usd: float,
    ) -> TradeAction:
        """Arbitrage check using depth-weighted asks, half the order on each side."""
        yes_depth = self.analyze_orderbook_depth(yes_orderbook, order_size_usd / 2.0)
        no_depth = self.analyze_orderbook_depth(no_orderbook, order_size_usd / 2.0)

        yes_ask = yes_depth.weighted_ask_price
        no_ask = no_depth.weighted_ask_price
        if yes_ask <= 0.0 or no_ask <= 0.0:
            return NoAction()

        spread_bps = _to_bps(1.0 - (yes_ask + no_ask))
        net_edge_bps = spread_bps - (yes_depth.slippage_bps + no_depth.slippage_bps)

        if net_edge_bps > self.config.min_edge_bps:
            return BuyBoth(
                market_id=market_id,
                yes_price=yes_ask,
                no_price=no_ask,
                size_usd=order_size_usd,
                expected_profit_bps=net_edge_bps,
            )
        return NoAction()

    def calculate_slippage(self, orderbook: OrderBook, order_size_usd: float) -> int:
        """Total slippage in basis points for an order of this size."""
        return self.analyze_orderbook_depth(orderbook, order_size_usd).slippage_bps