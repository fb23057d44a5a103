"""Market data, order books and trading decisions shared by the strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

MAX_BOOK_LEVELS = 50


@dataclass
class MarketData:
    """Snapshot of a binary (YES/NO) prediction market."""

    id: str
    question: str
    end_date: Optional[str] = None
    description: Optional[str] = None
    volume: float = 0.0
    liquidity: float = 0.0
    yes_price: float = 0.0
    no_price: float = 0.0
    volume_24h: float = 0.0
    best_bid: float = 0.0
    best_ask: float = 0.0
    order_book_imbalance: float = 0.0
    asset_ids: list[str] = field(default_factory=list)


@dataclass
class TradingDecision:
    """A trade recommendation with its confidence and reasoning."""

    should_trade: bool
    side: str
    confidence: float
    position_size_pct: float
    reasoning: str = ""
    risks: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OrderLevel:
    """One price level of an order book."""

    price: float
    size: float


@dataclass
class OrderBook:
    """Bids (best first, descending) and asks (best first, ascending).

    Each side holds at most ``MAX_BOOK_LEVELS`` levels; deeper levels are dropped.
    """

    bids: list[OrderLevel] = field(default_factory=list)
    asks: list[OrderLevel] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.bids = list(self.bids)[:MAX_BOOK_LEVELS]
        self.asks = list(self.asks)[:MAX_BOOK_LEVELS]

    def best_bid(self) -> Optional[float]:
        """Price of the top bid, or None when there are no bids."""
        return self.bids[0].price if self.bids else None

    def best_ask(self) -> Optional[float]:
        """Price of the top ask, or None when there are no asks."""
        return self.asks[0].price if self.asks else None

    def total_bid_liquidity(self) -> float:
        """Total size resting on the bid side."""
        return sum(level.size for level in self.bids)

    def total_ask_liquidity(self) -> float:
        """Total size resting on the ask side."""
        return sum(level.size for level in self.asks)