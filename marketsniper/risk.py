"""Risk limits, stop losses and open-position bookkeeping."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from marketsniper.models import TradingDecision

logger = logging.getLogger(__name__)

ASSUMED_CAPITAL = 1000.0
MIN_CONFIDENCE = 0.6


@dataclass
class RiskConfig:
    """Risk limits; percentages are fractions of the assumed capital."""

    max_position_size_pct: float
    max_portfolio_exposure_pct: float
    stop_loss_pct: float
    min_hold_time_secs: int
    use_dynamic_sl: bool


@dataclass
class Position:
    """An open position in one market."""

    market_id: str
    trade_id: str
    side: str
    size_usd: float
    entry_price: float
    timestamp: int


class RiskManager:
    """Checks entries against limits and tracks one position per market."""

    def __init__(self, config: RiskConfig, *, clock: Callable[[], float] = time.time) -> None:
        self.config = config
        self._clock = clock
        self._positions: dict[str, Position] = {}

    def _now(self) -> int:
        return int(self._clock())

    def validate_entry(self, market_id: str, size_usd: float, confidence: float) -> bool:
        """True when a new position of this size passes every risk limit."""
        if market_id in self._positions:
            logger.warning("Risk: position already exists for market %s", market_id)
            return False

        limit = self.max_position_size()
        if size_usd > limit:
            logger.warning("Risk: position size $%s exceeds limit $%s", size_usd, limit)
            return False

        exposure = sum(p.size_usd for p in self._positions.values())
        max_exposure = self.config.max_portfolio_exposure_pct * ASSUMED_CAPITAL
        if exposure + size_usd > max_exposure:
            logger.warning("Risk: exposure $%s would exceed limit $%s", exposure + size_usd, max_exposure)
            return False

        if confidence < MIN_CONFIDENCE:
            logger.warning("Risk: confidence %.2f too low (< %.1f)", confidence, MIN_CONFIDENCE)
            return False

        return True

    def check_stop_loss(self, position: Position, current_price: float) -> bool:
        """True when the position has been held long enough and lost past its threshold."""
        held_secs = max(0, self._now() - position.timestamp)
        if held_secs < self.config.min_hold_time_secs:
            logger.debug(
                "Skipping SL check for %s: held %ss, need %ss",
                position.market_id, held_secs, self.config.min_hold_time_secs,
            )
            return False

        pnl_pct = (current_price - position.entry_price) / position.entry_price
        threshold = (
            self.dynamic_threshold(position.entry_price)
            if self.config.use_dynamic_sl
            else self.config.stop_loss_pct
        )

        if pnl_pct < -threshold:
            logger.warning(
                "Stop loss triggered for %s: P/L %.2f%%, threshold %.2f%%",
                position.market_id, pnl_pct * 100.0, threshold * 100.0,
            )
            return True
        return False

    def dynamic_threshold(self, entry_price: float) -> float:
        """Tighter stops for high-probability entries; global stop below 0.60."""
        if entry_price >= 0.90:
            return 0.03
        if entry_price >= 0.80:
            return 0.05
        if entry_price >= 0.70:
            return 0.08
        if entry_price >= 0.60:
            return 0.12
        return self.config.stop_loss_pct

    def add_position(
        self, market_id: str, trade_id: str, side: str, size_usd: float, entry_price: float
    ) -> None:
        """Record a position, replacing any earlier one in the same market."""
        self._positions[market_id] = Position(
            market_id=market_id,
            trade_id=trade_id,
            side=side,
            size_usd=size_usd,
            entry_price=entry_price,
            timestamp=self._now(),
        )
        logger.info("Position added: size=$%.2f, price=%.4f", size_usd, entry_price)

    def remove_position(self, market_id: str) -> None:
        """Forget the position in a market, if there is one."""
        if self._positions.pop(market_id, None) is not None:
            logger.info("Position removed for market %s", market_id)

    def positions(self) -> list[Position]:
        """All open positions."""
        return list(self._positions.values())

    def validate_decision(self, decision: TradingDecision, market_id: str) -> Optional[TradingDecision]:
        """The decision if its implied size and confidence pass the limits, else None."""
        size_usd = ASSUMED_CAPITAL * decision.position_size_pct
        if self.validate_entry(market_id, size_usd, decision.confidence):
            return decision
        return None

    def max_position_size(self) -> float:
        """Largest allowed single position in USD."""
        return ASSUMED_CAPITAL * self.config.max_position_size_pct