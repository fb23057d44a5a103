"""Buy the near-certain side of markets that are about to expire."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from marketsniper.arbitrage import NoAction, Snipe, TradeAction
from marketsniper.models import MarketData

logger = logging.getLogger(__name__)

DEFAULT_SNIPE_SIZE_USD = 1.0

_RFC3339 = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))$"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_rfc3339(text: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; None when it is malformed or lacks an offset."""
    match = _RFC3339.match(text)
    if match is None:
        return None
    year, month, day, hour, minute, second, frac, zulu, sign, off_h, off_m = match.groups()
    micro = int((frac or "0")[:6].ljust(6, "0"))
    if zulu:
        tz = timezone.utc
    else:
        hours, minutes = int(off_h), int(off_m)
        if hours > 23 or minutes > 59:
            return None
        offset = timedelta(hours=hours, minutes=minutes)
        tz = timezone(-offset if sign == "-" else offset)
    try:
        return datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz
        )
    except ValueError:
        return None


@dataclass
class ExpirationConfig:
    """Settings for expiration sniping."""

    enabled: bool
    max_time_remaining_sec: int
    min_price: float
    target_price: float


class ExpirationStrategy:
    """Snipes a side priced in [min_price, target_price) shortly before expiry."""

    def __init__(
        self, config: ExpirationConfig, *, clock: Callable[[], datetime] = _utc_now
    ) -> None:
        self.config = config
        self._clock = clock

    def check_opportunity(self, market: MarketData) -> TradeAction:
        """YES is checked first, then NO; either must be likely to win but still profitable."""
        if not self.config.enabled or market.end_date is None:
            return NoAction()

        end = _parse_rfc3339(market.end_date)
        if end is None:
            return NoAction()

        time_remaining = int((end - self._clock()).total_seconds())
        if time_remaining <= 0 or time_remaining > self.config.max_time_remaining_sec:
            return NoAction()

        logger.debug("Expiration candidate: %s (%ss remaining)", market.question, time_remaining)

        for side, price in (("YES", market.yes_price), ("NO", market.no_price)):
            if self.config.min_price <= price < self.config.target_price:
                logger.info(
                    "Expiration signal (%s): %s | price %.4f | profit %d bps | time %ss",
                    side, market.question, price, int((1.0 - price) * 10000.0), time_remaining,
                )
                return Snipe(
                    market_id=market.id,
                    side=side,
                    price=price,
                    size_usd=DEFAULT_SNIPE_SIZE_USD,
                )

        return NoAction()