"""In-memory market simulator for backtesting and dry runs."""

from __future__ import annotations

import copy
import csv
import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Union

from marketsniper.models import MarketData

logger = logging.getLogger(__name__)

STARTING_BALANCE = 10_000.0
CSV_FIELDS = ("timestamp", "market_id", "price", "volume")


class MarketNotFoundError(LookupError):
    """Raised when a market id is not known to the simulator."""


@dataclass(frozen=True)
class Tick:
    """One historical trade: the YES price and traded volume of a market."""

    timestamp: int
    market_id: str
    price: float
    volume: float


class MarketSimulator:
    """Replays historical ticks over a set of markets and fills every order immediately."""

    def __init__(self) -> None:
        self._markets: list[MarketData] = []
        self._balance = STARTING_BALANCE
        self._ticks: list[Tick] = []
        self._tick_index = 0

    def load_markets(self, markets: list[MarketData]) -> None:
        """Replace the simulated markets."""
        self._markets = list(markets)
        logger.info("Simulator loaded %d markets", len(self._markets))

    def load_from_csv(self, path: Union[str, os.PathLike]) -> None:
        """Load ticks from a CSV file with columns timestamp, market_id, price, volume."""
        with open(path, newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            missing = [name for name in CSV_FIELDS if name not in (reader.fieldnames or ())]
            if missing:
                raise ValueError(f"{path}: missing columns {', '.join(missing)}")
            ticks = []
            for line_no, row in enumerate(reader, start=2):
                try:
                    ticks.append(
                        Tick(
                            timestamp=int(row["timestamp"]),
                            market_id=row["market_id"],
                            price=float(row["price"]),
                            volume=float(row["volume"]),
                        )
                    )
                except (TypeError, ValueError) as exc:
                    raise ValueError(f"{path}:{line_no}: invalid tick: {exc}") from exc
        self._ticks = ticks
        logger.info("Simulator loaded %d historical ticks", len(self._ticks))

    def next_tick(self) -> Optional[Tick]:
        """Apply the next tick to its market and return it, or None when exhausted."""
        if self._tick_index >= len(self._ticks):
            return None
        tick = self._ticks[self._tick_index]
        self._tick_index += 1

        market = next((m for m in self._markets if m.id == tick.market_id), None)
        if market is not None:
            market.yes_price = tick.price
            market.no_price = 1.0 - tick.price
            market.volume += tick.volume
        return tick

    async def get_active_markets(self) -> list[MarketData]:
        """Copies of all simulated markets in their current state."""
        return copy.deepcopy(self._markets)

    async def get_market_details(self, market_id: str) -> MarketData:
        """Copy of one market; raises MarketNotFoundError if it is unknown."""
        for market in self._markets:
            if market.id == market_id:
                return copy.deepcopy(market)
        raise MarketNotFoundError(f"Market {market_id} not found in simulation")

    async def get_balance(self) -> float:
        """Simulated account balance in USD."""
        return self._balance

    async def place_order(
        self, market_id: str, side: str, size: float, price: float, order_type: object = None
    ) -> str:
        """Fill an order at the requested price and return a simulated order id."""
        logger.info("[SIM] Order placed: %s %s @ $%.2f on %s", side, size, price, market_id)
        return f"sim-order-{time.time_ns():x}"