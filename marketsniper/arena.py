"""Batch holder for trade decisions, cleared periodically."""

from __future__ import annotations

import sys

from marketsniper.arbitrage import TradeAction

RESET_EVERY = 1000


class StrategyArena:
    """Holds trade actions across decision cycles, dropping them every 1000 resets."""

    def __init__(self) -> None:
        self._actions: list[TradeAction] = []
        self._decision_count = 0

    def alloc_action(self, action: TradeAction) -> TradeAction:
        """Store an action in the arena and return it."""
        self._actions.append(action)
        return action

    def reset(self) -> None:
        """Mark the end of a decision cycle; clears held actions every 1000 cycles."""
        self._decision_count += 1
        if self._decision_count % RESET_EVERY == 0:
            self._actions.clear()

    def allocated_bytes(self) -> int:
        """Approximate memory held by stored actions, in bytes."""
        return sum(sys.getsizeof(action) for action in self._actions)

    def decision_count(self) -> int:
        """Number of decision cycles completed."""
        return self._decision_count