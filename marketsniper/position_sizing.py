"""Position sizing with fractional Kelly and risk limits."""

from __future__ import annotations

import math
from collections.abc import Mapping

_BPS = 10000.0

DEFAULT_VOLATILITY = 0.10

# Per-market volatility estimates; markets without an entry use the default.
_MARKET_VOLATILITY: Mapping[str, float] = {}


class PositionSizer:
    """Sizes positions as a fraction of capital, clamped to configured bounds."""

    def __init__(self, kelly_fraction: float, min_position_pct: float, max_position_pct: float) -> None:
        self.kelly_fraction = kelly_fraction
        self.min_position_pct = min_position_pct
        self.max_position_pct = max_position_pct

    def calculate_optimal_size(
        self, edge_bps: int, win_probability: float, capital: float, volatility: float
    ) -> float:
        """Kelly size in USD: f = (p * b - q) / b with b = edge / (1 - edge)."""
        if edge_bps <= 0 or win_probability <= 0.0 or capital <= 0.0:
            return 0.0

        edge = edge_bps / _BPS
        odds = edge / (1.0 - edge) if edge != 1.0 else math.inf

        p = win_probability
        q = 1.0 - p
        raw = (p * odds - q) / odds

        adjusted = self.adjust_for_volatility(raw * self.kelly_fraction, volatility)
        return self.apply_risk_limits(capital * adjusted, capital)

    def adjust_for_volatility(self, kelly_fraction: float, volatility: float) -> float:
        """Shrink the fraction by half the volatility, at most by 50%."""
        if volatility <= 0.0:
            return kelly_fraction
        factor = 1.0 - min(volatility * 0.5, 0.5)
        return kelly_fraction * factor

    def apply_risk_limits(self, size_usd: float, capital: float) -> float:
        """Clamp a size to [min_position_pct, max_position_pct] of capital."""
        min_size = capital * self.min_position_pct
        max_size = capital * self.max_position_pct
        if math.isnan(size_usd):
            size_usd = min_size
        return min(max(size_usd, min_size), max_size)

    def calculate_sharpe_optimal_size(
        self, expected_return: float, volatility: float, capital: float, risk_free_rate: float
    ) -> float:
        """Mean-variance size: leverage = Sharpe / volatility, scaled by the Kelly fraction."""
        if volatility <= 0.0:
            return 0.0
        sharpe = (expected_return - risk_free_rate) / volatility
        leverage = sharpe / volatility
        return self.apply_risk_limits(capital * leverage * self.kelly_fraction, capital)

    def calculate_fixed_fraction(self, capital: float, fraction: float) -> float:
        """Fixed fraction of capital, clamped to the risk limits."""
        return self.apply_risk_limits(capital * fraction, capital)


def estimate_win_probability(is_atomic: bool, slippage_bps: int) -> float:
    """Win probability for an arbitrage, lower when execution is not atomic."""
    if is_atomic:
        return 0.98
    penalty = (slippage_bps / _BPS) * 0.5
    return max(0.90 - penalty, 0.5)


def estimate_volatility(market_id: str) -> float:
    """Volatility estimate for a market, falling back to a flat 10%."""
    return _MARKET_VOLATILITY.get(market_id, DEFAULT_VOLATILITY)