"""Strategies, position sizing, risk management, a spot price feed and a market simulator for binary prediction markets."""

__version__ = "0.1.0"