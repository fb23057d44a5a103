# marketsniper

Trading strategies and supporting tools for binary (YES/NO) prediction markets.

The library decides *when* and *how much* to trade. It takes market snapshots
(`MarketData`) and order books (`OrderBook`, `OrderLevel`) from
`marketsniper.models`. It returns trade actions: `BuyBoth`, `Snipe` or
`NoAction`, all from `marketsniper.arbitrage`.

## What is included

- **Intra-market arbitrage** (`marketsniper.arbitrage`).
  `ArbitrageStrategy.check_opportunity` adds up the YES and NO asks and works out the spread to the $1 payout in basis points. It subtracts a fixed 80 bps of fees (40 bps per leg). It returns `BuyBoth` when the net edge is above `ArbitrageConfig.min_edge_bps` and both prices are positive. With `use_dynamic_sizing=False` the size is `max_position_size_usd`. Otherwise a `PositionSizer` sets the size from $1000 of capital.
- **Order book depth** (same module).
  - `analyze_orderbook_depth` walks the levels for an order size. It returns an `OrderbookDepth` with the weighted bid and ask prices, the slippage in bps, the total liquidity and the bid/ask imbalance ratio.
  - `check_orderbook_opportunity` puts half the order on each book. It uses the weighted asks and subtracts slippage from the edge.
  - `calculate_slippage` returns only the slippage figure.
- **Expiration sniping** (`marketsniper.expiration`).
  `ExpirationStrategy` parses the market's RFC 3339 `end_date`. It looks only at markets that have between 1 second and `max_time_remaining_sec` left. It returns a `Snipe` of $1 on the first side, YES and then NO, whose price lies in `[min_price, target_price)`.
- **Predictive signals** (`marketsniper.predictive`).
  `PredictiveStrategy` works on "above / over / greater than" questions:
  1. It maps the question to a trading pair with `symbol_from_question`.
  2. It reads the strike with `extract_strike_price`.
  3. It fetches the spot price from `BinanceClient`.
  4. It snipes YES when spot is more than `binance_signal_threshold_pct` above the strike, or NO when spot is that far below. It skips the trade when that side already costs 0.99 or more.
- **Spot prices** (`marketsniper.pricefeed`).
  `BinanceClient.get_price` is an async client built on `httpx` for the Binance ticker endpoint. It caches each symbol for 0.5 s and raises `PriceFeedError` on network, status or parse failures. Close it with `aclose()` or use it as an `async with` context manager.
- **Position sizing** (`marketsniper.position_sizing`).
  - `PositionSizer` offers fractional Kelly (`calculate_optimal_size`), Sharpe-optimal (`calculate_sharpe_optimal_size`) and fixed-fraction (`calculate_fixed_fraction`) sizing.
  - Each result is clamped to `[min_position_pct, max_position_pct]` of capital.
  - Two helpers support the sizing: `estimate_win_probability` (0.98 for atomic execution) and `estimate_volatility` (a flat 10%).
- **Risk management** (`marketsniper.risk`).
  `RiskManager` assumes $1000 of capital. It keeps one `Position` per market and checks each new entry with `validate_entry`, which rejects:
  - a duplicate market,
  - a position larger than `max_position_size()`,
  - an entry that pushes portfolio exposure past the limit,
  - confidence below 0.6.

  `check_stop_loss` applies the stop only after `min_hold_time_secs`. It uses tiered `dynamic_threshold` values (3% / 5% / 8% / 12%, then the global stop) when `use_dynamic_sl` is set. `validate_decision` does the same entry checks for a `TradingDecision`.
- **Simulation** (`marketsniper.simulation`).
  `MarketSimulator` is an in-memory market that starts with a $10,000 balance.
  - `load_from_csv` reads ticks from a CSV file with the columns `timestamp,market_id,price,volume`.
  - `next_tick` applies the next tick to its market: it sets the YES price, sets NO to 1 − YES and adds the volume.
  - `get_active_markets`, `get_market_details`, `get_balance` and `place_order` are coroutines.
  - `get_market_details` raises `MarketNotFoundError` for unknown ids.
  - `place_order` only logs the order and returns an id of the form `sim-order-<hex>`. It does not change the balance.
- **Arena** (`marketsniper.arena`).
  `StrategyArena` holds trade actions. It counts decision cycles through `reset()` and drops the stored actions every 1000 cycles.

## Installation

```
pip install .
```

## Example

```python
from marketsniper.arbitrage import ArbitrageConfig, ArbitrageStrategy, BuyBoth
from marketsniper.models import MarketData

strategy = ArbitrageStrategy(ArbitrageConfig(
    min_edge_bps=200,
    max_position_size_usd=10.0,
    use_dynamic_sizing=False,
    kelly_fraction=0.25,
    min_position_pct=0.01,
    max_position_pct=0.10,
))

market = MarketData(id="market_arb", question="Arb Market", yes_price=0.40, no_price=0.40)
action = strategy.check_opportunity(market)
if isinstance(action, BuyBoth):
    print(action.size_usd, action.expected_profit_bps)  # 10.0 1920
```

## Simulation

```python
import asyncio
from marketsniper.simulation import MarketSimulator
from marketsniper.models import MarketData

async def main():
    sim = MarketSimulator()
    sim.load_markets([MarketData(id="mkt1", question="Test?")])
    sim.load_from_csv("ticks.csv")  # columns: timestamp,market_id,price,volume
    while (tick := sim.next_tick()) is not None:
        market = await sim.get_market_details("mkt1")
        print(tick.timestamp, market.yes_price, market.no_price)

asyncio.run(main())
```

## What the package does not do

The package has no exchange client and does not sign or submit orders. It does not watch order-book or chain events, and it has no redemption support. There is no trading loop or command-line program that ties the strategies together. Apart from the Binance price lookup, every input comes from the caller. The only exchange it has is `MarketSimulator`.

## Running the tests

```
pip install .[test]
pytest
```