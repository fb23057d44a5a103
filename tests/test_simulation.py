import pytest

from marketsniper.models import MarketData
from marketsniper.simulation import MarketNotFoundError, MarketSimulator, Tick

CSV_TEXT = (
    "timestamp,market_id,price,volume\n"
    "1000,mkt1,0.50,100.0\n"
    "2000,mkt1,0.55,200.0\n"
    "3000,other,0.45,150.0\n"
)


def _simulator(tmp_path) -> MarketSimulator:
    path = tmp_path / "ticks.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    sim = MarketSimulator()
    sim.load_markets([MarketData(id="mkt1", question="Q?", volume=1000.0)])
    sim.load_from_csv(path)
    return sim


@pytest.mark.asyncio
async def test_starting_balance():
    assert await MarketSimulator().get_balance() == 10_000.0


def test_ticks_replay_in_order_then_stop(tmp_path):
    sim = _simulator(tmp_path)
    seen = [sim.next_tick(), sim.next_tick(), sim.next_tick()]
    assert [t.timestamp for t in seen] == [1000, 2000, 3000]
    assert seen[0] == Tick(timestamp=1000, market_id="mkt1", price=0.50, volume=100.0)
    assert sim.next_tick() is None


@pytest.mark.asyncio
async def test_tick_updates_matching_market(tmp_path):
    sim = _simulator(tmp_path)
    before = await sim.get_market_details("mkt1")
    tick = sim.next_tick()
    market = await sim.get_market_details("mkt1")
    assert market.yes_price == tick.price
    assert market.yes_price + market.no_price == pytest.approx(1.0)
    assert market.volume == pytest.approx(before.volume + tick.volume)


@pytest.mark.asyncio
async def test_tick_for_unknown_market_leaves_markets_alone(tmp_path):
    sim = _simulator(tmp_path)
    sim.next_tick()
    sim.next_tick()
    after_known = await sim.get_market_details("mkt1")
    sim.next_tick()
    assert await sim.get_market_details("mkt1") == after_known


@pytest.mark.asyncio
async def test_missing_market_raises():
    sim = MarketSimulator()
    with pytest.raises(MarketNotFoundError, match="nope"):
        await sim.get_market_details("nope")


@pytest.mark.asyncio
async def test_active_markets_are_copies(tmp_path):
    sim = _simulator(tmp_path)
    markets = await sim.get_active_markets()
    assert [m.id for m in markets] == ["mkt1"]
    markets[0].yes_price = 0.9
    assert (await sim.get_market_details("mkt1")).yes_price == 0.0


@pytest.mark.asyncio
async def test_place_order_returns_sim_id():
    order_id = await MarketSimulator().place_order("mkt1", "YES", 5.0, 0.5, None)
    assert order_id.startswith("sim-order-")
    assert len(order_id) > len("sim-order-")


def test_csv_missing_column_raises(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("timestamp,market_id,price\n1000,mkt1,0.5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="volume"):
        MarketSimulator().load_from_csv(path)


def test_csv_bad_value_raises(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("timestamp,market_id,price,volume\nsoon,mkt1,0.5,1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="invalid tick"):
        MarketSimulator().load_from_csv(path)