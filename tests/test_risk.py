import pytest

from marketsniper.models import TradingDecision
from marketsniper.risk import RiskConfig, RiskManager


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _config(**overrides):
    values = dict(
        max_position_size_pct=0.5,
        max_portfolio_exposure_pct=0.2,
        stop_loss_pct=0.15,
        min_hold_time_secs=60,
        use_dynamic_sl=False,
    )
    values.update(overrides)
    return RiskConfig(**values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clock):
    return RiskManager(_config(), clock=clock)


def test_max_position_size_uses_assumed_capital(manager):
    assert manager.max_position_size() == 500.0


def test_accepts_valid_entry(manager):
    assert manager.validate_entry("m1", 50.0, 0.9)


def test_rejects_duplicate_market(manager):
    manager.add_position("m1", "t1", "YES", 10.0, 0.5)
    assert not manager.validate_entry("m1", 10.0, 0.9)


def test_rejects_oversized_position():
    manager = RiskManager(_config(max_portfolio_exposure_pct=10.0))
    assert not manager.validate_entry("m1", 600.0, 0.9)
    assert manager.validate_entry("m1", 500.0, 0.9)


def test_rejects_excess_exposure(manager):
    manager.add_position("m1", "t1", "YES", 150.0, 0.5)
    assert not manager.validate_entry("m2", 60.0, 0.9)
    assert manager.validate_entry("m2", 50.0, 0.9)


def test_confidence_threshold(manager):
    assert not manager.validate_entry("m1", 10.0, 0.59)
    assert manager.validate_entry("m1", 10.0, 0.6)


def test_add_and_remove_position(manager, clock):
    manager.add_position("m1", "t1", "NO", 25.0, 0.4)
    positions = manager.positions()
    assert len(positions) == 1
    assert positions[0].trade_id == "t1"
    assert positions[0].side == "NO"
    assert positions[0].timestamp == int(clock.now)
    manager.remove_position("m1")
    assert manager.positions() == []


def test_remove_missing_position_is_harmless(manager):
    manager.add_position("m1", "t1", "YES", 10.0, 0.5)
    manager.remove_position("other")
    assert [p.market_id for p in manager.positions()] == ["m1"]


def test_stop_loss_waits_for_hold_time(manager, clock):
    manager.add_position("m1", "t1", "YES", 10.0, 0.5)
    position = manager.positions()[0]
    clock.now += 30
    assert not manager.check_stop_loss(position, 0.1)
    clock.now += 60
    assert manager.check_stop_loss(position, 0.1)


def test_static_stop_loss_threshold(manager, clock):
    manager.add_position("m1", "t1", "YES", 10.0, 0.5)
    position = manager.positions()[0]
    clock.now += 120
    assert manager.check_stop_loss(position, 0.4)
    assert not manager.check_stop_loss(position, 0.45)
    assert not manager.check_stop_loss(position, 0.6)


def test_clock_going_backwards_counts_as_not_held(manager, clock):
    manager.add_position("m1", "t1", "YES", 10.0, 0.5)
    position = manager.positions()[0]
    clock.now -= 500
    assert not manager.check_stop_loss(position, 0.01)


@pytest.mark.parametrize(
    "entry_price, threshold",
    [(0.95, 0.03), (0.90, 0.03), (0.85, 0.05), (0.75, 0.08), (0.65, 0.12)],
)
def test_dynamic_threshold_tiers(manager, entry_price, threshold):
    assert manager.dynamic_threshold(entry_price) == threshold


def test_dynamic_threshold_falls_back_to_config(manager):
    assert manager.dynamic_threshold(0.3) == manager.config.stop_loss_pct


def test_dynamic_stop_loss_is_tighter(clock):
    dynamic = RiskManager(_config(use_dynamic_sl=True), clock=clock)
    static = RiskManager(_config(use_dynamic_sl=False), clock=clock)
    dynamic.add_position("m1", "t1", "YES", 10.0, 0.95)
    static.add_position("m1", "t1", "YES", 10.0, 0.95)
    clock.now += 120
    price = 0.95 * 0.9
    assert dynamic.check_stop_loss(dynamic.positions()[0], price)
    assert not static.check_stop_loss(static.positions()[0], price)


def test_validate_decision_passes_through(manager):
    decision = TradingDecision(should_trade=True, side="YES", confidence=0.8, position_size_pct=0.05)
    assert manager.validate_decision(decision, "m1") is decision


def test_validate_decision_rejects_low_confidence(manager):
    decision = TradingDecision(should_trade=True, side="YES", confidence=0.5, position_size_pct=0.05)
    assert manager.validate_decision(decision, "m1") is None