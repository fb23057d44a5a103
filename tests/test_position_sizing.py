import pytest

from marketsniper.position_sizing import (
    PositionSizer,
    estimate_volatility,
    estimate_win_probability,
)


@pytest.fixture
def sizer():
    return PositionSizer(0.25, 0.01, 0.10)


def test_kelly_calculation(sizer):
    size = sizer.calculate_optimal_size(200, 0.95, 1000.0, 0.10)
    assert size > 0.0
    assert size <= 100.0


@pytest.mark.parametrize("edge_bps", [100, 200, 500, 1000])
def test_kelly_within_limits_for_bench_edges(sizer, edge_bps):
    size = sizer.calculate_optimal_size(edge_bps, 0.95, 1000.0, 0.10)
    assert 10.0 <= size <= 100.0


def test_risk_limits(sizer):
    assert sizer.apply_risk_limits(5.0, 1000.0) == 10.0
    assert sizer.apply_risk_limits(200.0, 1000.0) == 100.0


def test_risk_limits_pass_through_inside_band(sizer):
    assert sizer.apply_risk_limits(50.0, 1000.0) == 50.0


@pytest.mark.parametrize(
    "edge_bps, win_prob, capital",
    [(0, 0.95, 1000.0), (-10, 0.95, 1000.0), (200, 0.0, 1000.0), (200, 0.95, 0.0)],
)
def test_invalid_inputs_give_zero(sizer, edge_bps, win_prob, capital):
    assert sizer.calculate_optimal_size(edge_bps, win_prob, capital, 0.10) == 0.0


def test_full_edge_falls_back_to_minimum(sizer):
    assert sizer.calculate_optimal_size(10000, 0.95, 1000.0, 0.10) == 10.0


def test_size_grows_with_edge(sizer):
    low = sizer.calculate_optimal_size(100, 0.999, 100000.0, 0.0)
    high = sizer.calculate_optimal_size(1000, 0.999, 100000.0, 0.0)
    assert high >= low


def test_volatility_adjustment(sizer):
    assert sizer.adjust_for_volatility(0.2, 0.0) == 0.2
    assert sizer.adjust_for_volatility(0.2, 5.0) == pytest.approx(0.1)
    assert sizer.adjust_for_volatility(0.2, 0.10) < 0.2


def test_sharpe_zero_volatility(sizer):
    assert sizer.calculate_sharpe_optimal_size(0.1, 0.0, 1000.0, 0.02) == 0.0


def test_sharpe_respects_limits(sizer):
    size = sizer.calculate_sharpe_optimal_size(0.5, 0.1, 1000.0, 0.0)
    assert size == 100.0


def test_fixed_fraction(sizer):
    assert sizer.calculate_fixed_fraction(1000.0, 0.05) == pytest.approx(50.0)
    assert sizer.calculate_fixed_fraction(1000.0, 0.5) == 100.0


def test_win_probability():
    assert estimate_win_probability(True, 500) == 0.98
    assert estimate_win_probability(False, 0) == 0.90
    assert estimate_win_probability(False, 100000) == 0.5
    assert estimate_win_probability(False, 200) < 0.90


def test_volatility_estimate():
    assert estimate_volatility("any-market") == 0.10