from dataclasses import FrozenInstanceError

import pytest

from pattern_intelligence.learning.errors import InvalidTradeError
from pattern_intelligence.learning.models import (
    SAFE_DEFAULT_NAME, ExitReason, PatternKey, PatternMetrics, StrategyConfig,
    TradeOutcome, bucket_for,
)


@pytest.mark.parametrize("seconds,bucket", [
    (0, 0), (29.9, 0), (30, 1), (59, 1), (60, 2), (119.5, 2), (120, 3), (3600, 3),
])
def test_bucket_for(seconds, bucket):
    assert bucket_for(seconds) == bucket


def test_pattern_key_from_trade_truncates_leverage(make_trade):
    trade = make_trade(1.0, instrument="ETHUSD", leverage=5.7, holding=75)
    assert trade.pattern_key == PatternKey("ETHUSD", 5, 2)
    assert str(trade.pattern_key) == "ETHUSD_5x_2"


def test_pattern_key_parse_is_inverse_of_str():
    key = PatternKey("BTC_USD", 10, 3)
    assert PatternKey.parse(str(key)) == key


@pytest.mark.parametrize("text", ["safe_default", "XBTUSD", "XBTUSD_5_1", "XBTUSD_5x_a"])
def test_pattern_key_parse_rejects_garbage(text):
    with pytest.raises(ValueError):
        PatternKey.parse(text)


def test_pattern_key_midpoint():
    assert PatternKey("XBTUSD", 5, 0).midpoint_seconds == 15
    assert PatternKey("XBTUSD", 5, 3).midpoint_seconds == 105


def test_trade_derived_fields(make_trade):
    win = make_trade(2.5, size=50.0)
    loss = make_trade(0.0)
    assert win.is_win
    assert win.roi == pytest.approx(5.0)
    assert not loss.is_win  # zero P&L is not a win


def test_gross_pnl_defaults_to_net_plus_fees(make_trade):
    trade = make_trade(1.0, fees=0.2)
    assert trade.gross_pnl == pytest.approx(1.2)


def test_exit_reason_coerced_from_string(make_trade):
    trade = make_trade(1.0, exit_reason="timeout")
    assert trade.exit_reason is ExitReason.TIMEOUT


def test_unknown_exit_reason_rejected(make_trade):
    with pytest.raises(InvalidTradeError):
        make_trade(1.0, exit_reason="liquidated")


def test_trade_is_immutable(make_trade):
    trade = make_trade(1.0)
    with pytest.raises(FrozenInstanceError):
        trade.net_pnl = 5.0


def test_trade_dict_round_trip(make_trade):
    trade = make_trade(-1.5, fees=0.1, volatility_at_entry=1.3)
    assert TradeOutcome.from_dict(trade.to_dict()) == trade


@pytest.mark.parametrize("kwargs", [
    {"size": 0.0}, {"size": -10.0}, {"holding": -1}, {"instrument": ""},
])
def test_validate_rejects_malformed(make_trade, kwargs):
    with pytest.raises(InvalidTradeError):
        make_trade(1.0, **kwargs).validate()


def test_empty_metrics_are_zero():
    metrics = PatternMetrics.empty(PatternKey("XBTUSD", 3, 1))
    assert metrics.total_trades == 0
    assert metrics.sharpe_ratio == 0.0
    assert not metrics.has_edge
    assert str(metrics.key) == "XBTUSD_3x_1"


def test_strategy_pattern_key():
    config = StrategyConfig(
        name="XBTUSD_5x_0", leverage=5, holding_seconds=15, min_volatility=0.5,
        max_spread_pct=0.1, take_profit_pct=0.02, stop_loss_pct=0.01, position_size=100
    )
    assert config.pattern_key == PatternKey("XBTUSD", 5, 0)
    assert not config.is_safe_default

    safe = StrategyConfig(
        name=SAFE_DEFAULT_NAME, leverage=1, holding_seconds=60, min_volatility=0.0,
        max_spread_pct=0.1, take_profit_pct=0.02, stop_loss_pct=0.03, position_size=50
    )
    assert safe.pattern_key is None
    assert safe.is_safe_default
