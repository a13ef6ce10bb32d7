from datetime import datetime, timedelta

import pytest

from pattern_intelligence.config import EngineConfig
from pattern_intelligence.learning.models import ExitReason, TradeOutcome

BASE_TIME = datetime(2026, 1, 5, 9, 30)


def build_trade(pnl: float, instrument: str = "XBTUSD", leverage: float = 5,
                holding: float = 20, size: float = 100.0, fees: float = 0.0,
                gross: float = None, index: int = 0, **kwargs) -> TradeOutcome:
    """Trade with size 100 so roi == pnl"""
    if 'exit_reason' not in kwargs:
        kwargs['exit_reason'] = ExitReason.TAKE_PROFIT if pnl > 0 else ExitReason.STOP_LOSS
    return TradeOutcome(
        instrument=instrument,
        entry_price=100.0,
        exit_price=100.0 + pnl / leverage,
        leverage=leverage,
        holding_seconds=holding,
        position_size=size,
        net_pnl=pnl,
        gross_pnl=gross,
        fees_paid=fees,
        timestamp=BASE_TIME + timedelta(minutes=index),
        **kwargs
    )


def build_series(outcomes, win: float = 2.0, loss: float = -2.0, **kwargs):
    """Trades from a string like 'WWLW' (W = win, L = loss)"""
    return [build_trade(win if c == 'W' else loss, index=i, **kwargs)
            for i, c in enumerate(outcomes)]


@pytest.fixture
def make_trade():
    return build_trade


@pytest.fixture
def make_series():
    return build_series


@pytest.fixture
def engine_config():
    return EngineConfig()
