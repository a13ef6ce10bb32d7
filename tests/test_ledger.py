import pytest

from pattern_intelligence.learning.errors import InvalidTradeError
from pattern_intelligence.learning.ledger import TradeLedger
from pattern_intelligence.learning.models import PatternKey


@pytest.fixture
def ledger():
    return TradeLedger()


def test_record_keeps_arrival_order(ledger, make_trade):
    trades = [make_trade(p, index=i) for i, p in enumerate([1.0, -2.0, 3.0])]
    for t in trades:
        ledger.record(t)

    assert len(ledger) == 3
    assert list(ledger.trades()) == trades
    assert list(ledger) == trades


def test_instrument_index(ledger, make_trade):
    a1 = make_trade(1.0, instrument="XBTUSD", index=0)
    b1 = make_trade(1.0, instrument="ETHUSD", index=1)
    a2 = make_trade(-1.0, instrument="XBTUSD", index=2)
    ledger.extend([a1, b1, a2])

    assert ledger.by_instrument("XBTUSD") == (a1, a2)
    assert ledger.by_instrument("ETHUSD") == (b1,)
    assert ledger.by_instrument("SOLUSD") == ()
    assert ledger.instruments() == ["ETHUSD", "XBTUSD"]


def test_pattern_index(ledger, make_trade):
    fast = make_trade(1.0, holding=10, index=0)
    slow = make_trade(1.0, holding=200, index=1)
    fast2 = make_trade(-1.0, holding=25, index=2)
    ledger.extend([fast, slow, fast2])

    assert ledger.by_pattern(PatternKey("XBTUSD", 5, 0)) == (fast, fast2)
    assert ledger.by_pattern(PatternKey("XBTUSD", 5, 3)) == (slow,)


def test_malformed_trade_not_recorded(ledger, make_trade):
    with pytest.raises(InvalidTradeError):
        ledger.record(make_trade(1.0, size=0.0))
    assert len(ledger) == 0


@pytest.mark.parametrize("count,due", [(0, False), (24, False), (25, True), (26, False), (50, True)])
def test_is_analysis_due(ledger, make_trade, count, due):
    ledger.extend(make_trade(1.0, index=i) for i in range(count))
    assert ledger.is_analysis_due(25) is due


def test_recent(ledger, make_trade):
    trades = [make_trade(float(i + 1), index=i) for i in range(5)]
    ledger.extend(trades)
    assert ledger.recent(2) == tuple(trades[-2:])
    assert ledger.recent(10) == tuple(trades)
    assert ledger.recent(0) == ()


def test_returned_views_are_copies(ledger, make_trade):
    ledger.record(make_trade(1.0))
    view = ledger.trades()
    ledger.record(make_trade(2.0, index=1))
    assert len(view) == 1


def test_to_frame(ledger, make_trade):
    assert ledger.to_frame().empty

    ledger.extend([make_trade(3.0, index=0), make_trade(-1.0, index=1)])
    frame = ledger.to_frame()

    assert len(frame) == 2
    assert list(frame['is_win']) == [True, False]
    assert list(frame['roi']) == pytest.approx([3.0, -1.0])
    assert list(frame['pattern']) == ["XBTUSD_5x_0", "XBTUSD_5x_0"]
