import pytest

from pattern_intelligence.analysis.correlations import PatternCorrelationTracker
from pattern_intelligence.config import AnalysisConfig
from pattern_intelligence.learning.ledger import TradeLedger
from pattern_intelligence.learning.pattern_miner import PatternMiner


@pytest.fixture
def ledger(make_series):
    ledger = TradeLedger()
    ledger.extend(make_series("WWLWWLW", win=2.0, loss=-1.0, instrument="XBTUSD"))
    ledger.extend(make_series("WWLWWLW", win=2.0, loss=-1.0, instrument="ETHUSD"))
    # Edge, but all wins: correlation undefined
    ledger.extend(make_series("WWWWW", win=2.0, instrument="SOLUSD"))
    # No edge
    ledger.extend(make_series("LLLLLW", win=1.0, loss=-2.0, instrument="ADAUSD"))
    ledger.extend(make_series("WLWWLWW", win=2.0, loss=-1.0, instrument="XBTUSD", holding=150))
    return ledger


@pytest.fixture
def database(ledger):
    return PatternMiner().mine(ledger.trades())


def test_identical_sequences_rank_first(ledger, database):
    top = PatternCorrelationTracker().correlate(database, ledger)

    assert top[0].first == "ETHUSD_5x_0"
    assert top[0].second == "XBTUSD_5x_0"
    assert top[0].correlation == pytest.approx(1.0)


def test_top_three_ranked_by_magnitude(ledger, database):
    top = PatternCorrelationTracker().correlate(database, ledger)

    assert len(top) == 3
    magnitudes = [abs(c.correlation) for c in top]
    assert magnitudes == sorted(magnitudes, reverse=True)
    assert top[1].correlation == pytest.approx(-0.4)
    assert len({c.label for c in top}) == 3


def test_zero_variance_and_non_edge_patterns_skipped(ledger, database):
    top = PatternCorrelationTracker().correlate(database, ledger)

    involved = {c.first for c in top} | {c.second for c in top}
    assert "SOLUSD_5x_0" not in involved
    assert "ADAUSD_5x_0" not in involved
    assert database["SOLUSD_5x_0"].correlations == {}
    assert "SOLUSD_5x_0" not in database["XBTUSD_5x_0"].correlations


def test_threshold_limits_report_not_annotation(ledger, database):
    tracker = PatternCorrelationTracker(AnalysisConfig(CORRELATION_THRESHOLD=0.5))
    top = tracker.correlate(database, ledger)

    assert [c.label for c in top] == ["ETHUSD_5x_0 <-> XBTUSD_5x_0"]
    assert database["XBTUSD_5x_0"].correlations["XBTUSD_5x_3"] == pytest.approx(-0.4)
    assert database["XBTUSD_5x_3"].correlations["XBTUSD_5x_0"] == pytest.approx(-0.4)


def test_no_edge_patterns(make_series):
    ledger = TradeLedger()
    ledger.extend(make_series("LLLLLL", loss=-1.0))
    database = PatternMiner().mine(ledger.trades())

    assert PatternCorrelationTracker().correlate(database, ledger) == []
