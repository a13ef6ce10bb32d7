import pytest

from pattern_intelligence.learning import scoring


# ------------------------- std / ratios ------------------------- #

def test_std_dev_single_value_is_zero():
    assert scoring.std_dev([4.2]) == 0.0


def test_std_dev_empty_is_zero():
    assert scoring.std_dev([]) == 0.0


def test_std_dev_is_population():
    assert scoring.std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)


def test_sharpe_zero_variance_is_zero():
    assert scoring.sharpe_ratio([1.5, 1.5, 1.5, 1.5]) == 0.0


def test_sharpe_needs_two_samples():
    assert scoring.sharpe_ratio([3.0]) == 0.0


def test_sharpe_mean_over_population_std():
    # mean 2, population std 1
    assert scoring.sharpe_ratio([1.0, 3.0]) == pytest.approx(2.0)


def test_sortino_zero_variance_is_zero():
    assert scoring.sortino_ratio([2.0, 2.0, 2.0]) == 0.0
    assert scoring.sortino_ratio([-1.0, -1.0, -1.0]) == 0.0


def test_sortino_without_losses_is_zero():
    assert scoring.sortino_ratio([1.0, 2.0, 3.0]) == 0.0


def test_sortino_uses_downside_over_all_samples():
    # mean 1, downside sqrt(1/2)
    assert scoring.sortino_ratio([3.0, -1.0]) == pytest.approx(2 ** 0.5)


# ------------------------- drawdown ------------------------- #

def test_max_drawdown_running_peak():
    assert scoring.max_drawdown([5, 10, 2, 8, 1]) == pytest.approx(9)


def test_max_drawdown_rising_series_is_zero():
    assert scoring.max_drawdown([1, 2, 3, 4]) == 0.0


def test_max_drawdown_keeps_ledger_order():
    # Sorted this would be 0; in order the drop 4 -> -3 counts
    assert scoring.max_drawdown([4, -3, 1]) == pytest.approx(7)


def test_max_drawdown_empty():
    assert scoring.max_drawdown([]) == 0.0


# ------------------------- profit factor / confidence ------------------------- #

def test_profit_factor_without_losses_is_gross_wins():
    assert scoring.profit_factor(12.5, 0.0) == 12.5


def test_profit_factor_ratio():
    assert scoring.profit_factor(14.0, 6.0) == pytest.approx(14 / 6)


def test_confidence_full_marks():
    assert scoring.confidence_score(30, 0.70, 1.5) == pytest.approx(1.0)


def test_confidence_partial():
    # 0.4 * 0.5 + 0.3 * 0 + 0.3 * 0.5
    assert scoring.confidence_score(15, 0.35, 0.75) == pytest.approx(0.35)


def test_confidence_stays_in_unit_interval():
    assert scoring.confidence_score(500, 1.0, 50.0) == pytest.approx(1.0)
    assert scoring.confidence_score(30, 0.90, 1.5) == pytest.approx(1.0)
    assert scoring.confidence_score(0, 0.0, 0.0) == 0.0


def test_confidence_high_win_rate_term_is_not_capped():
    # 0.4 * 5/30 + 0.3 * (0.45 / 0.35) + 0.3 * (1.0 / 1.5)
    expected = 0.4 * 5 / 30 + 0.3 * 0.45 / 0.35 + 0.3 * 1.0 / 1.5
    score = scoring.confidence_score(5, 0.8, 1.0)

    assert score == pytest.approx(expected)
    assert score >= 0.6


# ------------------------- outliers ------------------------- #

def test_is_outlier_beyond_threshold():
    values = [1.0] * 10 + [100.0]
    assert scoring.is_outlier(100.0, values)
    assert not scoring.is_outlier(1.0, values)


def test_is_outlier_zero_variance():
    assert not scoring.is_outlier(5.0, [5.0, 5.0, 5.0])


def test_remove_outliers_keeps_order():
    values = [1.0, 2.0, 1.0, 2.0, 1.0, 2.0, 1.0, 2.0, 1.0, 2.0, 250.0, 1.5]
    cleaned = scoring.remove_outliers(values)
    assert 250.0 not in cleaned
    assert cleaned == [v for v in values if v != 250.0]


def test_remove_outliers_short_input_untouched():
    assert scoring.remove_outliers([1.0, 1000.0]) == [1.0, 1000.0]


# ------------------------- correlation ------------------------- #

def test_pearson_identical_sequences():
    seq = [1.0, 0.0, 1.0, 1.0, 0.0]
    assert scoring.pearson_correlation(seq, seq) == pytest.approx(1.0)


def test_pearson_inverse_sequences():
    a = [1.0, 0.0, 1.0, 0.0]
    b = [0.0, 1.0, 0.0, 1.0]
    assert scoring.pearson_correlation(a, b) == pytest.approx(-1.0)


def test_pearson_zero_variance_is_undefined():
    assert scoring.pearson_correlation([1.0, 0.0, 1.0], [1.0, 1.0, 1.0]) is None
    assert scoring.pearson_correlation([0.0, 0.0], [1.0, 0.0]) is None


def test_pearson_aligns_to_shorter_sequence():
    a = [1.0, 0.0, 1.0, 0.0]
    b = [1.0, 0.0, 1.0, 0.0, 0.0, 0.0, 0.0]
    assert scoring.pearson_correlation(a, b) == pytest.approx(1.0)


def test_pearson_too_short():
    assert scoring.pearson_correlation([1.0], [0.0]) is None


# ------------------------- win rate bound ------------------------- #

def test_win_rate_lower_bound_wilson():
    assert scoring.win_rate_lower_bound(7, 10, 0.95) == pytest.approx(0.3968, abs=1e-3)


def test_win_rate_lower_bound_no_trades():
    assert scoring.win_rate_lower_bound(0, 0, 0.95) == 0.0


def test_win_rate_lower_bound_rejects_bad_confidence():
    with pytest.raises(ValueError):
        scoring.win_rate_lower_bound(5, 10, 1.0)
