"""
Pattern Intelligence - Statistical Scoring
==========================================
Numeric primitives shared by the pattern miner, correlation tracker and
regime detector.

All standard deviations are population deviations (divide by N). Degenerate
input (empty, single value, zero variance) resolves to 0 or None, never NaN.
"""

import math
from statistics import NormalDist
from typing import List, Optional, Sequence

import numpy as np

from ..config import SCORING, ScoringConfig

# Deviations below this are float noise from identical values
_ZERO_STD = 1e-12


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation, 0 for an empty sequence"""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def sharpe_ratio(returns: Sequence[float], risk_free: float = 0.0) -> float:
    """mean(returns - risk_free) / std(returns)"""
    if len(returns) < 2:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    sd = std_dev(arr)
    if sd <= _ZERO_STD:
        return 0.0
    return float((arr.mean() - risk_free) / sd)


def sortino_ratio(returns: Sequence[float]) -> float:
    """mean(returns) / sqrt(sum of squared negative returns / N), 0 for identical returns"""
    if len(returns) < 2:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    if std_dev(arr) <= _ZERO_STD:
        return 0.0
    downside = arr[arr < 0]
    downside_std = math.sqrt(float(np.sum(downside ** 2)) / len(arr))
    if downside_std == 0:
        return 0.0
    return float(arr.mean() / downside_std)


def max_drawdown(series: Sequence[float]) -> float:
    """Largest running-peak minus current value, in the series' own units"""
    if len(series) == 0:
        return 0.0
    peak = series[0]
    max_dd = 0.0
    for value in series:
        if value > peak:
            peak = value
        max_dd = max(max_dd, peak - value)
    return float(max_dd)


def profit_factor(gross_wins: float, gross_losses: float) -> float:
    """Gross wins / gross losses, or gross wins alone when nothing was lost"""
    if gross_losses > 0:
        return gross_wins / gross_losses
    return gross_wins


def confidence_score(total_trades: int, win_rate: float, profit_factor: float,
                     config: ScoringConfig = SCORING) -> float:
    """
    Heuristic [0, 1] blend. Confidence increases with:
    1. More samples
    2. Higher win rate
    3. Higher profit factor
    """
    sample_score = min(1.0, total_trades / config.FULL_SAMPLE_TRADES)
    wr_score = max(0.0, win_rate - config.BASE_WIN_RATE) / config.BASE_WIN_RATE
    pf_score = min(1.0, profit_factor / config.FULL_PROFIT_FACTOR)

    # Win rates above 2x baseline push the raw blend past 1
    return min(1.0, sample_score * config.SAMPLE_WEIGHT
               + wr_score * config.WIN_RATE_WEIGHT
               + pf_score * config.PROFIT_FACTOR_WEIGHT)


def is_outlier(value: float, values: Sequence[float],
               threshold: float = SCORING.OUTLIER_STD_THRESHOLD) -> bool:
    """True when value lies more than `threshold` std devs from the mean of values"""
    if len(values) == 0:
        return False
    sd = std_dev(values)
    if sd <= _ZERO_STD:
        return False
    return abs(value - float(np.mean(values))) > threshold * sd


def remove_outliers(values: Sequence[float],
                    threshold: float = SCORING.OUTLIER_STD_THRESHOLD) -> List[float]:
    """Drops outliers, keeping order. Fewer than 3 values are returned as-is."""
    values = [float(v) for v in values]
    if len(values) < 3:
        return values
    sd = std_dev(values)
    if sd <= _ZERO_STD:
        return values
    mean = float(np.mean(values))
    return [v for v in values if abs(v - mean) <= threshold * sd]


def pearson_correlation(a: Sequence[float], b: Sequence[float]) -> Optional[float]:
    """
    Pearson r of two sequences aligned by position up to the shorter length.

    Returns None when fewer than 2 aligned points exist or either side has
    zero variance (correlation undefined).
    """
    n = min(len(a), len(b))
    if n < 2:
        return None

    x = np.asarray(a[:n], dtype=float)
    y = np.asarray(b[:n], dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()

    var_x = float(np.sum(dx ** 2))
    var_y = float(np.sum(dy ** 2))
    if var_x <= _ZERO_STD or var_y <= _ZERO_STD:
        return None

    r = float(np.sum(dx * dy) / math.sqrt(var_x * var_y))
    # Clamp float noise (identical sequences can land at 1.0000000000000002)
    return max(-1.0, min(1.0, r))


def win_rate_lower_bound(wins: int, total: int, confidence: float = 0.95) -> float:
    """
    Wilson score lower bound for a win rate.

    Args:
        wins: Number of winning trades
        total: Number of trades
        confidence: Two-sided confidence level, 0 < confidence < 1

    Returns:
        Lower bound in [0, 1], 0 when there are no trades
    """
    if not 0 < confidence < 1:
        raise ValueError(f"Confidence must be in (0, 1), got {confidence}")
    if total <= 0:
        return 0.0

    z = NormalDist().inv_cdf(0.5 + confidence / 2)
    p = wins / total
    denom = 1 + z ** 2 / total
    centre = p + z ** 2 / (2 * total)
    margin = z * math.sqrt(p * (1 - p) / total + z ** 2 / (4 * total ** 2))
    return max(0.0, (centre - margin) / denom)
