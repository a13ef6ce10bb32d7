"""
Pattern Intelligence - Regime Detection
=======================================
Klassificerer markedstilstand ud fra egne trade outcomes.

Output:
- Drift: win rate of the older ledger half vs the recent half
- Label: HIGH_VOLATILITY, TRENDING_UP, TRENDING_DOWN, CONSOLIDATING, UNKNOWN

The regime is derived from recent trade ROI only, not from market data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence
import logging

import numpy as np

from ..config import ANALYSIS, AnalysisConfig
from ..learning.models import TradeOutcome
from ..learning.scoring import std_dev

logger = logging.getLogger(__name__)


class MarketRegime(Enum):
    """Regime tilstande"""
    HIGH_VOLATILITY = "high_volatility"
    TRENDING_UP = "trending_up"
    TRENDING_DOWN = "trending_down"
    CONSOLIDATING = "consolidating"
    UNKNOWN = "unknown"


@dataclass
class RegimeShiftReport:
    """Result of comparing old vs recent win rate"""
    status: str  # ok, insufficient_data
    total_trades: int
    old_win_rate: float = 0.0
    recent_win_rate: float = 0.0
    shift_detected: bool = False

    @property
    def win_rate_change(self) -> float:
        return self.recent_win_rate - self.old_win_rate

    def to_dict(self) -> Dict:
        return {
            'status': self.status,
            'total_trades': self.total_trades,
            'old_win_rate': round(self.old_win_rate, 4),
            'recent_win_rate': round(self.recent_win_rate, 4),
            'win_rate_change': round(self.win_rate_change, 4),
            'shift_detected': self.shift_detected
        }


class RegimeDetector:
    """
    Detekterer regime shifts og regime label.

    Bruger:
    - Win rate per ledger half til drift
    - ROI std dev og mean over de seneste trades til label
    """

    def __init__(self, config: AnalysisConfig = ANALYSIS):
        self.config = config

    def detect_shift(self, trades: Sequence[TradeOutcome]) -> RegimeShiftReport:
        """
        Splits the ledger in half by position and compares win rates.

        Args:
            trades: Full trade history in ledger order
        """
        n = len(trades)
        if n < self.config.DRIFT_MIN_TRADES:
            logger.info(f"Insufficient data for regime detection ({n} trades)")
            return RegimeShiftReport(status="insufficient_data", total_trades=n)

        cutoff = n // 2
        old = trades[:cutoff]
        recent = trades[cutoff:]

        old_wr = sum(1 for t in old if t.is_win) / len(old)
        recent_wr = sum(1 for t in recent if t.is_win) / len(recent)
        report = RegimeShiftReport(
            status="ok",
            total_trades=n,
            old_win_rate=old_wr,
            recent_win_rate=recent_wr,
            shift_detected=recent_wr < old_wr - self.config.DRIFT_THRESHOLD
        )

        logger.info(f"Old period win rate: {old_wr * 100:.1f}% | "
                    f"Recent period win rate: {recent_wr * 100:.1f}%")
        if report.shift_detected:
            logger.warning(f"REGIME SHIFT DETECTED ({report.win_rate_change * 100:+.1f} pts) "
                           f"- strategy may need adjustment")

        return report

    def label(self, trades: Sequence[TradeOutcome]) -> MarketRegime:
        """Regime label over the most recent REGIME_LOOKBACK trades"""
        if len(trades) == 0:
            return MarketRegime.UNKNOWN

        recent = trades[-self.config.REGIME_LOOKBACK:]
        returns = [t.roi for t in recent]

        avg_return = float(np.mean(returns))
        volatility = std_dev(returns)

        if volatility > self.config.HIGH_VOLATILITY_STD:
            return MarketRegime.HIGH_VOLATILITY
        if avg_return > self.config.TREND_UP_MEAN:
            return MarketRegime.TRENDING_UP
        if avg_return < self.config.TREND_DOWN_MEAN:
            return MarketRegime.TRENDING_DOWN
        return MarketRegime.CONSOLIDATING
