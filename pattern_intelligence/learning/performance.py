"""
Pattern Intelligence - Performance Analyzer
===========================================
Ledger-wide performance metrics and risk estimates.

Analyserer:
- Overall performance (win rate, P&L, profit factor)
- Performance by exit reason
- Drawdown risk of the cumulative ROI curve
- Win rate lower bound at a confidence level
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence
import logging

import pandas as pd

from .models import ExitReason, TradeOutcome
from . import scoring

logger = logging.getLogger(__name__)


@dataclass
class OverallMetrics:
    """Samlede performance metrics"""
    total_trades: int
    wins: int
    losses: int
    win_rate: float
    total_pnl: float
    total_fees: float
    avg_roi: float
    profit_factor: float

    def to_dict(self) -> Dict:
        return {
            'total_trades': self.total_trades,
            'wins': self.wins,
            'losses': self.losses,
            'win_rate': round(self.win_rate, 4),
            'total_pnl': round(self.total_pnl, 2),
            'total_fees': round(self.total_fees, 2),
            'avg_roi': round(self.avg_roi, 3),
            'profit_factor': round(self.profit_factor, 2)
        }


@dataclass
class ExitReasonPerformance:
    """Performance for en exit reason"""
    reason: str
    total: int
    wins: int
    win_rate: float
    avg_pnl: float

    def to_dict(self) -> Dict:
        return {
            'reason': self.reason,
            'total': self.total,
            'wins': self.wins,
            'win_rate': round(self.win_rate, 4),
            'avg_pnl': round(self.avg_pnl, 2)
        }


class PerformanceAnalyzer:
    """
    Analyserer trading performance baseret på trade ledger.
    """

    def __init__(self, trades: Sequence[TradeOutcome]):
        """
        Args:
            trades: Trade outcomes in ledger order
        """
        self.trades = list(trades)

    def calculate_overall_metrics(self) -> OverallMetrics:
        """Beregner samlede performance metrics"""
        if not self.trades:
            return OverallMetrics(
                total_trades=0, wins=0, losses=0, win_rate=0,
                total_pnl=0, total_fees=0, avg_roi=0, profit_factor=0
            )

        wins = [t for t in self.trades if t.is_win]
        losses = [t for t in self.trades if not t.is_win]

        gross_wins = sum(t.gross_pnl for t in wins)
        gross_losses = sum(abs(t.gross_pnl) for t in losses)

        return OverallMetrics(
            total_trades=len(self.trades),
            wins=len(wins),
            losses=len(losses),
            win_rate=len(wins) / len(self.trades),
            total_pnl=sum(t.net_pnl for t in self.trades),
            total_fees=sum(t.fees_paid for t in self.trades),
            avg_roi=sum(t.roi for t in self.trades) / len(self.trades),
            profit_factor=scoring.profit_factor(gross_wins, gross_losses)
        )

    @staticmethod
    def exit_reason_breakdown(frame: pd.DataFrame) -> List[ExitReasonPerformance]:
        """
        Win rate and average P&L per exit reason.

        Args:
            frame: Ledger frame (TradeLedger.to_frame), needs exit_reason,
                   is_win and net_pnl columns

        Reasons without trades are omitted.
        """
        if frame.empty:
            return []

        grouped = frame.groupby('exit_reason')
        results = []
        for reason in ExitReason:
            if reason.value not in grouped.groups:
                continue
            subset = grouped.get_group(reason.value)
            wins = int(subset['is_win'].sum())
            results.append(ExitReasonPerformance(
                reason=reason.value,
                total=len(subset),
                wins=wins,
                win_rate=wins / len(subset),
                avg_pnl=float(subset['net_pnl'].mean())
            ))
        return results

    def estimate_drawdown_risk(self) -> float:
        """
        Max drawdown of the cumulative ROI curve, in percentage points.

        Unlike pattern drawdown (peak-to-trough of single-trade ROI values)
        this follows the summed ROI equity path across the whole ledger.
        """
        if not self.trades:
            return 0.0
        equity = pd.Series([t.roi for t in self.trades]).cumsum()
        # Start the curve at zero so a losing first trade counts as drawdown
        curve = [0.0] + equity.tolist()
        return scoring.max_drawdown(curve)

    def estimate_win_rate_at_confidence(self, confidence: float) -> float:
        """Win rate we can claim with the given confidence (Wilson lower bound)"""
        wins = sum(1 for t in self.trades if t.is_win)
        return scoring.win_rate_lower_bound(wins, len(self.trades), confidence)
