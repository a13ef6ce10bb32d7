"""
Pattern Miner - Groups trade outcomes into patterns and scores them

A pattern is instrument x leverage x holding-time bucket. For every pattern
with enough trades the miner computes:
1. Win/loss counts, P&L, fees and average win/loss
2. Profit factor and win rate
3. Risk metrics on the ROI series (Sharpe, Sortino, max drawdown)
4. A confidence score
5. Whether expected P&L beats fees by a safety margin (edge)

The database is always rebuilt from the full trade list, never merged.
"""

import json
import os
from collections import defaultdict
from typing import Dict, Iterable, List, Optional
import logging

from ..config import ENGINE, SCORING, EngineConfig, ScoringConfig
from .models import PatternKey, PatternMetrics, TradeOutcome
from . import scoring

logger = logging.getLogger(__name__)


class PatternMiner:
    """
    Mines the trade ledger for patterns with a credible edge.
    """

    def __init__(self, config: EngineConfig = ENGINE, scoring_config: ScoringConfig = SCORING):
        self.config = config
        self.scoring_config = scoring_config

    def group_trades(self, trades: Iterable[TradeOutcome]) -> Dict[PatternKey, List[TradeOutcome]]:
        """Partition trades by pattern key, keeping ledger order inside each bucket"""
        groups: Dict[PatternKey, List[TradeOutcome]] = defaultdict(list)
        for trade in trades:
            groups[trade.pattern_key].append(trade)
        return groups

    def mine(self, trades: Iterable[TradeOutcome]) -> Dict[str, PatternMetrics]:
        """
        Builds a fresh pattern database.

        Args:
            trades: Full trade history in ledger order

        Returns:
            Dict med pattern key string -> PatternMetrics, sorted by key
        """
        database = {}
        groups = self.group_trades(trades)

        for key in sorted(groups, key=str):
            bucket_trades = groups[key]
            if len(bucket_trades) < self.config.MIN_PATTERN_TRADES:
                continue

            metrics = self.compute_metrics(key, bucket_trades)
            database[str(key)] = metrics

            logger.debug(
                f"{key} | Trades: {metrics.total_trades:3d} | "
                f"Win Rate: {metrics.win_rate * 100:.1f}% | "
                f"P/F: {metrics.profit_factor:.2f} | "
                f"Sharpe: {metrics.sharpe_ratio:.2f} | "
                f"Conf: {metrics.confidence_score * 100:.0f}% | "
                f"Edge: {'yes' if metrics.has_edge else 'no'}"
            )

        logger.info(f"Mined {len(database)} patterns from {len(groups)} buckets")
        return database

    def compute_metrics(self, key: PatternKey, trades: List[TradeOutcome]) -> PatternMetrics:
        """Statistics for one pattern bucket"""
        metrics = PatternMetrics.empty(key)
        metrics.total_trades = len(trades)

        gross_wins = 0.0
        gross_losses = 0.0
        returns = []

        for t in trades:
            if t.is_win:
                metrics.winning_trades += 1
                gross_wins += t.gross_pnl
            else:
                metrics.losing_trades += 1
                gross_losses += abs(t.gross_pnl)
            returns.append(t.roi)
            metrics.total_pnl += t.net_pnl
            metrics.total_fees += t.fees_paid

        metrics.win_rate = metrics.winning_trades / metrics.total_trades

        if metrics.winning_trades > 0:
            metrics.avg_win = gross_wins / metrics.winning_trades
        if metrics.losing_trades > 0:
            metrics.avg_loss = gross_losses / metrics.losing_trades

        metrics.profit_factor = scoring.profit_factor(gross_wins, gross_losses)

        # Ratios optionally on an outlier-free series; drawdown always on the raw one
        ratio_returns = returns
        if self.config.FILTER_OUTLIERS:
            ratio_returns = scoring.remove_outliers(
                returns, self.scoring_config.OUTLIER_STD_THRESHOLD
            )
        metrics.sharpe_ratio = scoring.sharpe_ratio(ratio_returns)
        metrics.sortino_ratio = scoring.sortino_ratio(ratio_returns)
        metrics.max_drawdown = scoring.max_drawdown(returns)

        metrics.confidence_score = scoring.confidence_score(
            metrics.total_trades, metrics.win_rate, metrics.profit_factor,
            self.scoring_config
        )

        self._apply_edge(metrics)
        return metrics

    def _apply_edge(self, metrics: PatternMetrics) -> None:
        """Expected P&L per trade must beat total fees by the safety margin"""
        expected_pnl = (metrics.win_rate * metrics.avg_win
                        - (1.0 - metrics.win_rate) * metrics.avg_loss)

        metrics.expected_pnl = expected_pnl
        metrics.has_edge = expected_pnl > metrics.total_fees * self.config.FEE_SAFETY_MARGIN

        if metrics.avg_win > 0:
            metrics.edge_percentage = expected_pnl / metrics.avg_win * 100
        else:
            metrics.edge_percentage = 0.0

    def winning_patterns(self, database: Dict[str, PatternMetrics],
                         limit: Optional[int] = None) -> List[PatternMetrics]:
        """Edge patterns above the confidence threshold, best profit factor first"""
        winners = [
            m for m in database.values()
            if m.has_edge and m.is_trustworthy(self.config.CONFIDENCE_THRESHOLD)
        ]
        winners.sort(key=lambda m: m.profit_factor, reverse=True)

        if limit is not None:
            winners = winners[:limit]

        for i, m in enumerate(winners, 1):
            logger.info(f"#{i}: {m.key} | PF: {m.profit_factor:.2f} | "
                        f"WR: {m.win_rate * 100:.1f}% | Trades: {m.total_trades}")
        return winners

    def export_patterns(self, database: Dict[str, PatternMetrics],
                        filepath: str = "data/pattern_database.json") -> str:
        """Export pattern database to JSON"""
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)

        patterns = [m.to_dict() for m in database.values()]

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(patterns, f, indent=2)

        logger.info(f"Exported {len(patterns)} patterns to {filepath}")
        return filepath
