"""
Pattern Intelligence - Pattern Correlations
===========================================
Finds edge patterns that tend to win and lose together.

Each pattern is reduced to its win/loss indicator sequence (1.0 win,
0.0 loss) in ledger order; pairs are compared position by position up to
the shorter sequence.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Dict, List
import logging

from ..config import ANALYSIS, AnalysisConfig
from ..learning.ledger import TradeLedger
from ..learning.models import PatternMetrics
from ..learning.scoring import pearson_correlation

logger = logging.getLogger(__name__)


@dataclass
class PatternCorrelation:
    """Correlation between two edge patterns"""
    first: str
    second: str
    correlation: float

    @property
    def label(self) -> str:
        return f"{self.first} <-> {self.second}"

    @property
    def strength(self) -> str:
        r = abs(self.correlation)
        if r >= 0.7:
            return "STRONG"
        elif r >= 0.5:
            return "MODERATE"
        return "WEAK"

    def to_dict(self) -> Dict:
        return {
            'pair': self.label,
            'correlation': round(self.correlation, 3),
            'strength': self.strength
        }


class PatternCorrelationTracker:
    """
    Tracker korrelationer mellem edge patterns.
    """

    def __init__(self, config: AnalysisConfig = ANALYSIS):
        self.config = config

    @staticmethod
    def outcome_sequence(ledger: TradeLedger, metrics: PatternMetrics) -> List[float]:
        return [1.0 if t.is_win else 0.0 for t in ledger.by_pattern(metrics.key)]

    def correlate(self, database: Dict[str, PatternMetrics],
                  ledger: TradeLedger) -> List[PatternCorrelation]:
        """
        Compares every unordered pair of edge patterns once.

        Every defined correlation is written onto both patterns' correlation
        maps. Pairs with zero variance on either side are skipped.

        Returns:
            Up to TOP_CORRELATIONS pairs with |r| above the threshold, strongest first
        """
        edge_keys = sorted(k for k, m in database.items() if m.has_edge)
        sequences = {k: self.outcome_sequence(ledger, database[k]) for k in edge_keys}

        significant = []
        for key1, key2 in combinations(edge_keys, 2):
            r = pearson_correlation(sequences[key1], sequences[key2])
            if r is None:
                continue

            database[key1].correlations[key2] = r
            database[key2].correlations[key1] = r

            if abs(r) > self.config.CORRELATION_THRESHOLD:
                significant.append(PatternCorrelation(key1, key2, r))

        significant.sort(key=lambda c: abs(c.correlation), reverse=True)
        top = significant[:self.config.TOP_CORRELATIONS]

        for c in top:
            logger.info(f"{c.label}: {c.correlation:.2f}")
        if not top:
            logger.debug(f"No correlated pairs among {len(edge_keys)} edge patterns")

        return top
