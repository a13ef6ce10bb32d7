"""
Learning Engine - Owns the ledger, pattern database and strategy set

The cycle:
Trade -> Ledger -> (every BATCH_SIZE trades) Pattern Miner ->
  -> Winning patterns -> Correlations -> Regime drift ->
    -> Strategy Factory rebuild -> orchestrator asks select_best()

Single-threaded and synchronous. Callers that need concurrency should
guard each engine call with one lock; no internal step tolerates a ledger
that changes mid-pass.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import copy
import logging

from ..analysis.correlations import PatternCorrelation, PatternCorrelationTracker
from ..analysis.regime import RegimeDetector, RegimeShiftReport
from ..config import ANALYSIS, ENGINE, SCORING, STRATEGY
from ..config import AnalysisConfig, EngineConfig, ScoringConfig, StrategyDefaults
from .ledger import TradeLedger
from .models import PatternKey, PatternMetrics, StrategyConfig, TradeOutcome
from .pattern_miner import PatternMiner
from .performance import ExitReasonPerformance, PerformanceAnalyzer
from .strategy_factory import StrategyFactory
from .trade_store import LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of one analyze() call"""
    status: str  # completed, insufficient_data
    total_trades: int
    required_trades: int = 0
    pattern_count: int = 0
    winners: List[PatternMetrics] = field(default_factory=list)
    correlations: List[PatternCorrelation] = field(default_factory=list)
    regime_shift: Optional[RegimeShiftReport] = None
    strategy_count: int = 0

    @property
    def completed(self) -> bool:
        return self.status == "completed"

    def to_dict(self) -> Dict:
        return {
            'status': self.status,
            'total_trades': self.total_trades,
            'required_trades': self.required_trades,
            'pattern_count': self.pattern_count,
            'winners': [str(m.key) for m in self.winners],
            'correlations': [c.to_dict() for c in self.correlations],
            'regime_shift': self.regime_shift.to_dict() if self.regime_shift else None,
            'strategy_count': self.strategy_count
        }


class LearningEngine:
    """
    Self-tuning pattern mining and strategy scoring.

    Eksempel:
        engine = LearningEngine()
        for trade in closed_trades:
            engine.record(trade)
        config = engine.select_best("XBTUSD", current_volatility=1.4)
        stats = engine.summary()
    """

    def __init__(self, config: EngineConfig = ENGINE,
                 scoring_config: ScoringConfig = SCORING,
                 analysis_config: AnalysisConfig = ANALYSIS,
                 strategy_defaults: StrategyDefaults = STRATEGY):
        self.config = config

        self._ledger = TradeLedger()
        self._patterns: Dict[str, PatternMetrics] = {}

        self.miner = PatternMiner(config, scoring_config)
        self.factory = StrategyFactory(config, strategy_defaults)
        self.correlations = PatternCorrelationTracker(analysis_config)
        self.regime = RegimeDetector(analysis_config)

    # ------------------------------------------------------------------
    # Trades
    # ------------------------------------------------------------------

    def record(self, trade: TradeOutcome) -> Optional[AnalysisResult]:
        """
        Appends a trade. Every BATCH_SIZE trades an analysis pass runs.

        Returns:
            The AnalysisResult when a pass was triggered, else None
        """
        self._ledger.record(trade)

        if self._ledger.is_analysis_due(self.config.BATCH_SIZE):
            logger.info(f"Auto-analyzing at trade #{len(self._ledger)}")
            return self.analyze()
        return None

    def trades(self) -> Tuple[TradeOutcome, ...]:
        return self._ledger.trades()

    def instruments(self) -> List[str]:
        return self._ledger.instruments()

    @property
    def trade_count(self) -> int:
        return len(self._ledger)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self) -> AnalysisResult:
        """Full recompute of patterns and strategies from the current ledger"""
        n = len(self._ledger)
        required = self.config.MIN_TRADES_FOR_ANALYSIS

        if n < required:
            logger.info(f"Need {required} trades for analysis (have {n})")
            return AnalysisResult(status="insufficient_data", total_trades=n,
                                  required_trades=required)

        logger.info(f"LEARNING ENGINE: Analyzing {n} trades...")
        trades = self._ledger.trades()

        # 1-2. Group and score patterns
        self._patterns = self.miner.mine(trades)

        # 3. Winning patterns
        winners = self.miner.winning_patterns(self._patterns, limit=self.config.TOP_WINNERS)

        # 4. Correlations between edge patterns
        correlations = self.correlations.correlate(self._patterns, self._ledger)

        # 5. Regime drift
        shift = self.regime.detect_shift(trades)

        # 6. Strategy set
        strategies = self.factory.rebuild(self._patterns)

        return AnalysisResult(
            status="completed",
            total_trades=n,
            required_trades=required,
            pattern_count=len(self._patterns),
            winners=[copy.deepcopy(m) for m in winners],
            correlations=correlations,
            regime_shift=shift,
            strategy_count=len(strategies)
        )

    def patterns(self) -> Dict[str, PatternMetrics]:
        """Copy of the pattern database; edits do not reach the engine"""
        return {key: copy.deepcopy(m) for key, m in self._patterns.items()}

    def strategies(self) -> Tuple[StrategyConfig, ...]:
        return self.factory.strategies()

    def get_pattern_metrics(self, instrument: str, leverage: float, bucket: int) -> PatternMetrics:
        """Metrics for a pattern, or an all-zero record when it is not in the database"""
        key = PatternKey(instrument, int(leverage), bucket)
        metrics = self._patterns.get(str(key))
        if metrics is None:
            return PatternMetrics.empty(key)
        return copy.deepcopy(metrics)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def select_best(self, instrument: str, current_volatility: float) -> StrategyConfig:
        return self.factory.select_best(instrument, current_volatility, self._patterns)

    def market_regime(self) -> str:
        lookback = self.regime.config.REGIME_LOOKBACK
        return self.regime.label(self._ledger.recent(lookback)).value

    def exit_reason_performance(self) -> List[ExitReasonPerformance]:
        return PerformanceAnalyzer.exit_reason_breakdown(self._ledger.to_frame())

    def estimate_drawdown_risk(self) -> float:
        return PerformanceAnalyzer(self._ledger.trades()).estimate_drawdown_risk()

    def estimate_win_rate_at_confidence(self, confidence: float) -> float:
        return PerformanceAnalyzer(self._ledger.trades()).estimate_win_rate_at_confidence(confidence)

    def summary(self) -> Dict:
        """Returnerer engine statistik"""
        overall = PerformanceAnalyzer(self._ledger.trades()).calculate_overall_metrics()
        return {
            'total_trades': overall.total_trades,
            'win_rate': overall.win_rate,
            'total_pnl': overall.total_pnl,
            'pattern_count': len(self._patterns),
            'strategy_count': self.factory.count,
            'regime_label': self.market_regime()
        }

    def format_summary(self) -> str:
        stats = self.summary()
        lines = [
            "=" * 60,
            "LEARNING ENGINE SUMMARY",
            "=" * 60,
            f"  Total Trades: {stats['total_trades']}",
            f"  Win Rate: {stats['win_rate'] * 100:.1f}%",
            f"  Total P&L: ${stats['total_pnl']:.2f}",
            f"  Patterns Found: {stats['pattern_count']}",
            f"  Validated Strategies: {stats['strategy_count']}",
            f"  Market Regime: {stats['regime_label']}",
            "=" * 60
        ]
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, path: Union[str, Path]) -> Path:
        """Writes the ledger. Raises PersistenceError on I/O failure."""
        return LedgerStore(path).save(self._ledger)

    def load(self, path: Union[str, Path]) -> AnalysisResult:
        """
        Replaces the ledger with the file's trades and rebuilds caches.

        The file is parsed completely before anything is swapped, so a
        PersistenceError leaves the engine exactly as it was.
        """
        ledger = LedgerStore(path).load()

        self._ledger = ledger
        self._patterns = {}
        self.factory.rebuild(self._patterns)
        return self.analyze()
