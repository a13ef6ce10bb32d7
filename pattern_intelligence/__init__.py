"""
Pattern Intelligence
====================
Self-tuning pattern mining and strategy scoring for closed trade outcomes.

Moduler:
- config: Konfigurationsindstillinger
- learning: Ledger, pattern miner, scoring, strategy factory, persistence
- analysis: Pattern correlations og regime detection
- utils: Logging setup

Brug:
    from pattern_intelligence import LearningEngine, TradeOutcome
    engine = LearningEngine()
    engine.record(trade)
    config = engine.select_best("XBTUSD", current_volatility=1.2)
"""

from .learning.engine import LearningEngine, AnalysisResult
from .learning import (
    ExitReason, TradeOutcome, PatternKey, PatternMetrics, StrategyConfig,
    TradeLedger, LedgerStore, LearningError, InvalidTradeError, PersistenceError,
)
from .analysis import MarketRegime

__version__ = "1.0.0"
