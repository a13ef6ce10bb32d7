"""
Learning - Pattern mining and strategy synthesis

The Loop:
Trade -> Ledger -> Pattern Miner -> Scoring -> Correlations/Regime ->
  -> Strategy Factory -> select_best() -> next trade

Components:
- TradeLedger: Append-only trade history with instrument/pattern indexes
- PatternMiner: Groups trades into patterns and scores them
- StrategyFactory: Builds and selects strategy configs
- PerformanceAnalyzer: Ledger-wide metrics and risk estimates
- LedgerStore: JSON persistence
- LearningEngine (learning.engine): Owns all of the above
"""

from .errors import LearningError, InvalidTradeError, PersistenceError
from .models import (
    ExitReason, TradeOutcome, PatternKey, PatternMetrics, StrategyConfig,
    SAFE_DEFAULT_NAME, bucket_for,
)
from .ledger import TradeLedger
from .pattern_miner import PatternMiner
from .strategy_factory import StrategyFactory
from .performance import PerformanceAnalyzer
from .trade_store import LedgerStore

__all__ = [
    'LearningError',
    'InvalidTradeError',
    'PersistenceError',
    'ExitReason',
    'TradeOutcome',
    'PatternKey',
    'PatternMetrics',
    'StrategyConfig',
    'SAFE_DEFAULT_NAME',
    'bucket_for',
    'TradeLedger',
    'PatternMiner',
    'StrategyFactory',
    'PerformanceAnalyzer',
    'LedgerStore'
]
