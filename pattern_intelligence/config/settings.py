"""
Pattern Intelligence - Konfiguration
====================================
Central settings for the learning engine.
"""

import os
from dataclasses import dataclass
from pathlib import Path

# Basis stier
BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
LEDGER_PATH = DATA_DIR / "trade_ledger.json"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", str(BASE_DIR / "logs" / "learning.log"))


@dataclass
class EngineConfig:
    """Scheduling and gating for the analysis cycle"""
    # Auto-analyze every N recorded trades
    BATCH_SIZE: int = 25

    # Below this ledger size analyze() is a no-op
    MIN_TRADES_FOR_ANALYSIS: int = 25

    # Pattern buckets with fewer trades are left out of the database
    MIN_PATTERN_TRADES: int = 5

    # A pattern is trusted once confidence >= this
    CONFIDENCE_THRESHOLD: float = 0.6

    # Expected P&L must beat total fees by this factor
    FEE_SAFETY_MARGIN: float = 1.5

    # Strip outliers from the ROI series before Sharpe/Sortino
    FILTER_OUTLIERS: bool = False

    # Winning patterns listed per analysis pass
    TOP_WINNERS: int = 5


@dataclass
class ScoringConfig:
    """Weights for the confidence blend and outlier cut"""
    OUTLIER_STD_THRESHOLD: float = 2.5

    SAMPLE_WEIGHT: float = 0.4
    WIN_RATE_WEIGHT: float = 0.3
    PROFIT_FACTOR_WEIGHT: float = 0.3

    # 30+ trades = full sample score
    FULL_SAMPLE_TRADES: int = 30
    # 35% baseline win rate
    BASE_WIN_RATE: float = 0.35
    # 1.5 = full profit factor score
    FULL_PROFIT_FACTOR: float = 1.5


@dataclass
class AnalysisConfig:
    """Correlation and regime thresholds (fixed policy, not learned)"""
    CORRELATION_THRESHOLD: float = 0.3
    TOP_CORRELATIONS: int = 3

    DRIFT_MIN_TRADES: int = 20
    DRIFT_THRESHOLD: float = 0.15

    REGIME_LOOKBACK: int = 20
    HIGH_VOLATILITY_STD: float = 5.0
    TREND_UP_MEAN: float = 2.0
    TREND_DOWN_MEAN: float = -2.0


@dataclass
class StrategyDefaults:
    """Uniform gates applied to every synthesized strategy"""
    MIN_VOLATILITY: float = 0.5    # 0.5% minimum
    MAX_SPREAD_PCT: float = 0.1    # 0.1% max spread
    BASE_POSITION_SIZE: float = 100.0
    TRAILING_STOP_PCT: float = 0.5

    # Safe default
    SAFE_LEVERAGE: float = 1.0
    SAFE_HOLDING_SECONDS: int = 60
    SAFE_TAKE_PROFIT_PCT: float = 0.02
    SAFE_STOP_LOSS_PCT: float = 0.03
    SAFE_POSITION_SIZE: float = 50.0


# Globale instanser
ENGINE = EngineConfig()
SCORING = ScoringConfig()
ANALYSIS = AnalysisConfig()
STRATEGY = StrategyDefaults()
