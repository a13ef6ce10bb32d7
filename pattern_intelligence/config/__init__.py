from .settings import (
    BASE_DIR, DATA_DIR, LEDGER_PATH, LOG_LEVEL, LOG_FILE,
    EngineConfig, ScoringConfig, AnalysisConfig, StrategyDefaults,
    ENGINE, SCORING, ANALYSIS, STRATEGY,
)
