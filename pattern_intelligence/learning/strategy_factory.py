"""
Strategy Factory - Turns validated patterns into strategy configs

This module:
1. Rebuilds the strategy set from scratch after every analysis pass
2. Selects the best strategy for an instrument and current volatility
3. Falls back to a fixed safe default when nothing qualifies
4. Blends several configs into an ensemble on request

Volatility/spread gates and base position size are uniform across all
strategies; they are not derived per pattern.
"""

from typing import Dict, List, Sequence, Tuple
import logging

import numpy as np

from ..config import ENGINE, STRATEGY, EngineConfig, StrategyDefaults
from .models import SAFE_DEFAULT_NAME, PatternMetrics, StrategyConfig

logger = logging.getLogger(__name__)


class StrategyFactory:
    """
    Owns the synthesized strategy set.

    Eksempel:
        factory = StrategyFactory()
        factory.rebuild(pattern_database)
        config = factory.select_best("XBTUSD", 1.2, pattern_database)
    """

    def __init__(self, config: EngineConfig = ENGINE, defaults: StrategyDefaults = STRATEGY):
        self.config = config
        self.defaults = defaults
        self._strategies: Tuple[StrategyConfig, ...] = ()

    @property
    def count(self) -> int:
        return len(self._strategies)

    def strategies(self) -> Tuple[StrategyConfig, ...]:
        return self._strategies

    def safe_default(self) -> StrategyConfig:
        """Fixed fallback. Never validated, never carries an edge."""
        d = self.defaults
        return StrategyConfig(
            name=SAFE_DEFAULT_NAME,
            leverage=d.SAFE_LEVERAGE,
            holding_seconds=d.SAFE_HOLDING_SECONDS,
            min_volatility=0.0,
            max_spread_pct=d.MAX_SPREAD_PCT,
            take_profit_pct=d.SAFE_TAKE_PROFIT_PCT,
            stop_loss_pct=d.SAFE_STOP_LOSS_PCT,
            position_size=d.SAFE_POSITION_SIZE,
            trailing_stop_pct=d.TRAILING_STOP_PCT,
            is_validated=False,
            has_edge=False,
            estimated_edge=0.0
        )

    def build_config(self, metrics: PatternMetrics) -> StrategyConfig:
        """Strategy parameters for one validated pattern"""
        key = metrics.key
        return StrategyConfig(
            name=str(key),
            leverage=float(key.leverage),
            holding_seconds=key.midpoint_seconds,
            min_volatility=self.defaults.MIN_VOLATILITY,
            max_spread_pct=self.defaults.MAX_SPREAD_PCT,
            take_profit_pct=metrics.avg_win / 100.0,
            stop_loss_pct=metrics.avg_loss / 100.0,
            position_size=self.defaults.BASE_POSITION_SIZE,
            trailing_stop_pct=self.defaults.TRAILING_STOP_PCT,
            is_validated=True,
            has_edge=True,
            estimated_edge=metrics.edge_percentage
        )

    def rebuild(self, database: Dict[str, PatternMetrics]) -> Tuple[StrategyConfig, ...]:
        """
        Discards every existing config and regenerates one per edge pattern
        whose confidence clears the threshold.
        """
        threshold = self.config.CONFIDENCE_THRESHOLD
        self._strategies = tuple(
            self.build_config(metrics)
            for key, metrics in sorted(database.items())
            if metrics.has_edge and metrics.confidence_score >= threshold
        )

        logger.info(f"Created {len(self._strategies)} validated strategies")
        return self._strategies

    def candidates(self, instrument: str, current_volatility: float) -> List[StrategyConfig]:
        """Configs for the instrument whose volatility gate current_volatility satisfies"""
        result = []
        for config in self._strategies:
            key = config.pattern_key
            if key is None or key.instrument != instrument:
                continue
            if current_volatility >= config.min_volatility:
                result.append(config)
        return result

    def select_best(self, instrument: str, current_volatility: float,
                    database: Dict[str, PatternMetrics]) -> StrategyConfig:
        """
        Highest-Sharpe candidate for the instrument, or the safe default.

        Args:
            instrument: Instrument id
            current_volatility: Current volatility in %
            database: Pattern database the Sharpe ratios are read from
        """
        candidates = self.candidates(instrument, current_volatility)
        if not candidates:
            logger.debug(f"No strategy for {instrument} at {current_volatility:.2f}% vol, "
                         f"using {SAFE_DEFAULT_NAME}")
            return self.safe_default()

        # Pair each candidate with its Sharpe before comparing
        ranked = []
        for config in candidates:
            metrics = database.get(config.name)
            sharpe = metrics.sharpe_ratio if metrics is not None else float('-inf')
            ranked.append((sharpe, config))

        best_sharpe, best = ranked[0]
        for sharpe, config in ranked[1:]:
            if sharpe > best_sharpe:
                best_sharpe, best = sharpe, config

        logger.debug(f"Selected {best.name} for {instrument} (Sharpe {best_sharpe:.2f})")
        return best

    def create_ensemble(self, candidates: Sequence[StrategyConfig]) -> StrategyConfig:
        """
        Averages the numeric parameters of several configs.

        Leverage and holding time are rounded to whole values. The ensemble is
        validated (and carries an edge) only when every member does.
        """
        if not candidates:
            return self.safe_default()

        def mean(attr: str) -> float:
            return float(np.mean([getattr(c, attr) for c in candidates]))

        return StrategyConfig(
            name="ensemble(" + ",".join(c.name for c in candidates) + ")",
            leverage=float(round(mean('leverage'))),
            holding_seconds=int(round(mean('holding_seconds'))),
            min_volatility=max(c.min_volatility for c in candidates),
            max_spread_pct=min(c.max_spread_pct for c in candidates),
            take_profit_pct=mean('take_profit_pct'),
            stop_loss_pct=mean('stop_loss_pct'),
            position_size=mean('position_size'),
            trailing_stop_pct=mean('trailing_stop_pct'),
            use_trailing_stop=all(c.use_trailing_stop for c in candidates),
            use_partial_exits=all(c.use_partial_exits for c in candidates),
            is_validated=all(c.is_validated for c in candidates),
            has_edge=all(c.has_edge for c in candidates),
            estimated_edge=mean('estimated_edge')
        )
