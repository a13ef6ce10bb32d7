"""
Pattern Intelligence - Data Model
=================================
Trade outcomes, pattern keys, pattern metrics and strategy configs.

- TradeOutcome: one closed trade, immutable once recorded
- PatternKey: instrument x leverage x holding-time bucket
- PatternMetrics: statistics for one pattern, rebuilt on every analysis pass
- StrategyConfig: actionable parameters synthesized from a validated pattern
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from .errors import InvalidTradeError


SAFE_DEFAULT_NAME = "safe_default"

# Upper bounds (seconds, exclusive) of holding-time buckets 0, 1, 2; anything longer is bucket 3
BUCKET_EDGES = (30, 60, 120)


class ExitReason(Enum):
    TAKE_PROFIT = "take_profit"
    STOP_LOSS = "stop_loss"
    TIMEOUT = "timeout"
    MANUAL = "manual"


def bucket_for(holding_seconds: float) -> int:
    """Holding-time bucket: 0 (<30s), 1 (30-60s), 2 (60-120s), 3 (>=120s)"""
    for bucket, upper in enumerate(BUCKET_EDGES):
        if holding_seconds < upper:
            return bucket
    return len(BUCKET_EDGES)


@dataclass(frozen=True)
class PatternKey:
    """Composite identity joining trades to pattern statistics"""
    instrument: str
    leverage: int
    bucket: int

    @classmethod
    def from_trade(cls, trade: 'TradeOutcome') -> 'PatternKey':
        return cls(
            instrument=trade.instrument,
            leverage=int(trade.leverage),
            bucket=bucket_for(trade.holding_seconds)
        )

    @classmethod
    def parse(cls, text: str) -> 'PatternKey':
        """Inverse of str(). Instrument ids may contain underscores."""
        try:
            instrument, leverage, bucket = text.rsplit('_', 2)
            if not leverage.endswith('x'):
                raise ValueError(text)
            return cls(instrument, int(leverage[:-1]), int(bucket))
        except ValueError:
            raise ValueError(f"Not a pattern key: {text!r}") from None

    @property
    def midpoint_seconds(self) -> int:
        return self.bucket * 30 + 15

    def __str__(self) -> str:
        return f"{self.instrument}_{self.leverage}x_{self.bucket}"


@dataclass(frozen=True)
class TradeOutcome:
    """One closed trade"""
    instrument: str
    entry_price: float
    exit_price: float
    leverage: float
    holding_seconds: float
    position_size: float
    net_pnl: float                    # after fees
    gross_pnl: Optional[float] = None  # before fees, defaults to net + fees
    fees_paid: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
    exit_reason: ExitReason = ExitReason.MANUAL
    volatility_at_entry: float = 0.0  # % volatility of the instrument
    spread_at_entry: float = 0.0      # bid/ask spread %

    # Excursion markers
    bars_to_peak: int = 0
    bars_to_trough: int = 0
    max_favorable_excursion: float = 0.0
    max_adverse_excursion: float = 0.0
    trend_direction: float = 0.0  # 1.0 = up, -1.0 = down, 0.0 = neutral

    def __post_init__(self):
        if self.gross_pnl is None:
            object.__setattr__(self, 'gross_pnl', self.net_pnl + self.fees_paid)
        if not isinstance(self.exit_reason, ExitReason):
            try:
                object.__setattr__(self, 'exit_reason', ExitReason(self.exit_reason))
            except ValueError:
                raise InvalidTradeError(f"Unknown exit reason: {self.exit_reason!r}") from None

    def validate(self) -> None:
        """Raises InvalidTradeError when the trade cannot be analyzed"""
        if not self.instrument:
            raise InvalidTradeError("Trade has no instrument")
        if self.position_size <= 0:
            raise InvalidTradeError(f"Position size must be positive, got {self.position_size}")
        if self.holding_seconds < 0:
            raise InvalidTradeError(f"Holding time cannot be negative, got {self.holding_seconds}")

    @property
    def is_win(self) -> bool:
        return self.net_pnl > 0

    @property
    def roi(self) -> float:
        """Net P&L as % of position size"""
        return self.net_pnl / self.position_size * 100

    @property
    def pattern_key(self) -> PatternKey:
        return PatternKey.from_trade(self)

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['timestamp'] = self.timestamp.isoformat()
        d['exit_reason'] = self.exit_reason.value
        return d

    @classmethod
    def from_dict(cls, data: Dict) -> 'TradeOutcome':
        """Opret TradeOutcome fra dictionary (unknown keys are ignored)"""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if isinstance(known.get('timestamp'), str):
            known['timestamp'] = datetime.fromisoformat(known['timestamp'])
        return cls(**known)


@dataclass
class PatternMetrics:
    """Performance and risk statistics for one pattern"""
    instrument: str = ""
    leverage: int = 0
    bucket: int = 0

    # Performance
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    total_pnl: float = 0.0
    total_fees: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0

    # Risk
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0

    # Confidence and edge
    confidence_score: float = 0.0
    expected_pnl: float = 0.0
    has_edge: bool = False
    edge_percentage: float = 0.0

    # Filled by correlation analysis: other pattern key -> r
    correlations: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def empty(cls, key: PatternKey) -> 'PatternMetrics':
        return cls(instrument=key.instrument, leverage=key.leverage, bucket=key.bucket)

    @property
    def key(self) -> PatternKey:
        return PatternKey(self.instrument, self.leverage, self.bucket)

    def is_trustworthy(self, threshold: float) -> bool:
        return self.confidence_score >= threshold

    def to_dict(self) -> Dict:
        return {
            'key': str(self.key),
            'instrument': self.instrument,
            'leverage': self.leverage,
            'bucket': self.bucket,
            'total_trades': self.total_trades,
            'winning_trades': self.winning_trades,
            'losing_trades': self.losing_trades,
            'total_pnl': round(self.total_pnl, 2),
            'total_fees': round(self.total_fees, 2),
            'avg_win': round(self.avg_win, 2),
            'avg_loss': round(self.avg_loss, 2),
            'win_rate': round(self.win_rate, 4),
            'profit_factor': round(self.profit_factor, 2),
            'max_drawdown': round(self.max_drawdown, 2),
            'sharpe_ratio': round(self.sharpe_ratio, 3),
            'sortino_ratio': round(self.sortino_ratio, 3),
            'confidence_score': round(self.confidence_score, 3),
            'has_edge': self.has_edge,
            'edge_percentage': round(self.edge_percentage, 2),
            'correlations': {k: round(v, 3) for k, v in self.correlations.items()}
        }


@dataclass(frozen=True)
class StrategyConfig:
    """Synthesized trading parameters. Replaced wholesale, never mutated."""
    name: str
    leverage: float
    holding_seconds: int
    min_volatility: float     # only trade if vol > this
    max_spread_pct: float     # skip if spread > this %
    take_profit_pct: float
    stop_loss_pct: float
    position_size: float

    use_trailing_stop: bool = True
    trailing_stop_pct: float = 0.5
    use_partial_exits: bool = True

    is_validated: bool = False
    has_edge: bool = False
    estimated_edge: float = 0.0

    @property
    def is_safe_default(self) -> bool:
        return self.name == SAFE_DEFAULT_NAME

    @property
    def pattern_key(self) -> Optional[PatternKey]:
        """Source pattern, or None for safe default / ensembles"""
        try:
            return PatternKey.parse(self.name)
        except ValueError:
            return None

    def to_dict(self) -> Dict:
        return asdict(self)
