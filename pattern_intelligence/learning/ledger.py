"""
Pattern Intelligence - Trade Ledger
===================================
Append-only history of trade outcomes, indexed by instrument and by
pattern key. The ledger is the single source of truth every analysis pass
is recomputed from.
"""

from collections import defaultdict
from typing import Dict, Iterator, List, Tuple
import logging

import pandas as pd

from .models import PatternKey, TradeOutcome

logger = logging.getLogger(__name__)


class TradeLedger:
    """
    Total-order trade history plus secondary indexes in the same order.

    Eksempel:
        ledger = TradeLedger()
        ledger.record(trade)
        ledger.by_instrument("XBTUSD")
    """

    def __init__(self):
        self._trades: List[TradeOutcome] = []
        self._by_instrument: Dict[str, List[TradeOutcome]] = defaultdict(list)
        self._by_pattern: Dict[PatternKey, List[TradeOutcome]] = defaultdict(list)

    def record(self, trade: TradeOutcome) -> int:
        """
        Appends a trade in arrival order.

        Returns:
            New ledger size
        """
        trade.validate()

        self._trades.append(trade)
        self._by_instrument[trade.instrument].append(trade)
        self._by_pattern[trade.pattern_key].append(trade)

        logger.debug(f"Trade #{len(self._trades)} recorded: {trade.instrument} "
                     f"{trade.net_pnl:+.2f} ({trade.exit_reason.value})")
        return len(self._trades)

    def extend(self, trades) -> int:
        for trade in trades:
            self.record(trade)
        return len(self._trades)

    def is_analysis_due(self, batch_size: int) -> bool:
        """True when the trade count is a positive multiple of batch_size"""
        return len(self._trades) > 0 and len(self._trades) % batch_size == 0

    def trades(self) -> Tuple[TradeOutcome, ...]:
        return tuple(self._trades)

    def recent(self, n: int) -> Tuple[TradeOutcome, ...]:
        if n <= 0:
            return ()
        return tuple(self._trades[-n:])

    def by_instrument(self, instrument: str) -> Tuple[TradeOutcome, ...]:
        return tuple(self._by_instrument.get(instrument, ()))

    def by_pattern(self, key: PatternKey) -> Tuple[TradeOutcome, ...]:
        return tuple(self._by_pattern.get(key, ()))

    def instruments(self) -> List[str]:
        return sorted(self._by_instrument)

    def to_frame(self) -> pd.DataFrame:
        """One row per trade in ledger order, with is_win / roi / pattern columns"""
        if not self._trades:
            return pd.DataFrame()

        rows = []
        for trade in self._trades:
            row = trade.to_dict()
            row['is_win'] = trade.is_win
            row['roi'] = trade.roi
            row['pattern'] = str(trade.pattern_key)
            rows.append(row)
        return pd.DataFrame(rows)

    def __len__(self) -> int:
        return len(self._trades)

    def __iter__(self) -> Iterator[TradeOutcome]:
        return iter(tuple(self._trades))
