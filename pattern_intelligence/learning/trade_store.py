"""
Pattern Intelligence - Ledger Persistence
=========================================
Saves the trade ledger as a human-readable JSON document and reads it
back into a fresh ledger.

Document layout:
    {
      "version": "1.0",
      "total_trades": 2,
      "saved_at": "2026-01-01T12:00:00",
      "trades": [{"instrument": ..., "entry": ..., "exit": ..., "leverage": ...,
                  "pnl": ..., "reason": ..., ...}, ...]
    }

Readers ignore keys they do not know, so newer files load in older code.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Union
import logging

from .errors import PersistenceError
from .ledger import TradeLedger
from .models import TradeOutcome

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


def trade_to_record(trade: TradeOutcome) -> Dict:
    """Persisted form of one trade"""
    return {
        'instrument': trade.instrument,
        'entry': trade.entry_price,
        'exit': trade.exit_price,
        'leverage': trade.leverage,
        'pnl': trade.net_pnl,
        'reason': trade.exit_reason.value,
        'gross_pnl': trade.gross_pnl,
        'fees': trade.fees_paid,
        'holding_seconds': trade.holding_seconds,
        'position_size': trade.position_size,
        'timestamp': trade.timestamp.isoformat(),
        'volatility': trade.volatility_at_entry,
        'spread': trade.spread_at_entry
    }


def record_to_trade(record: Dict) -> TradeOutcome:
    """Inverse of trade_to_record. Optional fields fall back to defaults."""
    kwargs = {
        'instrument': record['instrument'],
        'entry_price': float(record['entry']),
        'exit_price': float(record['exit']),
        'leverage': float(record['leverage']),
        'net_pnl': float(record['pnl']),
        'exit_reason': record['reason'],
        'holding_seconds': float(record.get('holding_seconds', 0)),
        # Older files carry no size; 1.0 keeps roi() defined
        'position_size': float(record.get('position_size', 1.0)),
        'fees_paid': float(record.get('fees', 0.0)),
        'volatility_at_entry': float(record.get('volatility', 0.0)),
        'spread_at_entry': float(record.get('spread', 0.0))
    }
    if record.get('gross_pnl') is not None:
        kwargs['gross_pnl'] = float(record['gross_pnl'])
    if record.get('timestamp'):
        kwargs['timestamp'] = datetime.fromisoformat(record['timestamp'])
    return TradeOutcome(**kwargs)


class LedgerStore:
    """
    Reads and writes ledger documents.

    Failures surface as PersistenceError; nothing is retried.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def save(self, ledger: TradeLedger) -> Path:
        """Gemmer hele ledger til fil"""
        data = {
            'version': SCHEMA_VERSION,
            'total_trades': len(ledger),
            'saved_at': datetime.now().isoformat(),
            'trades': [trade_to_record(t) for t in ledger]
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise PersistenceError(self.path, f"Could not save ledger: {e}") from e

        logger.info(f"Saved {len(ledger)} trades to {self.path}")
        return self.path

    def load(self) -> TradeLedger:
        """
        Indlæser ledger fra fil.

        Returns:
            A fresh TradeLedger with the file's trades in stored order
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise PersistenceError(self.path, f"Could not read ledger: {e}") from e
        except json.JSONDecodeError as e:
            raise PersistenceError(self.path, f"Ledger is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get('trades', []), list):
            raise PersistenceError(self.path, "Ledger document has no trade list")

        version = data.get('version')
        if version != SCHEMA_VERSION:
            logger.warning(f"Ledger schema version {version!r}, expected {SCHEMA_VERSION!r}")

        ledger = TradeLedger()
        for i, record in enumerate(data.get('trades', [])):
            try:
                ledger.record(record_to_trade(record))
            except (KeyError, TypeError, ValueError) as e:
                raise PersistenceError(self.path, f"Bad trade record #{i}: {e}") from e

        expected = data.get('total_trades')
        if expected is not None and expected != len(ledger):
            logger.warning(f"Ledger header says {expected} trades, file holds {len(ledger)}")

        logger.info(f"Loaded {len(ledger)} trades from {self.path}")
        return ledger
