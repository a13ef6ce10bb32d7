#!/usr/bin/env python3
"""
Pattern Intelligence - Learning Dashboard
=========================================
Viser læringsstatistik, patterns og valgt strategi.

Brug:
    python -m pattern_intelligence.run_learning --simulate 200
    python -m pattern_intelligence.run_learning --ledger data/trade_ledger.json
    python -m pattern_intelligence.run_learning --simulate 100 --save data/trade_ledger.json
    python -m pattern_intelligence.run_learning --ledger ledger.json --instrument XBTUSD --volatility 1.5
"""

import argparse
import random
import sys
from datetime import datetime, timedelta
from typing import List

from .config import LEDGER_PATH
from .learning.engine import LearningEngine
from .learning.errors import PersistenceError
from .learning.models import ExitReason, TradeOutcome
from .utils.logger import setup_logger

INSTRUMENTS = ['XBTUSD', 'ETHUSD', 'SOLUSD']


def create_simulated_trades(count: int = 100, seed: int = 42) -> List[TradeOutcome]:
    """
    Opretter simulerede trades til test.

    XBTUSD at 5x with short holds is given a real edge; everything else is
    close to a coin flip.
    """
    rng = random.Random(seed)
    base_time = datetime.now() - timedelta(days=7)
    trades = []

    for i in range(count):
        instrument = rng.choice(INSTRUMENTS)
        leverage = rng.choice([2, 5])
        holding = rng.choice([15, 45, 90, 150])

        win_prob = 0.48
        if instrument == 'XBTUSD' and leverage == 5 and holding < 60:
            win_prob = 0.72

        is_win = rng.random() < win_prob
        size = 100.0
        fees = 0.05
        gross = rng.uniform(2, 6) if is_win else -rng.uniform(1.5, 4)
        net = gross - fees
        entry = rng.uniform(90, 110)
        exit_price = entry * (1 + gross / size / leverage)

        if is_win:
            reason = ExitReason.TAKE_PROFIT
        else:
            reason = rng.choice([ExitReason.STOP_LOSS, ExitReason.TIMEOUT])

        trades.append(TradeOutcome(
            instrument=instrument,
            entry_price=round(entry, 4),
            exit_price=round(exit_price, 4),
            leverage=leverage,
            holding_seconds=holding,
            position_size=size,
            net_pnl=round(net, 4),
            gross_pnl=round(gross, 4),
            fees_paid=fees,
            timestamp=base_time + timedelta(minutes=10 * i),
            exit_reason=reason,
            volatility_at_entry=round(rng.uniform(0.3, 3.0), 2),
            spread_at_entry=round(rng.uniform(0.01, 0.08), 3)
        ))

    return trades


def run_dashboard(engine: LearningEngine, instrument: str = None, volatility: float = 1.0):
    """Viser learning dashboard"""
    print(engine.format_summary())

    patterns = sorted(engine.patterns().values(),
                      key=lambda m: m.confidence_score, reverse=True)
    if patterns:
        print("\n  TOP PATTERNS")
        print("  " + "-" * 56)
        for m in patterns[:10]:
            edge = "EDGE" if m.has_edge else "    "
            print(f"  {str(m.key):<18} {m.total_trades:>4} trades  "
                  f"WR {m.win_rate * 100:5.1f}%  PF {m.profit_factor:5.2f}  "
                  f"Conf {m.confidence_score * 100:3.0f}%  {edge}")
    else:
        print("\n  Ingen patterns endnu.")

    exit_reasons = engine.exit_reason_performance()
    if exit_reasons:
        print("\n  EXIT REASONS")
        print("  " + "-" * 56)
        for r in exit_reasons:
            print(f"  {r.reason:<12} {r.total:>4} trades  "
                  f"WR {r.win_rate * 100:5.1f}%  Avg P&L ${r.avg_pnl:+.2f}")

    print(f"\n  Drawdown risk: {engine.estimate_drawdown_risk():.2f}%")
    if engine.trade_count:
        print(f"  Win rate (95% lower bound): "
              f"{engine.estimate_win_rate_at_confidence(0.95) * 100:.1f}%")

    if engine.trade_count and not instrument:
        print(f"\n  STRATEGY PER INSTRUMENT @ {volatility:.2f}% vol")
        for name in engine.instruments():
            print(f"  {name:<10} -> {engine.select_best(name, volatility).name}")

    if instrument:
        config = engine.select_best(instrument, volatility)
        print(f"\n  Best strategy for {instrument} @ {volatility:.2f}% vol: {config.name}")
        print(f"    Leverage {config.leverage:.0f}x | Hold {config.holding_seconds}s | "
              f"TP {config.take_profit_pct:.4f} | SL {config.stop_loss_pct:.4f} | "
              f"Size {config.position_size:.0f} | Edge {config.estimated_edge:.1f}%")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Pattern Intelligence learning dashboard')
    parser.add_argument('--ledger', help=f'Load trade ledger JSON (e.g. {LEDGER_PATH})')
    parser.add_argument('--simulate', type=int, metavar='N', help='Record N simulated trades')
    parser.add_argument('--seed', type=int, default=42, help='Seed for --simulate')
    parser.add_argument('--instrument', help='Instrument to select a strategy for')
    parser.add_argument('--volatility', type=float, default=1.0, help='Current volatility in %%')
    parser.add_argument('--save', help='Save ledger JSON after the run')
    parser.add_argument('--export', help='Export pattern database JSON')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    args = parser.parse_args(argv)

    setup_logger("pattern_intelligence", level="DEBUG" if args.verbose else "INFO", log_file=None)

    engine = LearningEngine()

    if args.ledger:
        try:
            engine.load(args.ledger)
        except PersistenceError as e:
            print(f"Kunne ikke indlæse ledger: {e}", file=sys.stderr)
            return 1

    if args.simulate:
        for trade in create_simulated_trades(args.simulate, args.seed):
            engine.record(trade)
        # Catch up on trades recorded since the last batch boundary
        engine.analyze()

    run_dashboard(engine, args.instrument, args.volatility)

    if args.export:
        engine.miner.export_patterns(engine.patterns(), args.export)

    if args.save:
        try:
            engine.save(args.save)
        except PersistenceError as e:
            print(f"Kunne ikke gemme ledger: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
