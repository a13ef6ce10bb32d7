"""
Analysis Module - Correlation and Regime Layer
==============================================
Annotates the pattern database after each mining pass.

Moduler:
- correlations: Pearson correlation between edge patterns' win/loss sequences
- regime: Win-rate drift between ledger halves and a coarse regime label
"""

from .correlations import PatternCorrelationTracker, PatternCorrelation
from .regime import RegimeDetector, RegimeShiftReport, MarketRegime
