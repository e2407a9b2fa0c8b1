"""
Scanner Module - buy-signal scoring.

This package provides the per-symbol/timeframe scoring pipeline:
- Indicator functions in indicators.py (RSI, MACD, EMA, ATR, ADX)
- Each scoring criterion is a separate class inheriting from CriterionDetector
- Criteria auto-register using the @CriterionRegistry.register decorator
- SignalEvaluator applies the gates and adds up criterion weights
- aggregate_signals confirms a setup across timeframes

Usage:
    from marketscout.services.scanner import SignalEvaluator, aggregate_signals

    result = SignalEvaluator().evaluate(bars, "stock")
"""

from .base import CriterionDetector, EvaluationContext
from .models import Bar, AssetConfig, ScanResult, AggregatedSignal
from .registry import CriterionRegistry
from .evaluator import SignalEvaluator, bars_to_frame
from .aggregation import aggregate_signals, MIN_CONFIRMING_TIMEFRAMES

# Import all criteria to trigger registration
from . import criteria

__all__ = [
    # Base classes
    "CriterionDetector",
    "EvaluationContext",

    # Data model
    "Bar",
    "AssetConfig",
    "ScanResult",
    "AggregatedSignal",

    # Registry
    "CriterionRegistry",

    # Scoring
    "SignalEvaluator",
    "bars_to_frame",
    "aggregate_signals",
    "MIN_CONFIRMING_TIMEFRAMES",
]
