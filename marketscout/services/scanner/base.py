"""
Criterion Detector Base Classes.

This module defines the core abstractions for the buy-signal scoring
system. Each scoring criterion is a separate detector that looks at one
symbol/timeframe and answers yes or no; the evaluator adds up the
weights of the detectors that said yes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

import pandas as pd

from .indicators import MACDPoint


@dataclass
class EvaluationContext:
    """Everything a criterion may look at for one symbol/timeframe.

    Attributes:
        hist: DataFrame with columns open, high, low, close, volume (oldest first)
        asset_type: 'stock' or 'crypto'
        rsi, macd, ema10, ema20, ema50, atr, adx: right-aligned indicator series
        volume_avg: Average volume over the last 20 bars
    """
    hist: pd.DataFrame
    asset_type: str
    rsi: List[float] = field(default_factory=list)
    macd: List[MACDPoint] = field(default_factory=list)
    ema10: List[float] = field(default_factory=list)
    ema20: List[float] = field(default_factory=list)
    ema50: List[float] = field(default_factory=list)
    atr: List[float] = field(default_factory=list)
    adx: List[float] = field(default_factory=list)
    volume_avg: float = 0.0


class CriterionDetector(ABC):
    """Base class for all scoring criteria.

    Subclasses implement check() and are registered with
    @CriterionRegistry.register.

    Class Attributes:
        criterion_id: Unique identifier, also the key in ScanResult.criteria (required)
        display_name: Human-readable name
        icon: Emoji icon for display
        group: Category group (momentum, trend, volume)
        weight: Points added to the score when satisfied
        enabled: Whether the criterion is active
        priority: Evaluation order (lower = earlier)

    Example:
        @CriterionRegistry.register
        class MyCriterion(CriterionDetector):
            criterion_id = "my_criterion"
            weight = 10

            def check(self, ctx):
                return ctx.hist['close'].iloc[-1] > ctx.ema10[-1]
    """

    criterion_id: str = ""

    display_name: str = ""

    icon: str = "•"

    group: str = "other"

    weight: int = 0

    enabled: bool = True

    priority: int = 100

    @abstractmethod
    def check(self, ctx: EvaluationContext) -> bool:
        """Return True when the criterion is satisfied.

        Series too short for the criterion's lookback must yield False,
        never an exception.
        """
        pass

    def __repr__(self) -> str:
        return f"<Criterion:{self.criterion_id}>"

    def __str__(self) -> str:
        return f"{self.icon} {self.display_name}"
