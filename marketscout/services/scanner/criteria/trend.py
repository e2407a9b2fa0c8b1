"""Trend Criteria - EMA stacking and higher-low structure."""

import math

from marketscout.services.scanner.base import CriterionDetector, EvaluationContext
from marketscout.services.scanner.registry import CriterionRegistry
from marketscout.services.scanner.utils import last, window_low

STRUCTURE_WINDOW = 20


@CriterionRegistry.register
class EMAStackCriterion(CriterionDetector):
    """Close > EMA10 > EMA20 > EMA50."""

    criterion_id = "ema"
    display_name = "EMA Bullish Stack"
    icon = "📈"
    group = "trend"
    weight = 20
    priority = 30

    def check(self, ctx: EvaluationContext) -> bool:
        e10, e20, e50 = last(ctx.ema10), last(ctx.ema20), last(ctx.ema50)
        if e10 is None or e20 is None or e50 is None:
            return False

        close = float(ctx.hist['close'].iloc[-1])
        return close > e10 > e20 > e50


@CriterionRegistry.register
class HigherLowCriterion(CriterionDetector):
    """Lowest low of the last 20 bars is above the lowest low of the 20 before."""

    criterion_id = "structure"
    display_name = "Higher Low"
    icon = "🪜"
    group = "trend"
    weight = 20
    priority = 40

    def check(self, ctx: EvaluationContext) -> bool:
        lows = ctx.hist['low'].tolist()
        if not lows:
            return False

        recent_low = window_low(lows, -STRUCTURE_WINDOW)
        # An incomplete older window counts as unbounded, which can never be beaten
        if len(lows) < 2 * STRUCTURE_WINDOW:
            older_low = math.inf
        else:
            older_low = window_low(lows, -2 * STRUCTURE_WINDOW, -STRUCTURE_WINDOW)
        return recent_low > older_low
