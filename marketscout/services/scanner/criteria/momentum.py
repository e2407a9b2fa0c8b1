"""Momentum Criteria - RSI reclaim/divergence and MACD histogram acceleration."""

from marketscout.services.scanner.base import CriterionDetector, EvaluationContext
from marketscout.services.scanner.registry import CriterionRegistry
from marketscout.services.scanner.utils import last, is_bullish_divergence

RSI_OVERSOLD = 30
DIVERGENCE_LOOKBACK = 30


@CriterionRegistry.register
class RSICriterion(CriterionDetector):
    """RSI crossed up through 30, or price/RSI bullish divergence."""

    criterion_id = "rsi"
    display_name = "RSI Reclaim / Divergence"
    icon = "🔄"
    group = "momentum"
    weight = 25
    priority = 10

    def check(self, ctx: EvaluationContext) -> bool:
        latest = last(ctx.rsi)
        prev = last(ctx.rsi, 1)
        if latest is None or prev is None:
            return False

        if prev < RSI_OVERSOLD and latest > RSI_OVERSOLD:
            return True

        # Lows with the RSI warm-up dropped from the front
        lows = ctx.hist['low'].tolist()
        aligned_lows = lows[len(lows) - len(ctx.rsi):]
        return is_bullish_divergence(aligned_lows, ctx.rsi, DIVERGENCE_LOOKBACK)


@CriterionRegistry.register
class MACDCriterion(CriterionDetector):
    """Positive MACD histogram growing for two consecutive bars."""

    criterion_id = "macd"
    display_name = "MACD Acceleration"
    icon = "📶"
    group = "momentum"
    weight = 20
    priority = 20

    def check(self, ctx: EvaluationContext) -> bool:
        if len(ctx.macd) < 3:
            return False

        h0 = ctx.macd[-1].histogram
        h1 = ctx.macd[-2].histogram
        h2 = ctx.macd[-3].histogram
        return h0 > 0 and h0 > h1 and h1 > h2
