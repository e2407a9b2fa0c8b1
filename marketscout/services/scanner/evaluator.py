"""
Signal Evaluator - scores one symbol/timeframe.

A single pass with no state kept between calls:
- data sufficiency gate (50 bars)
- regime gate (ADX trend strength and liquidity floor)
- weighted criteria from the registry
- acceptance threshold and invalidation price
"""

from dataclasses import asdict
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from marketscout.core.logger import Logger
from . import indicators
from .base import CriterionDetector, EvaluationContext
from .models import Bar, ScanResult, CRYPTO, STOCK
from .registry import CriterionRegistry
from .utils import average_volume, last, window_low

logger = Logger("SignalEvaluator")

BAR_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """Convert bars into a DataFrame with one row per bar, oldest first."""
    if not bars:
        return pd.DataFrame(columns=BAR_COLUMNS, dtype=float)
    return pd.DataFrame([asdict(b) for b in bars], columns=BAR_COLUMNS)


class SignalEvaluator:
    """Turns a bar history into a ScanResult or None."""

    MIN_BARS = 50
    MIN_ADX = 25
    MIN_SCORE = 70
    VOLUME_WINDOW = 20
    INVALIDATION_WINDOW = 20
    VOLUME_FLOORS = {CRYPTO: 1_000_000, STOCK: 100_000}

    RSI_PERIOD = 14
    MACD_PERIODS = (12, 26, 9)
    EMA_PERIODS = (10, 20, 50)
    ATR_PERIOD = 14
    ADX_PERIOD = 14

    def __init__(self, criteria: Optional[List[CriterionDetector]] = None):
        self._criteria = criteria

    @property
    def criteria(self) -> List[CriterionDetector]:
        if self._criteria is not None:
            return self._criteria
        return CriterionRegistry.get_all(enabled_only=True)

    def evaluate(self, bars: Sequence[Bar], asset_type: str = STOCK) -> Optional[ScanResult]:
        """Evaluate a bar history.

        Args:
            bars: OHLCV bars, oldest first
            asset_type: 'stock' or 'crypto', selects the volume floor

        Returns:
            ScanResult when the score reaches MIN_SCORE, otherwise None
        """
        if len(bars) < self.MIN_BARS:
            logger.debug(f"Insufficient data: {len(bars)} bars")
            return None

        hist = bars_to_frame(bars)
        highs = hist['high'].tolist()
        lows = hist['low'].tolist()
        closes = hist['close'].tolist()

        adx_values = indicators.adx(highs, lows, closes, self.ADX_PERIOD)
        latest_adx = last(adx_values)
        if latest_adx is None or latest_adx < self.MIN_ADX:
            logger.debug(f"Regime gate: ADX {latest_adx}")
            return None

        volume_avg = average_volume(hist, self.VOLUME_WINDOW)
        floor = self.VOLUME_FLOORS.get(asset_type, self.VOLUME_FLOORS[STOCK])
        if volume_avg < floor:
            logger.debug(f"Regime gate: avg volume {volume_avg:.0f} < {floor}")
            return None

        ctx = self.build_context(hist, asset_type, adx_values, volume_avg)
        score, criteria = self.score(ctx)

        if score < self.MIN_SCORE:
            return None

        return ScanResult(
            score=score,
            criteria=criteria,
            invalidation=self.invalidation_price(ctx),
        )

    def build_context(
        self,
        hist: pd.DataFrame,
        asset_type: str,
        adx_values: List[float],
        volume_avg: float,
    ) -> EvaluationContext:
        """Compute the indicator series the criteria read."""
        highs = hist['high'].tolist()
        lows = hist['low'].tolist()
        closes = hist['close'].tolist()
        fast, slow, signal = self.MACD_PERIODS
        ema10, ema20, ema50 = (indicators.ema(closes, p) for p in self.EMA_PERIODS)

        return EvaluationContext(
            hist=hist,
            asset_type=asset_type,
            rsi=indicators.rsi(closes, self.RSI_PERIOD),
            macd=indicators.macd(closes, fast, slow, signal),
            ema10=ema10,
            ema20=ema20,
            ema50=ema50,
            atr=indicators.atr(highs, lows, closes, self.ATR_PERIOD),
            adx=adx_values,
            volume_avg=volume_avg,
        )

    def score(self, ctx: EvaluationContext) -> Tuple[int, Dict[str, bool]]:
        """Add up the weights of satisfied criteria."""
        total = 0
        satisfied: Dict[str, bool] = {}
        for criterion in self.criteria:
            if criterion.check(ctx):
                satisfied[criterion.criterion_id] = True
                total += criterion.weight
        return total, satisfied

    def invalidation_price(self, ctx: EvaluationContext) -> float:
        """Recent structural low minus one ATR."""
        recent_low = window_low(ctx.hist['low'].tolist(), -self.INVALIDATION_WINDOW)
        latest_atr = last(ctx.atr) or 0.0
        return recent_low - latest_atr
