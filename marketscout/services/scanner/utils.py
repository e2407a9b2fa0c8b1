"""
Shared utility functions for criterion detection.

- Tail access on right-aligned series
- Window minima
- Average volume
- Bullish divergence
"""

import math
from typing import Optional, Sequence

import pandas as pd


def last(series: Sequence, offset: int = 0):
    """Value `offset` bars before the latest one, or None if the series is too short."""
    if offset < 0 or len(series) <= offset:
        return None
    return series[len(series) - 1 - offset]


def window_low(values: Sequence[float], start: int, end: Optional[int] = None) -> float:
    """Minimum of values[start:end], or +inf for an empty window.

    Args:
        values: Price series
        start: Negative offset from the end (e.g. -40)
        end: Negative offset from the end, or None for the latest bar
    """
    window = list(values)[start:end]
    return min(window) if window else math.inf


def average_volume(hist: pd.DataFrame, window: int = 20) -> float:
    """Average volume over the last `window` bars.

    The divisor is always `window`, so a short history reads as thin volume.
    """
    if hist.empty:
        return 0.0
    return float(hist['volume'].tail(window).sum()) / window


def is_bullish_divergence(
    prices: Sequence[float],
    indicator: Sequence[float],
    lookback: int = 30,
    recent_bars: int = 5,
    prior_gap: int = 15,
) -> bool:
    """Detect a bullish divergence with a fixed-window comparison.

    Compares the lowest price of the last `recent_bars` bars with the lowest
    price between `lookback` and `prior_gap` bars back. Divergence holds when
    price makes an equal or lower low while the indicator, read at the same
    two positions, makes a higher value.

    Args:
        prices: Price series (usually lows), aligned index-for-index with indicator
        indicator: Momentum series (usually RSI)
        lookback: Bars that must be available
        recent_bars: Size of the recent window
        prior_gap: Bars back where the prior window ends

    Returns:
        True if bullish divergence detected
    """
    n = len(prices)
    if n < lookback:
        return False

    recent = list(prices[n - recent_bars:])
    recent_low = min(recent)
    recent_idx = n - recent_bars + recent.index(recent_low)

    prior = list(prices[n - lookback:n - prior_gap])
    if not prior:
        return False
    prior_low = min(prior)
    prior_idx = n - lookback + prior.index(prior_low)

    if recent_idx >= len(indicator) or prior_idx >= len(indicator):
        return False

    return recent_low <= prior_low and indicator[recent_idx] > indicator[prior_idx]
