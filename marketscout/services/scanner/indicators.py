"""
Technical indicator pipeline.

Pure functions over price sequences. Every function returns a
right-aligned list: the last element belongs to the last input bar and
the list is shorter than the input by the indicator's warm-up, so
``series[i]`` corresponds to ``bars[len(bars) - len(series) + i]``.

Inputs too short to complete the warm-up produce an empty list.
"""

from typing import List, NamedTuple, Sequence

import numpy as np


class MACDPoint(NamedTuple):
    macd: float
    signal: float
    histogram: float


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")


def _true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """True range from the second bar onward (length n - 1)."""
    prev_close = closes[:-1]
    return np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_close),
        np.abs(lows[1:] - prev_close),
    ])


def _wilder_average(values: np.ndarray, period: int) -> List[float]:
    """Wilder moving average seeded with the simple mean of the first period."""
    if len(values) < period:
        return []
    avg = float(np.mean(values[:period]))
    out = [avg]
    for v in values[period:]:
        avg = (avg * (period - 1) + float(v)) / period
        out.append(avg)
    return out


def _wilder_sum(values: np.ndarray, period: int) -> List[float]:
    """Wilder running sum, the smoothing used for DM and TR in ADX."""
    if len(values) < period:
        return []
    total = float(np.sum(values[:period]))
    out = [total]
    for v in values[period:]:
        total = total - total / period + float(v)
        out.append(total)
    return out


def ema(values: Sequence[float], period: int) -> List[float]:
    """Exponential moving average, seeded with the SMA of the first period.

    Output length is ``len(values) - period + 1``.
    """
    _check_period(period)
    arr = np.asarray(values, dtype=float)
    if len(arr) < period:
        return []

    k = 2.0 / (period + 1)
    prev = float(np.mean(arr[:period]))
    out = [prev]
    for v in arr[period:]:
        prev = (float(v) - prev) * k + prev
        out.append(prev)
    return out


def rsi(values: Sequence[float], period: int = 14) -> List[float]:
    """Relative Strength Index in [0, 100] with Wilder smoothing.

    Output length is ``len(values) - period``.
    """
    _check_period(period)
    arr = np.asarray(values, dtype=float)
    if len(arr) <= period:
        return []

    deltas = np.diff(arr)
    avg_gain = _wilder_average(np.where(deltas > 0, deltas, 0.0), period)
    avg_loss = _wilder_average(np.where(deltas < 0, -deltas, 0.0), period)

    out = []
    for gain, loss in zip(avg_gain, avg_loss):
        if loss == 0:
            out.append(100.0)
        else:
            out.append(100.0 - 100.0 / (1.0 + gain / loss))
    return out


def macd(
    values: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> List[MACDPoint]:
    """MACD line, signal line and histogram, all exponentially smoothed.

    Only points where the signal line exists are returned, so the output
    length is ``len(values) - slow_period - signal_period + 2``.
    """
    if fast_period >= slow_period:
        raise ValueError("fast_period must be shorter than slow_period")
    _check_period(signal_period)

    fast = ema(values, fast_period)
    slow = ema(values, slow_period)
    if not slow:
        return []

    # Drop the head of the fast EMA so both lines end on the same bar
    offset = len(fast) - len(slow)
    macd_line = [f - s for f, s in zip(fast[offset:], slow)]

    signal_line = ema(macd_line, signal_period)
    if not signal_line:
        return []

    macd_tail = macd_line[len(macd_line) - len(signal_line):]
    return [
        MACDPoint(m, s, m - s)
        for m, s in zip(macd_tail, signal_line)
    ]


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> List[float]:
    """Average True Range in price units.

    Output length is ``len(closes) - period``.
    """
    _check_period(period)
    h = np.asarray(highs, dtype=float)
    l = np.asarray(lows, dtype=float)
    c = np.asarray(closes, dtype=float)
    if len(c) <= period:
        return []
    return _wilder_average(_true_range(h, l, c), period)


def adx(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> List[float]:
    """Average Directional Index in [0, 100].

    Output length is ``len(closes) - 2 * period + 1``.
    """
    _check_period(period)
    h = np.asarray(highs, dtype=float)
    l = np.asarray(lows, dtype=float)
    c = np.asarray(closes, dtype=float)
    if len(c) < 2 * period:
        return []

    up_move = h[1:] - h[:-1]
    down_move = l[:-1] - l[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    tr_sum = _wilder_sum(_true_range(h, l, c), period)
    plus_sum = _wilder_sum(plus_dm, period)
    minus_sum = _wilder_sum(minus_dm, period)

    dx = []
    for tr_s, p_s, m_s in zip(tr_sum, plus_sum, minus_sum):
        if tr_s == 0:
            dx.append(0.0)
            continue
        plus_di = 100.0 * p_s / tr_s
        minus_di = 100.0 * m_s / tr_s
        di_total = plus_di + minus_di
        dx.append(0.0 if di_total == 0 else 100.0 * abs(plus_di - minus_di) / di_total)

    return _wilder_average(np.asarray(dx, dtype=float), period)
