"""Multi-timeframe confirmation of per-timeframe scan results."""

from typing import Dict, Optional

from .models import AggregatedSignal, AssetConfig, ScanResult

MIN_CONFIRMING_TIMEFRAMES = 2


def aggregate_signals(
    asset: AssetConfig,
    results: Dict[str, ScanResult],
    min_timeframes: int = MIN_CONFIRMING_TIMEFRAMES,
) -> Optional[AggregatedSignal]:
    """Combine qualifying timeframes into one signal.

    Args:
        asset: Watch-list entry the results belong to
        results: Timeframe -> ScanResult, in scan order, qualifying timeframes only
        min_timeframes: Timeframes required for confirmation

    Returns:
        AggregatedSignal with summed score, timeframe-prefixed criteria and the
        lowest invalidation, or None if too few timeframes qualified
    """
    if len(results) < min_timeframes:
        return None

    criteria: Dict[str, bool] = {}
    for timeframe, result in results.items():
        for key, met in result.criteria.items():
            if met:
                criteria[f"{timeframe}_{key}"] = True

    return AggregatedSignal(
        symbol=asset.symbol,
        type=asset.type,
        score=sum(r.score for r in results.values()),
        criteria=criteria,
        invalidation_price=min(r.invalidation for r in results.values()),
    )
