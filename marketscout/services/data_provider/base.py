from abc import ABC, abstractmethod
from typing import List, Tuple

from marketscout.services.scanner.models import Bar

TIMESPANS = {"m": "minute", "h": "hour", "d": "day"}


def parse_timeframe(timeframe: str) -> Tuple[int, str]:
    """Split a timeframe like '4h' into (4, 'hour').

    Unsuffixed or unknown suffixes fall back to daily bars; a missing or
    non-numeric multiplier falls back to 1.
    """
    tf = (timeframe or "").strip().lower()
    if not tf or tf[-1] not in TIMESPANS:
        return 1, "day"

    try:
        multiplier = int(tf[:-1])
    except ValueError:
        multiplier = 1
    return max(multiplier, 1), TIMESPANS[tf[-1]]


class BaseBarProvider(ABC):
    """Abstract base class for OHLCV bar providers."""

    @abstractmethod
    def get_name(self) -> str:
        """Get provider name."""
        pass

    @abstractmethod
    async def fetch_bars(self, symbol: str, timeframe: str, limit: int = 200) -> List[Bar]:
        """Fetch bars for a symbol/timeframe.

        Args:
            symbol: Ticker (e.g. 'AAPL', 'X:BTCUSD')
            timeframe: '<int><unit>' with unit in m, h, d (e.g. '4h')
            limit: Cap on the number of bars requested

        Returns:
            Bars ordered oldest first. Empty on any failure; implementations
            must not raise and must not retry.
        """
        pass

    async def shutdown(self):
        """Release network resources."""
        pass
