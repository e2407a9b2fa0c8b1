import asyncio
from marketscout.core.config import settings
from marketscout.core.logger import Logger

logger = Logger("RateLimiter")


class RateLimiter:
    """Fixed-delay throttle for market data calls.

    Unlike a token bucket, the delay is always paid in full after each
    call, whether the call succeeded or not.
    """

    def __init__(self, rate_limit_ms: int = None):
        if rate_limit_ms is None:
            rate_limit_ms = settings.SCAN_RATE_LIMIT_MS
        self.rate_limit_ms = rate_limit_ms or 0
        self.rate_limit_seconds = self.rate_limit_ms / 1000
        self.calls = 0

    async def pause(self):
        """Sleep for the configured delay."""
        self.calls += 1
        if self.rate_limit_seconds > 0:
            logger.debug(f"Rate limit pause {self.rate_limit_seconds:.1f}s")
        await asyncio.sleep(self.rate_limit_seconds)
