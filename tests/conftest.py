"""
Pytest configuration and shared fixtures.

This module provides fixtures for:
- Synthetic OHLCV bars
- Fake bar providers and instant rate limiting
- Mocking database connections
- FastAPI test client
"""

import os
from typing import AsyncGenerator, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient, ASGITransport

# Set testing environment before importing marketscout modules
os.environ["TESTING"] = "true"
os.environ["LOG_LEVEL"] = "ERROR"
os.environ["API_ENABLED"] = "true"
os.environ["API_KEYS"] = "testkey:1"
os.environ["SCAN_RATE_LIMIT_MS"] = "0"
os.environ["SCAN_INTERVAL_MINUTES"] = "0"
os.environ["DATABASE_URL"] = ""

from marketscout.core.rate_limiter import RateLimiter
from marketscout.services.data_provider.base import BaseBarProvider
from marketscout.services.scanner.models import Bar


# ─────────────────────────────────────────────────────────────────────────────
# Bar Fixtures
# ─────────────────────────────────────────────────────────────────────────────

def make_bars(
    n: int = 60,
    start: float = 100.0,
    step: float = 1.0,
    volume: float = 200_000,
    last_volume: Optional[float] = None,
) -> List[Bar]:
    """Linear trend bars: close = start + i*step, high/low = close +/- 0.5."""
    bars = []
    for i in range(n):
        close = start + i * step
        bars.append(Bar(
            timestamp=1_700_000_000_000 + i * 3_600_000,
            open=close - step / 2,
            high=close + 0.5,
            low=close - 0.5,
            close=close,
            volume=volume,
        ))
    if last_volume is not None and bars:
        tail = bars[-1]
        bars[-1] = Bar(tail.timestamp, tail.open, tail.high, tail.low, tail.close, last_volume)
    return bars


@pytest.fixture
def bar_factory():
    return make_bars


@pytest.fixture
def uptrend_bars():
    """60 bars of a clean uptrend with a volume spike on the last bar."""
    return make_bars(60, last_volume=400_000)


# ─────────────────────────────────────────────────────────────────────────────
# Provider Fixtures
# ─────────────────────────────────────────────────────────────────────────────

class FakeBarProvider(BaseBarProvider):
    """In-memory provider returning canned bars per (symbol, timeframe)."""

    def __init__(self, bars: Optional[Dict[Tuple[str, str], List[Bar]]] = None):
        self.bars = bars or {}
        self.calls: List[Tuple[str, str, int]] = []
        self.closed = False

    def get_name(self) -> str:
        return "fake"

    async def fetch_bars(self, symbol: str, timeframe: str, limit: int = 200) -> List[Bar]:
        self.calls.append((symbol, timeframe, limit))
        return list(self.bars.get((symbol, timeframe), []))

    async def shutdown(self):
        self.closed = True


@pytest.fixture
def fake_provider():
    return FakeBarProvider()


@pytest.fixture
def instant_limiter():
    """Rate limiter with no delay that still counts pauses."""
    return RateLimiter(rate_limit_ms=0)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def mock_db():
    """Mock database connection that returns empty results."""
    mock = MagicMock()
    mock.fetch = AsyncMock(return_value=[])
    mock.fetchrow = AsyncMock(return_value=None)
    mock.fetchval = AsyncMock(return_value=None)
    mock.execute = AsyncMock(return_value="DELETE 0")
    return mock


# ─────────────────────────────────────────────────────────────────────────────
# FastAPI Test Client
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create FastAPI app for testing."""
    # Import here to ensure env vars are set first
    from marketscout.main import app as fastapi_app
    return fastapi_app


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing API endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "testkey"}
