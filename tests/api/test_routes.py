"""
API endpoint tests for the Market Scout REST API.

Tests HTTP endpoints with mocked services.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from marketscout.core.timezone import UTC
from marketscout.services.market_scanner import MSG_ALREADY_RUNNING, MSG_STARTED, ScanAck
from marketscout.services.scanner.models import AggregatedSignal
from marketscout.services.signal_store import SignalStore


class TestHealthEndpoint:
    """Test health check endpoints."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_root_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "scan_state": "idle"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_api_health(self, client, auth_headers):
        response = await client.get("/api/health", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["scanning"] is False


class TestAuthMiddleware:
    """Test API authentication."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_missing_auth_rejected(self, client):
        response = await client.get("/api/scan/latest")
        assert response.status_code == 401

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_key_rejected(self, client):
        response = await client.get("/api/scan/latest", headers={"X-API-Key": "wrong"})
        assert response.status_code == 403

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_no_keys_configured_allows_all(self, client):
        with patch("marketscout.api.auth.settings") as mock_settings, \
             patch("marketscout.api.routes.signal_store") as mock_store:
            mock_settings.API_KEYS = None
            mock_store.get_latest_signals = AsyncMock(return_value=[])

            response = await client.get("/api/scan/latest")

            assert response.status_code == 200


class TestScanEndpoints:
    """Test scan trigger and result endpoints."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_run_starts_scan(self, client, auth_headers):
        with patch("marketscout.api.routes.market_scanner") as mock_scanner:
            mock_scanner.start = MagicMock(return_value=ScanAck(True, MSG_STARTED))

            response = await client.post("/api/scan/run", headers=auth_headers)

            assert response.status_code == 200
            assert response.json() == {"message": MSG_STARTED, "started": True}
            mock_scanner.start.assert_called_once()

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_run_while_scanning(self, client, auth_headers):
        """A second trigger is acknowledged, not an error."""
        with patch("marketscout.api.routes.market_scanner") as mock_scanner:
            mock_scanner.start = MagicMock(return_value=ScanAck(False, MSG_ALREADY_RUNNING))

            response = await client.post("/api/scan/run", headers=auth_headers)

            assert response.status_code == 200
            assert response.json() == {"message": "Scan already in progress.", "started": False}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_latest_signals(self, client, auth_headers):
        stamp = datetime(2024, 3, 1, 14, 30, tzinfo=UTC)
        with patch("marketscout.api.routes.signal_store") as mock_store:
            mock_store.get_latest_signals = AsyncMock(return_value=[{
                "id": 3,
                "symbol": "AAPL",
                "score": 155,
                "criteria": {"1h_rsi": True, "4h_ema": True},
                "invalidation_price": 148.5,
                "timestamp": stamp,
                "type": "stock",
            }])

            response = await client.get("/api/scan/latest", headers=auth_headers)

            assert response.status_code == 200
            (signal,) = response.json()
            assert signal["symbol"] == "AAPL"
            assert signal["score"] == 155
            assert signal["invalidationPrice"] == 148.5
            assert signal["criteria"] == {"1h_rsi": True, "4h_ema": True}
            assert signal["timestamp"].startswith("2024-03-01T14:30:00")
            mock_store.get_latest_signals.assert_awaited_once_with(50)

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_latest_capped_at_50(self, client, auth_headers):
        store = SignalStore()
        base = datetime(2024, 1, 1, tzinfo=UTC)
        with patch("marketscout.services.signal_store.utc_now") as now:
            now.side_effect = [base + timedelta(hours=i) for i in range(51)]
            for i in range(51):
                await store.save_signal(AggregatedSignal(
                    symbol=f"SYM{i}",
                    type="stock",
                    score=150,
                    criteria={"1h_ema": True, "4h_ema": True},
                    invalidation_price=100.0 + i,
                ))

        with patch("marketscout.api.routes.signal_store", store):
            response = await client.get("/api/scan/latest", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 50
        assert data[0]["symbol"] == "SYM50"
        assert data[0]["invalidationPrice"] == 150.0
        assert data[-1]["symbol"] == "SYM1"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_latest_empty(self, client, auth_headers):
        with patch("marketscout.api.routes.signal_store") as mock_store:
            mock_store.get_latest_signals = AsyncMock(return_value=[])

            response = await client.get("/api/scan/latest", headers=auth_headers)

            assert response.status_code == 200
            assert response.json() == []

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_status(self, client, auth_headers):
        with patch("marketscout.api.routes.market_scanner") as mock_scanner:
            mock_scanner.status = MagicMock(return_value={
                "state": "scanning",
                "last_started_at": datetime(2024, 3, 1, tzinfo=UTC),
                "last_finished_at": None,
                "last_signal_count": 0,
                "assets": 5,
                "timeframes": ["1h", "4h", "1d"],
            })

            response = await client.get("/api/scan/status", headers=auth_headers)

            assert response.status_code == 200
            data = response.json()
            assert data["state"] == "scanning"
            assert data["assets"] == 5
            assert data["timeframes"] == ["1h", "4h", "1d"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_criteria(self, client, auth_headers):
        response = await client.get("/api/scan/criteria", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        weights = {c["id"]: c["weight"] for c in data["criteria"]}
        assert weights == {"rsi": 25, "macd": 20, "ema": 20, "structure": 20, "volume": 15}
        assert [c["id"] for c in data["criteria"]] == ["rsi", "macd", "ema", "structure", "volume"]
        assert data["max_score"] == 100
        assert data["min_score"] == 70
