from typing import List, Optional

import httpx

from marketscout.core.config import settings
from marketscout.core.logger import Logger
from marketscout.core.timezone import date_window
from marketscout.services.data_provider.base import BaseBarProvider, parse_timeframe
from marketscout.services.scanner.models import Bar

logger = Logger("PolygonProvider")


class PolygonProvider(BaseBarProvider):
    """Polygon.io aggregates (OHLCV) provider.

    Always requests a fixed trailing window of calendar days; `limit` only
    caps how many bars Polygon returns from that window.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        lookback_days: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.POLYGON_API_KEY
        self.base_url = base_url or settings.POLYGON_BASE_URL
        self.lookback_days = lookback_days or settings.PROVIDER_LOOKBACK_DAYS
        self.timeout = timeout or settings.PROVIDER_TIMEOUT
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def get_name(self) -> str:
        return "polygon"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def shutdown(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_bars(self, symbol: str, timeframe: str, limit: int = 200) -> List[Bar]:
        multiplier, timespan = parse_timeframe(timeframe)
        from_date, to_date = date_window(self.lookback_days)
        url = f"/v2/aggs/ticker/{symbol}/range/{multiplier}/{timespan}/{from_date}/{to_date}"

        try:
            response = await self._get_client().get(
                url,
                params={
                    "adjusted": "true",
                    "sort": "asc",
                    "limit": limit,
                    "apiKey": self.api_key or "",
                },
            )
            response.raise_for_status()
            data = response.json()

            results = data.get("results") or []
            return [
                Bar(
                    timestamp=int(r["t"]),
                    open=float(r["o"]),
                    high=float(r["h"]),
                    low=float(r["l"]),
                    close=float(r["c"]),
                    volume=float(r["v"]),
                )
                for r in results
            ]
        except Exception as e:
            logger.error(f"Error fetching data for {symbol} {timeframe}: {e}")
            return []
