from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Optional, Tuple

DEFAULT_WATCHLIST = "AAPL:stock,MSFT:stock,TSLA:stock,X:BTCUSD:crypto,X:ETHUSD:crypto"
ASSET_TYPES = ("stock", "crypto")


def parse_comma_list(v):
    """Parse comma-separated string into list. 'none' means empty."""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.strip().lower() == 'none':
            return []
        return [x.strip() for x in v.split(',') if x.strip() and x.strip().lower() != 'none']
    return []


def parse_watchlist(v) -> List[Tuple[str, str]]:
    """Parse 'SYMBOL:type' pairs into (symbol, type) tuples.

    The type is split off at the last colon, so crypto tickers such as
    'X:BTCUSD:crypto' keep their own prefix.

    Raises:
        ValueError: If an entry has no type or an unknown type
    """
    pairs = []
    for entry in parse_comma_list(v):
        symbol, sep, asset_type = entry.rpartition(':')
        asset_type = asset_type.strip().lower()
        if not sep or not symbol.strip():
            raise ValueError(f"Watchlist entry must be SYMBOL:type, got {entry!r}")
        if asset_type not in ASSET_TYPES:
            raise ValueError(f"Unknown asset type {asset_type!r} in watchlist entry {entry!r}")
        pairs.append((symbol.strip(), asset_type))
    return pairs


class Settings(BaseSettings):
    # App Settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "/var/log/marketscout/app.log"
    API_PORT: int = 10002
    API_ENABLED: bool = True

    # API Keys (format: key1:userId1,key2:userId2)
    API_KEYS: Optional[str] = None

    # Database
    DATABASE_URL: Optional[str] = None

    # Market data (Polygon.io aggregates)
    POLYGON_API_KEY: Optional[str] = None
    POLYGON_BASE_URL: str = "https://api.polygon.io"
    PROVIDER_LOOKBACK_DAYS: int = 60
    PROVIDER_BAR_LIMIT: int = 200
    PROVIDER_TIMEOUT: float = 15.0

    # Scanner
    SCAN_TIMEFRAMES: str = "1h,4h,1d"
    SCAN_RATE_LIMIT_MS: Optional[int] = 12000  # Free tier allows 5 calls/min
    SCAN_INTERVAL_MINUTES: int = 0  # 0 = manual scans only
    WATCHLIST: str = DEFAULT_WATCHLIST
    LATEST_SIGNALS_LIMIT: int = 50

    @field_validator('SCAN_RATE_LIMIT_MS', 'API_PORT', mode='before')
    @classmethod
    def parse_optional_int(cls, v, info):
        if v is None or v == '':
            defaults = {'SCAN_RATE_LIMIT_MS': 12000, 'API_PORT': 10002}
            return defaults.get(info.field_name)
        return int(v)

    @property
    def timeframes_list(self) -> List[str]:
        return parse_comma_list(self.SCAN_TIMEFRAMES)

    @property
    def watchlist_pairs(self) -> List[Tuple[str, str]]:
        return parse_watchlist(self.WATCHLIST)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore unknown env vars

settings = Settings()
