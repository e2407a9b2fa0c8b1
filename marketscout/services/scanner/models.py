"""
Scanner data model.

Bars come from a provider, ScanResults from the evaluator (one per
symbol x timeframe), and AggregatedSignals from the multi-timeframe
confirmation step. Only AggregatedSignals outlive a scan pass.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from marketscout.core.config import ASSET_TYPES

STOCK = "stock"
CRYPTO = "crypto"


@dataclass(frozen=True)
class Bar:
    """One OHLCV sample. Timestamp is epoch milliseconds."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class AssetConfig:
    """Watch-list entry."""
    symbol: str
    type: str = STOCK

    def __post_init__(self):
        if self.type not in ASSET_TYPES:
            raise ValueError(f"Unknown asset type: {self.type}")


@dataclass
class ScanResult:
    """Accepted evaluation of one symbol on one timeframe.

    Attributes:
        score: Sum of the weights of satisfied criteria
        criteria: Satisfied criterion ids, each mapped to True
        invalidation: Price below which the setup is void
    """
    score: int
    criteria: Dict[str, bool] = field(default_factory=dict)
    invalidation: float = 0.0


@dataclass
class AggregatedSignal:
    """Signal confirmed on two or more timeframes in the same pass."""
    symbol: str
    type: str
    score: int
    criteria: Dict[str, bool]
    invalidation_price: float
    timestamp: Optional[datetime] = None

    def to_record(self) -> Dict:
        return {
            "symbol": self.symbol,
            "type": self.type,
            "score": self.score,
            "criteria": dict(self.criteria),
            "invalidation_price": self.invalidation_price,
        }
