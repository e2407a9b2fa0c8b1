from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from marketscout.api.auth import verify_api_key
from marketscout.core.config import settings
from marketscout.core.logger import Logger
from marketscout.services.market_scanner import market_scanner
from marketscout.services.scanner import CriterionRegistry, SignalEvaluator
from marketscout.services.signal_store import signal_store

logger = Logger("API")

router = APIRouter(prefix="/api", tags=["API"])


# Response Models
class ScanAckResponse(BaseModel):
    message: str
    started: bool


class SignalResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    symbol: str
    score: int
    criteria: Dict[str, bool]
    invalidation_price: float = Field(alias="invalidationPrice")
    timestamp: Optional[datetime] = None
    type: str


class ScanStatusResponse(BaseModel):
    state: str
    last_started_at: Optional[datetime] = None
    last_finished_at: Optional[datetime] = None
    last_signal_count: int = 0
    assets: int
    timeframes: List[str]


# Health
@router.get("/health")
async def api_health():
    return {
        "status": "ok",
        "scanning": market_scanner.is_scanning,
    }


# Scan Endpoints
@router.post("/scan/run", response_model=ScanAckResponse)
async def scan_run(user_id: str = Depends(verify_api_key)):
    ack = market_scanner.start()
    logger.info(f"Scan requested by {user_id}: {ack.message}")
    return ScanAckResponse(message=ack.message, started=ack.started)


@router.get("/scan/latest", response_model=List[SignalResponse])
async def scan_latest(user_id: str = Depends(verify_api_key)):
    signals = await signal_store.get_latest_signals(settings.LATEST_SIGNALS_LIMIT)
    return [SignalResponse(**s) for s in signals]


@router.get("/scan/status", response_model=ScanStatusResponse)
async def scan_status(user_id: str = Depends(verify_api_key)):
    return ScanStatusResponse(**market_scanner.status())


@router.get("/scan/criteria")
async def scan_criteria(user_id: str = Depends(verify_api_key)):
    """List scoring criteria with their weights and the score range."""
    weights = CriterionRegistry.get_weights()
    return {
        "max_score": sum(weights.values()),
        "min_score": SignalEvaluator.MIN_SCORE,
        "criteria": [
            {
                "id": c.criterion_id,
                "name": c.display_name,
                "icon": c.icon,
                "group": c.group,
                "weight": weights[c.criterion_id],
            }
            for c in CriterionRegistry.get_all(enabled_only=True)
        ]
    }
