"""
Signal Store - persistence for accepted multi-timeframe signals.

Uses PostgreSQL when the pool is connected, otherwise keeps records in
memory for the lifetime of the process.
"""

import json
from typing import Any, Dict, List

from marketscout.core.config import settings
from marketscout.core.database import db
from marketscout.core.logger import Logger
from marketscout.core.timezone import utc_now
from marketscout.services.scanner.models import AggregatedSignal

logger = Logger("SignalStore")


def _row_to_record(row) -> Dict[str, Any]:
    criteria = row["criteria"]
    if isinstance(criteria, str):
        criteria = json.loads(criteria)
    return {
        "id": row["id"],
        "symbol": row["symbol"],
        "score": row["score"],
        "criteria": criteria,
        "invalidation_price": row["invalidation_price"],
        "timestamp": row["timestamp"],
        "type": row["type"],
    }


class SignalStore:
    """Save and list AggregatedSignal records."""

    def __init__(self):
        self._memory: List[Dict[str, Any]] = []
        self._next_id = 1

    async def save_signal(self, signal: AggregatedSignal) -> Dict[str, Any]:
        """Persist a signal; storage assigns id and timestamp."""
        record = signal.to_record()

        if db.pool:
            row = await db.pool.fetchrow("""
                INSERT INTO signals (symbol, score, criteria, invalidation_price, type)
                VALUES ($1, $2, $3::jsonb, $4, $5)
                RETURNING id, symbol, score, criteria, invalidation_price, timestamp, type
            """, record["symbol"], record["score"], json.dumps(record["criteria"]),
                record["invalidation_price"], record["type"])
            saved = _row_to_record(row)
        else:
            saved = {"id": self._next_id, **record, "timestamp": utc_now()}
            self._next_id += 1
            self._memory.append(saved)

        signal.timestamp = saved["timestamp"]
        logger.info(f"Saved signal #{saved['id']} {saved['symbol']} score={saved['score']}")
        return saved

    async def get_latest_signals(self, limit: int = None) -> List[Dict[str, Any]]:
        """Most recent signals, newest first."""
        limit = limit or settings.LATEST_SIGNALS_LIMIT

        if db.pool:
            rows = await db.pool.fetch("""
                SELECT id, symbol, score, criteria, invalidation_price, timestamp, type
                FROM signals
                ORDER BY timestamp DESC, id DESC
                LIMIT $1
            """, limit)
            return [_row_to_record(r) for r in rows]

        ordered = sorted(self._memory, key=lambda r: (r["timestamp"], r["id"]), reverse=True)
        return [dict(r) for r in ordered[:limit]]

    async def clear_signals(self):
        if db.pool:
            await db.pool.execute("DELETE FROM signals")
        self._memory.clear()
        logger.info("Cleared stored signals")


signal_store = SignalStore()
