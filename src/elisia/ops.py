"""Operational utilities: logging setup and health reporting."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .models import AggregationResult

QUIET_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "httpx",
    "httpcore",
)


def setup_logging(level: str = "INFO") -> None:
    """Application logs at ``level``; SQLAlchemy and HTTP client chatter at WARNING+."""

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class HealthMonitor:
    """Aggregate runtime health information for the status endpoint."""

    def __init__(self) -> None:
        self.database_online = True
        self.last_fetch_at: Optional[datetime] = None
        self.last_pairs_requested = 0
        self.last_pairs_failed = 0

    def record_aggregation(self, result: AggregationResult, *, at: Optional[datetime] = None) -> None:
        self.last_fetch_at = at or datetime.now(timezone.utc)
        self.last_pairs_requested = len(result.statuses)
        self.last_pairs_failed = result.failed_pairs

    def status(self) -> dict:
        if self.last_fetch_at is None:
            upstream = "unknown"
        elif self.last_pairs_requested and self.last_pairs_failed == self.last_pairs_requested:
            upstream = "down"
        elif self.last_pairs_failed:
            upstream = "degraded"
        else:
            upstream = "ok"
        return {
            "database": "ok" if self.database_online else "down",
            "upstream": upstream,
            "lastFetchAt": self.last_fetch_at.isoformat() if self.last_fetch_at else None,
            "lastPairsRequested": self.last_pairs_requested,
            "lastPairsFailed": self.last_pairs_failed,
        }


__all__ = ["HealthMonitor", "setup_logging"]
