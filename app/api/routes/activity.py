"""Activity log endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.recipient import ActivityLogEntry
from app.services.storage.activity_log import ActivityLog
from app.services.storage.store import SqlStore

router = APIRouter()


def get_activity_log(db: Session = Depends(get_db)) -> ActivityLog:
    return ActivityLog(SqlStore(db))


@router.get("", response_model=List[ActivityLogEntry])
def list_activity(log: ActivityLog = Depends(get_activity_log)) -> list:
    """Recorded actions, newest first."""
    return log.entries()


@router.post("", response_model=List[ActivityLogEntry], status_code=201)
def record_activity(
    entry: ActivityLogEntry,
    log: ActivityLog = Depends(get_activity_log),
) -> list:
    """Record an action; an existing entry with the same hash and kind is replaced."""
    return log.record(entry)


@router.delete("", status_code=204)
def clear_activity(log: ActivityLog = Depends(get_activity_log)) -> None:
    """Forget every recorded action."""
    log.clear()
