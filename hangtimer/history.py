"""Session history log.

Records are written once and never edited; the log only grows by
prepending and shrinks by deleting.  ``load_history`` returns the
newest record first.

Saving is allowed to fail (disk full, database locked …).  A failed
save is logged and reported through the return value so the finished
session is never lost in memory.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from .database.db import get_session
from .database.models import HistoryEntry
from .timer.engine import SessionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    id: str
    date: datetime
    protocol_name: str
    duration: int
    completed: bool


@dataclass(frozen=True)
class HistorySummary:
    sessions: int
    completed: int
    total_seconds: int


def make_record(
    result: SessionResult, *, now: datetime | None = None,
) -> HistoryRecord:
    """Build the history record for a finished or abandoned session."""
    return HistoryRecord(
        id=uuid.uuid4().hex,
        date=now or datetime.now(timezone.utc),
        protocol_name=result.protocol_name,
        duration=result.total_elapsed,
        completed=result.completed,
    )


def _to_record(row: HistoryEntry) -> HistoryRecord:
    date = row.date
    if date is not None and date.tzinfo is None:
        # SQLite drops tzinfo; everything is stored as UTC
        date = date.replace(tzinfo=timezone.utc)
    return HistoryRecord(
        id=row.record_id,
        date=date,
        protocol_name=row.protocol_name,
        duration=row.duration_seconds,
        completed=row.completed,
    )


def save_record(record: HistoryRecord) -> bool:
    """Prepend *record* to the log.  Returns ``False`` if it could not be saved."""
    try:
        with get_session() as db:
            db.add(HistoryEntry(
                record_id=record.id,
                date=record.date,
                protocol_name=record.protocol_name,
                duration_seconds=record.duration,
                completed=record.completed,
            ))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning(
            "Could not save history for %r (%ss): %s",
            record.protocol_name, record.duration, exc,
        )
        return False
    logger.info(
        "Saved %s session %r (%ss)",
        "completed" if record.completed else "stopped",
        record.protocol_name, record.duration,
    )
    return True


def record_session(
    result: SessionResult, *, now: datetime | None = None,
) -> tuple[HistoryRecord, bool]:
    """Build and save the record for *result*; returns ``(record, saved)``."""
    record = make_record(result, now=now)
    return record, save_record(record)


def load_history(limit: int | None = None) -> list[HistoryRecord]:
    """History records, most recent first."""
    with get_session() as db:
        query = db.query(HistoryEntry).order_by(HistoryEntry.pk.desc())
        if limit is not None:
            query = query.limit(limit)
        return [_to_record(row) for row in query.all()]


def delete_record(record_id: str) -> bool:
    with get_session() as db:
        deleted = (
            db.query(HistoryEntry)
            .filter(HistoryEntry.record_id == record_id)
            .delete()
        )
    return deleted > 0


def history_summary(records: list[HistoryRecord]) -> HistorySummary:
    return HistorySummary(
        sessions=len(records),
        completed=sum(1 for r in records if r.completed),
        total_seconds=sum(r.duration for r in records),
    )
