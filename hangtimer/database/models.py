"""SQLAlchemy ORM models for HangTimer."""

from datetime import datetime, timezone
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CustomProtocol(Base):
    """A user-defined protocol.  Built-ins live in code, not here."""

    __tablename__ = "custom_protocols"

    # Autoincrement key keeps list order == creation order
    pk = Column(Integer, primary_key=True, autoincrement=True)
    protocol_id = Column(String(64), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    hang_time = Column(Integer, nullable=False)
    rest_time = Column(Integer, nullable=False, default=0)
    reps_per_set = Column(Integer, nullable=False)
    rest_between_sets = Column(Integer, nullable=False, default=0)
    number_of_sets = Column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return (
            f"<CustomProtocol id={self.protocol_id} name={self.name!r}>"
        )


class HistoryEntry(Base):
    """One finished or abandoned session.  Rows are never updated."""

    __tablename__ = "history"

    # Newest row has the highest pk; listing sorts on it descending
    pk = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(String(64), nullable=False, unique=True)
    date = Column(DateTime, nullable=False, default=_utcnow)
    protocol_name = Column(String(255), nullable=False)
    duration_seconds = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<HistoryEntry id={self.record_id} name={self.protocol_name!r} "
            f"completed={self.completed}>"
        )
