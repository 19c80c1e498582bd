"""SQLite engine and session handling for protocols and history.

The engine is built on first use so importing the package never touches
the disk.  Tests swap it for an in-memory database with
``configure_engine("sqlite:///:memory:")``.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import APP_SUPPORT_DIR
from .models import Base

DB_PATH = APP_SUPPORT_DIR / "hangtimer.db"

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(f"sqlite:///{DB_PATH}")
    return _engine


def configure_engine(url: str) -> None:
    """Point all sessions at *url* instead of the on-disk database."""
    global _engine, _SessionFactory
    _engine = create_engine(url)
    _SessionFactory = None


def init_db() -> None:
    """Create the custom protocol and history tables if missing."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a session; commit on success, rollback and re-raise on error."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    session: OrmSession = _SessionFactory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
