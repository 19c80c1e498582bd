"""Shared pytest fixtures for HangTimer tests."""

import os
import sys
import pytest

# Headless CI has no display server
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from hangtimer.database.db import configure_engine, init_db
from hangtimer.protocols.catalog import get_builtin
from hangtimer.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture(autouse=True)
def app_home(tmp_path, monkeypatch):
    """Keep settings and cached sounds out of the real home directory."""
    monkeypatch.setattr("hangtimer.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("hangtimer.audio.sounds.SOUNDS_DIR", tmp_path / "sounds")
    return tmp_path


@pytest.fixture
def repeaters():
    return get_builtin("repeaters")


@pytest.fixture
def max_hangs():
    return get_builtin("max-hangs")


@pytest.fixture
def engine(qapp, repeaters):
    """Fresh TimerEngine bound to Repeaters, not started."""
    return TimerEngine(repeaters)


@pytest.fixture
def max_hangs_engine(qapp, max_hangs):
    return TimerEngine(max_hangs)
