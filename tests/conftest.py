"""Shared pytest fixtures for MultiTimer tests."""

import os
import sys
import tempfile

# Headless Qt and a throwaway home for settings, sounds and the DB.
# Both must be set before any multitimer / Qt import.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ["MULTITIMER_HOME"] = tempfile.mkdtemp(prefix="multitimer-tests-")

import pytest

from PyQt6.QtWidgets import QApplication

from multitimer.database.db import configure_engine, init_db
from multitimer.timer.engine import TimerEngine

from helpers import FakeClock


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


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cues():
    """Records every cue name the engine asks to play."""
    return []


@pytest.fixture
def engine(qapp, clock, cues):
    """Fresh TimerEngine on a fake clock, in Stopwatch mode."""
    return TimerEngine(parent=None, clock=clock, cue=cues.append)
