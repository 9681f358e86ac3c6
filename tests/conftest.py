"""Shared pytest fixtures for CountDown tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from countdown.timer.engine import CountdownEngine
from helpers import FakeNotifier, FakeSoundPlayer


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point every test at a throwaway settings file."""
    monkeypatch.setattr("countdown.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("countdown.settings.SETTINGS_PATH", tmp_path / "settings.json")
    yield tmp_path / "settings.json"


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def sound_player():
    return FakeSoundPlayer()


@pytest.fixture
def engine(qapp, notifier, sound_player):
    """Fresh CountdownEngine wired to recording collaborators."""
    return CountdownEngine(parent=None, notifier=notifier, sound_player=sound_player)


@pytest.fixture
def bare_engine(qapp):
    """Fresh CountdownEngine with no collaborators at all."""
    return CountdownEngine(parent=None)
