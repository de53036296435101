"""Shared pytest fixtures for the interval timer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from intervaltimer.settings import Settings
from intervaltimer.timer.controller import TimerController
from intervaltimer.timer.engine import TimerConfig


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def small_config():
    """2 s work / 1 s rest / 2 rounds: the canonical walkthrough."""
    return TimerConfig(workout_duration=2, rest_duration=1, rounds=2)


@pytest.fixture
def controller(qapp, small_config):
    """Fresh TimerController configured with ``small_config``."""
    ctrl = TimerController(parent=None, config=small_config)
    yield ctrl
    ctrl.stop()


@pytest.fixture
def settings():
    return Settings()
