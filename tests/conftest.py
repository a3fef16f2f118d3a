"""
Shared fixtures for the curves editor tests.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from state import CurveState


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Single QApplication for the whole run (widgets need one)."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def state():
    return CurveState()


@pytest.fixture
def emitted(state):
    """Snapshots emitted by the state's curvesChanged signal."""
    received = []
    state.curvesChanged.connect(lambda snapshot: received.append(snapshot))
    return received
