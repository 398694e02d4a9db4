import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from PySide6.QtCore import QPointF

from stallmap import GestureDisambiguator, Marker, MarkerRegistry, ViewportTransform


class FakeClock:
    """Stands in for PulseClock; time only moves when a test says so."""

    def __init__(self):
        self.callback = None
        self.now = 0.0
        self.starts = 0

    @property
    def running(self):
        return self.callback is not None

    def start(self, callback):
        self.callback = callback
        self.now = 0.0
        self.starts += 1

    def stop(self):
        self.callback = None

    def elapsed(self):
        return self.now if self.callback is not None else 0.0

    def advance(self, seconds):
        self.now += seconds
        if self.callback is not None:
            self.callback()


class Recorder:
    def __init__(self):
        self.created = []
        self.moved = []
        self.selected = []

    @property
    def events(self):
        return len(self.created) + len(self.moved) + len(self.selected)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def engine(recorder):
    viewport = ViewportTransform()
    registry = MarkerRegistry()
    g = GestureDisambiguator(
        viewport, registry, editable=True,
        on_create=recorder.created.append,
        on_move_end=lambda mid, p: recorder.moved.append((mid, p)),
        on_select=recorder.selected.append,
    )
    return g


def click(g, x, y):
    g.pointer_down(QPointF(x, y))
    g.pointer_up(QPointF(x, y))


def drag(g, start, end, steps=4):
    g.pointer_down(QPointF(*start))
    for i in range(1, steps + 1):
        t = i / steps
        g.pointer_move(QPointF(start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t))
    g.pointer_up(QPointF(*end))


@pytest.fixture
def stall():
    return Marker("s1", "A1", 50.0, 50.0)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
