from __future__ import annotations
import logging
import time
from typing import Callable, Optional, Tuple

from PySide6.QtCore import QObject, QTimer

from .utils import (PULSE_HALF_PERIOD, PULSE_TICK_MS, PULSE_SCALE_FROM, PULSE_SCALE_TO,
                    PULSE_OPACITY_FROM, PULSE_OPACITY_TO, lerp)

logger = logging.getLogger(__name__)


class PulseClock:
    """Tick source for the pulse: a QTimer on the UI event loop plus a monotonic start time."""

    def __init__(self, interval_ms: int = PULSE_TICK_MS, parent: Optional[QObject] = None):
        self._interval_ms = int(interval_ms)
        self._parent = parent
        self._timer: Optional[QTimer] = None
        self._started = 0.0

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self, callback: Callable[[], None]):
        self.stop()
        self._timer = QTimer(self._parent)
        self._timer.setInterval(self._interval_ms)
        self._timer.timeout.connect(callback)
        self._started = time.monotonic()
        self._timer.start()

    def stop(self):
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.timeout.disconnect()
        self._timer.deleteLater()
        self._timer = None

    def elapsed(self) -> float:
        return time.monotonic() - self._started if self._timer is not None else 0.0


class HighlightAnimator:
    """Looping yoyo pulse around at most one marker.

    The ring grows 1.0x -> 1.3x while fading 0.45 -> 0.1, then back, forever,
    until the target is cleared or the animator is torn down.
    """

    def __init__(self, clock=None, on_tick: Optional[Callable[[], None]] = None,
                 half_period: float = PULSE_HALF_PERIOD):
        self._clock = clock if clock is not None else PulseClock()
        self.on_tick = on_tick
        self.half_period = float(half_period)
        self._target: Optional[str] = None

    @property
    def target(self) -> Optional[str]:
        return self._target

    @property
    def running(self) -> bool:
        return self._clock.running

    def set_target(self, marker_id: Optional[str]):
        if marker_id == self._target:
            return
        self._clock.stop()
        self._target = marker_id
        if marker_id is not None:
            self._clock.start(self._tick)
            logger.debug("pulse started on %s", marker_id)
        else:
            logger.debug("pulse stopped")

    def teardown(self):
        self._target = None
        self._clock.stop()

    def _tick(self):
        if self._target is not None and self.on_tick:
            self.on_tick()

    def pulse(self) -> Tuple[float, float]:
        """(ring scale, ring opacity) at the current clock time."""
        if self._target is None:
            return PULSE_SCALE_FROM, PULSE_OPACITY_FROM
        h = self.half_period
        t = (self._clock.elapsed() % (2 * h)) / h
        if t > 1.0:
            t = 2.0 - t  # yoyo
        return lerp(PULSE_SCALE_FROM, PULSE_SCALE_TO, t), lerp(PULSE_OPACITY_FROM, PULSE_OPACITY_TO, t)
