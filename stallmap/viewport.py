from __future__ import annotations
import logging
from PySide6.QtCore import QPointF
from PySide6.QtGui import QTransform

from .models import ViewportState
from .utils import MIN_SCALE, MAX_SCALE, SCALE_FACTOR, clamp

logger = logging.getLogger(__name__)


class ViewportTransform:
    """Pan offset + uniform zoom between screen pixels and world (image) pixels.

    world = (screen - offset) / scale
    screen = world * scale + offset
    """

    def __init__(self, min_scale: float = MIN_SCALE, max_scale: float = MAX_SCALE,
                 scale_factor: float = SCALE_FACTOR):
        self.min_scale = float(min_scale)
        self.max_scale = float(max_scale)
        self.scale_factor = float(scale_factor)
        self.scale = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0

    def reset(self):
        self.scale = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0

    def state(self) -> ViewportState:
        return ViewportState(self.scale, self.offset_x, self.offset_y)

    # ---- conversions ----
    def to_world(self, screen: QPointF) -> QPointF:
        return QPointF((screen.x() - self.offset_x) / self.scale,
                       (screen.y() - self.offset_y) / self.scale)

    def to_screen(self, world: QPointF) -> QPointF:
        return QPointF(world.x() * self.scale + self.offset_x,
                       world.y() * self.scale + self.offset_y)

    def qtransform(self) -> QTransform:
        # QTransform(m11, m12, m21, m22, dx, dy)
        return QTransform(self.scale, 0.0, 0.0, self.scale, self.offset_x, self.offset_y)

    # ---- gestures ----
    def pan_by(self, dx: float, dy: float):
        self.offset_x += dx
        self.offset_y += dy

    def zoom_at(self, pointer: QPointF, factor: float) -> bool:
        """Multiply the scale by ``factor`` keeping the world point under ``pointer`` fixed."""
        old = self.scale
        new = clamp(old * factor, self.min_scale, self.max_scale)
        if new == old:
            return False
        anchor = self.to_world(pointer)
        self.scale = new
        self.offset_x = pointer.x() - anchor.x() * new
        self.offset_y = pointer.y() - anchor.y() * new
        logger.debug("zoom %.3f -> %.3f at (%.1f, %.1f)", old, new, pointer.x(), pointer.y())
        return True

    def wheel(self, pointer: QPointF, delta_y: float) -> bool:
        """One wheel tick: positive delta (scrolling down) zooms out."""
        if delta_y == 0:
            return False
        factor = 1.0 / self.scale_factor if delta_y > 0 else self.scale_factor
        return self.zoom_at(pointer, factor)
