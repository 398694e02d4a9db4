"""
Pointer gesture classification for the floor canvas.

A gesture is one press -> moves -> release of the primary pointer. It is
classified when it starts (what was under the pointer) and when it first
leaves the jitter radius (click vs drag), and resolves to exactly one of:

    background click   -> create intent (editable) / clear selection (read-only)
    marker click       -> select intent
    marker drag        -> live move, then move-end intent (editable only)
    background drag    -> stage pan, no intent

The classification is never re-evaluated at release: a marker drag dropped
over empty background is still a marker drag.
"""
from __future__ import annotations
import logging
from typing import Callable, Optional, Tuple

from PySide6.QtCore import QPointF

from .models import GestureState
from .registry import MarkerRegistry
from .utils import MARKER_RADIUS, DRAG_THRESHOLD, distance
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)

CreateCb = Callable[[QPointF], None]
MoveEndCb = Callable[[str, QPointF], None]
SelectCb = Callable[[Optional[str]], None]


def hit_test(registry: MarkerRegistry, viewport: ViewportTransform, screen: QPointF,
             radius: float = MARKER_RADIUS) -> Optional[str]:
    """Topmost marker whose screen-space circle contains ``screen``.

    The radius is in screen pixels, so the clickable area is the same at every zoom.
    Later markers are drawn on top and win ties.
    """
    for m in reversed(registry.all()):
        if distance(viewport.to_screen(QPointF(m.x, m.y)), screen) <= radius:
            return m.id
    return None


class GestureDisambiguator:
    def __init__(self, viewport: ViewportTransform, registry: MarkerRegistry,
                 editable: bool = False,
                 marker_radius: float = MARKER_RADIUS,
                 drag_threshold: float = DRAG_THRESHOLD,
                 on_create: Optional[CreateCb] = None,
                 on_move_end: Optional[MoveEndCb] = None,
                 on_select: Optional[SelectCb] = None,
                 on_change: Optional[Callable[[], None]] = None):
        self.viewport = viewport
        self.registry = registry
        self.editable = bool(editable)
        self.marker_radius = float(marker_radius)
        self.drag_threshold = float(drag_threshold)
        self.on_create = on_create
        self.on_move_end = on_move_end
        self.on_select = on_select
        self.on_change = on_change

        self.state = GestureState.IDLE
        self.dragging_id: Optional[str] = None
        self.selected_id: Optional[str] = None
        self._reset()

    def _reset(self):
        self.state = GestureState.IDLE
        self.dragging_id = None
        self._pointer_id: Optional[int] = None
        self._press_pos: Optional[QPointF] = None
        self._last_pos: Optional[QPointF] = None
        self._pressed_marker: Optional[str] = None
        self._grab = QPointF(0, 0)
        self._origin: Optional[Tuple[float, float]] = None

    @property
    def active(self) -> bool:
        return self._pointer_id is not None

    def _changed(self):
        if self.on_change:
            self.on_change()

    # ---- controlled inputs ----
    def set_editable(self, editable: bool):
        editable = bool(editable)
        if editable == self.editable:
            return
        if self.active:
            self.cancel()
        self.editable = editable

    def set_selected(self, marker_id: Optional[str]):
        self.selected_id = marker_id

    def sync_selection(self):
        """Drop the selection when its marker is gone from the registry."""
        if self.selected_id is not None and self.selected_id not in self.registry:
            self.selected_id = None

    def marker_at(self, screen: QPointF) -> Optional[str]:
        return hit_test(self.registry, self.viewport, screen, self.marker_radius)

    # ---- pointer stream ----
    def pointer_down(self, pos: QPointF, pointer_id: int = 0, primary: bool = True) -> bool:
        if not primary:
            return False
        if self.active:
            if pointer_id != self._pointer_id:
                return False
            # same pointer pressed again: its release was lost
            self.cancel()
        self._pointer_id = pointer_id
        self._press_pos = QPointF(pos)
        self._last_pos = QPointF(pos)
        self._pressed_marker = self.marker_at(pos)
        logger.debug("press at (%.1f, %.1f) on %s", pos.x(), pos.y(),
                     self._pressed_marker or "background")
        return True

    def pointer_move(self, pos: QPointF, pointer_id: int = 0) -> bool:
        if not self.active or pointer_id != self._pointer_id:
            return False
        if self.state == GestureState.IDLE:
            if distance(pos, self._press_pos) <= self.drag_threshold:
                return True
            self._begin_drag()
        if self.state == GestureState.PANNING_STAGE:
            self.viewport.pan_by(pos.x() - self._last_pos.x(), pos.y() - self._last_pos.y())
        elif self.state == GestureState.DRAGGING_MARKER:
            if self.dragging_id not in self.registry:
                logger.debug("dragged marker %s vanished, gesture dropped", self.dragging_id)
                self._reset()
                self._changed()
                return True
            w = self.viewport.to_world(pos)
            self.registry.move(self.dragging_id, w.x() + self._grab.x(), w.y() + self._grab.y())
        self._last_pos = QPointF(pos)
        self._changed()
        return True

    def _begin_drag(self):
        mid = self._pressed_marker
        if mid is not None and self.editable and mid in self.registry:
            m = self.registry.get(mid)
            press_w = self.viewport.to_world(self._press_pos)
            self._grab = QPointF(m.x - press_w.x(), m.y - press_w.y())
            self._origin = (m.x, m.y)
            self.dragging_id = mid
            self.state = GestureState.DRAGGING_MARKER
        else:
            self.state = GestureState.PANNING_STAGE
        logger.debug("gesture -> %s", self.state)

    def pointer_up(self, pos: QPointF, pointer_id: int = 0) -> bool:
        if not self.active or pointer_id != self._pointer_id:
            return False
        self.pointer_move(pos, pointer_id)
        if not self.active:
            # the final move dropped the gesture (dragged marker is gone)
            return True
        state, mid = self.state, self.dragging_id
        pressed = self._pressed_marker
        self._reset()

        if state == GestureState.DRAGGING_MARKER:
            m = self.registry.get(mid)
            if m is not None and self.on_move_end:
                self.on_move_end(mid, QPointF(m.x, m.y))
        elif state == GestureState.IDLE:
            self._resolve_click(pos, pressed)
        self._changed()
        return True

    def _resolve_click(self, pos: QPointF, pressed: Optional[str]):
        if pressed is not None:
            if pressed not in self.registry:
                return
            self.selected_id = pressed
            if self.on_select:
                self.on_select(pressed)
            return
        self.selected_id = None
        if self.editable:
            if self.on_create:
                self.on_create(self.viewport.to_world(pos))
        elif self.on_select:
            self.on_select(None)

    def cancel(self):
        """Abort the current gesture without emitting; a dragged marker goes back."""
        if not self.active:
            return
        if (self.state == GestureState.DRAGGING_MARKER and self._origin is not None
                and self.dragging_id in self.registry):
            self.registry.move(self.dragging_id, *self._origin)
        self._reset()
        self._changed()

    pointer_cancel = cancel

    # ---- zoom ----
    def wheel(self, pos: QPointF, delta_y: float) -> bool:
        changed = self.viewport.wheel(pos, delta_y)
        if changed:
            self._changed()
        return changed

    def pinch(self, pos: QPointF, factor: float) -> bool:
        changed = self.viewport.zoom_at(pos, factor)
        if changed:
            self._changed()
        return changed
