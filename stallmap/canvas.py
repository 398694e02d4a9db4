from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from PySide6.QtCore import Qt, QEvent, QPointF, QRectF, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QWheelEvent
from PySide6.QtWidgets import QWidget

from .config import EngineConfig
from .errors import ImageLoadError
from .gestures import GestureDisambiguator
from .highlight import HighlightAnimator, PulseClock
from .image_layer import ImageLayer
from .models import Marker, Mode
from .registry import MarkerRegistry
from .render import RenderState, DrawCommand, DrawImage, DrawText, DrawCircle, DrawRing, render
from .utils import BG_COLOR
from .viewport import ViewportTransform

logger = logging.getLogger(__name__)


def paint_commands(painter: QPainter, commands: Iterable[DrawCommand]):
    """Replay world-space draw commands; the caller has set the viewport transform."""
    for cmd in commands:
        if isinstance(cmd, DrawImage):
            painter.drawImage(QPointF(0, 0), cmd.image)
        elif isinstance(cmd, DrawCircle):
            if cmd.shadow_blur > 0:
                painter.setPen(Qt.NoPen)
                painter.setBrush(QColor(0, 0, 0, 40))
                spread = cmd.radius + cmd.shadow_blur / 4.0
                painter.drawEllipse(cmd.center + QPointF(0, 2), spread, spread)
            painter.setPen(QPen(cmd.stroke, cmd.stroke_width))
            painter.setBrush(QBrush(cmd.fill))
            painter.drawEllipse(cmd.center, cmd.radius, cmd.radius)
        elif isinstance(cmd, DrawRing):
            painter.save()
            painter.setOpacity(cmd.opacity)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QBrush(cmd.color))
            painter.drawEllipse(cmd.center, cmd.radius, cmd.radius)
            painter.restore()
        elif isinstance(cmd, DrawText):
            font = QFont("", cmd.size, QFont.Bold if cmd.bold else QFont.Normal)
            font.setPixelSize(cmd.size)
            painter.setFont(font)
            painter.setPen(cmd.color)
            fm = painter.fontMetrics()
            h = fm.height()
            if cmd.left_aligned:
                painter.drawText(QRectF(cmd.center.x(), cmd.center.y(),
                                        fm.horizontalAdvance(cmd.text) + 4, h),
                                 Qt.AlignLeft | Qt.AlignTop, cmd.text)
                continue
            w = cmd.width or (fm.horizontalAdvance(cmd.text) + 4)
            painter.drawText(QRectF(cmd.center.x() - w / 2, cmd.center.y() - h / 2, w, h),
                             Qt.AlignCenter, cmd.text)


class FloorCanvas(QWidget):
    """Pannable / zoomable floor map with stall markers.

    Intents go out as signals; the owner persists them and feeds the results
    back through the controlled setters.
    """
    markerCreated = Signal(QPointF)           # world point
    markerMoved = Signal(str, QPointF)        # id, world point
    markerSelected = Signal(object)           # id or None
    imageLoadFailed = Signal(str)
    scaleChanged = Signal(float)

    def __init__(self, parent: Optional[QWidget] = None, config: Optional[EngineConfig] = None,
                 clock=None):
        super().__init__(parent)
        self.config = config or EngineConfig()
        self.viewport = ViewportTransform(self.config.min_scale, self.config.max_scale,
                                          self.config.scale_factor)
        self.image_layer = ImageLayer()
        self.registry = MarkerRegistry()
        self.gestures = GestureDisambiguator(
            self.viewport, self.registry,
            marker_radius=self.config.marker_radius,
            drag_threshold=self.config.drag_threshold,
            on_create=self.markerCreated.emit,
            on_move_end=self.markerMoved.emit,
            on_select=self.markerSelected.emit,
            on_change=self.update,
        )
        self.animator = HighlightAnimator(
            clock if clock is not None else PulseClock(self.config.pulse_tick_ms, self),
            on_tick=self.update, half_period=self.config.pulse_half_period)
        self.highlight_label: Optional[str] = None
        self._highlight_request: Optional[str] = None

        self.setMouseTracking(False)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setMinimumSize(320, 240)

    # ---- controlled inputs ----
    @property
    def mode(self) -> str:
        return Mode.EDIT if self.gestures.editable else Mode.VIEW

    def set_editable(self, editable: bool):
        self.gestures.set_editable(editable)
        self.update()

    def set_image_source(self, source_ref: Optional[str]) -> bool:
        if not source_ref:
            self.image_layer.clear()
            self.update()
            return False
        try:
            self.image_layer.load(source_ref)
            return True
        except ImageLoadError as e:
            logger.warning("%s", e)
            self.imageLoadFailed.emit(str(e))
            return False
        finally:
            self.update()

    def set_markers(self, markers: Iterable[Marker]):
        if self.gestures.dragging_id is not None:
            # keep the live drag position, the caller has not seen the drop yet
            live = self.registry.get(self.gestures.dragging_id)
            markers = [live if (live is not None and m.id == live.id) else m for m in markers]
        self.registry.sync(markers)
        self.gestures.sync_selection()
        self._sync_highlight()
        self.update()

    def markers(self) -> List[Marker]:
        return self.registry.all()

    def set_selected_marker(self, marker_id: Optional[str]):
        self.gestures.set_selected(marker_id)
        self.update()

    @property
    def selected_marker_id(self) -> Optional[str]:
        return self.gestures.selected_id

    def set_highlighted_marker(self, marker_id: Optional[str]):
        self._highlight_request = marker_id
        self._sync_highlight()
        self.update()

    @property
    def highlighted_marker_id(self) -> Optional[str]:
        return self._highlight_request

    def _sync_highlight(self):
        # pulse only while the requested marker is on the map
        mid = self._highlight_request
        target = mid if mid is not None and mid in self.registry else None
        if target != self.animator.target:
            self.animator.set_target(target)

    def set_highlight_label(self, text: Optional[str]):
        self.highlight_label = text
        self.update()

    def reset_view(self):
        self.viewport.reset()
        self.scaleChanged.emit(self.viewport.scale)
        self.update()

    def shutdown(self):
        self.gestures.cancel()
        self._highlight_request = None
        self.animator.teardown()

    # ---- frame ----
    def render_state(self) -> RenderState:
        return RenderState(
            image=self.image_layer.image,
            markers=self.registry.all(),
            selected_id=self.gestures.selected_id,
            highlighted_id=self.animator.target,
            highlight_label=self.highlight_label,
            pulse=self.animator.pulse(),
            marker_radius=self.config.marker_radius,
        )

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), BG_COLOR)
        painter.setTransform(self.viewport.qtransform())
        paint_commands(painter, render(self.render_state()))
        painter.end()

    # ---- input ----
    def mousePressEvent(self, e):
        if e.button() != Qt.LeftButton:
            super().mousePressEvent(e)
            return
        self.gestures.pointer_down(e.position())
        e.accept()

    def mouseMoveEvent(self, e):
        if self.gestures.pointer_move(e.position()):
            e.accept()
            return
        super().mouseMoveEvent(e)

    def mouseReleaseEvent(self, e):
        # Qt keeps the implicit grab, so this arrives even outside the widget
        if e.button() == Qt.LeftButton and self.gestures.pointer_up(e.position()):
            e.accept()
            return
        super().mouseReleaseEvent(e)

    def wheelEvent(self, event: QWheelEvent):
        angle = event.angleDelta().y()
        if angle == 0:
            super().wheelEvent(event)
            return
        # Qt: positive angle = away from the user = zoom in
        if self.gestures.wheel(event.position(), -angle):
            self.scaleChanged.emit(self.viewport.scale)
        event.accept()

    def event(self, e):
        t = e.type()
        if t == QEvent.NativeGesture and e.gestureType() == Qt.ZoomNativeGesture:
            if self.gestures.pinch(e.position(), 1.0 + e.value()):
                self.scaleChanged.emit(self.viewport.scale)
            e.accept()
            return True
        if t in (QEvent.WindowDeactivate, QEvent.TouchCancel) and self.gestures.active:
            self.gestures.cancel()
        return super().event(e)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape and self.gestures.active:
            self.gestures.cancel()
            event.accept()
            return
        super().keyPressEvent(event)

    def closeEvent(self, event):
        self.shutdown()
        super().closeEvent(event)
