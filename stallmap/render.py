"""
Pure frame derivation: engine state in, world-space draw commands out.

Nothing here touches a paint device, so frames can be checked in tests without a
window. ``FloorCanvas`` replays the commands through QPainter with the viewport
transform applied.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QImage

from .models import Marker
from .registry import marker_style
from .utils import (MARKER_RADIUS, LABEL_FONT_SIZE, LABEL_COLOR, ASSIGNED_FONT_SIZE, ASSIGNED_COLOR,
                    ASSIGNED_LABEL_WIDTH, HIGHLIGHT, HIGHLIGHT_FONT_SIZE, PLACEHOLDER_TEXT,
                    PLACEHOLDER_FONT_SIZE, PLACEHOLDER_COLOR, PLACEHOLDER_POS,
                    PULSE_SCALE_FROM, PULSE_OPACITY_FROM)


@dataclass
class DrawImage:
    image: QImage
    width: int
    height: int


@dataclass
class DrawText:
    text: str
    center: QPointF
    size: int
    color: QColor
    width: float = 0.0       # 0 = natural width
    bold: bool = False
    left_aligned: bool = False


@dataclass
class DrawCircle:
    marker_id: str
    center: QPointF
    radius: float
    fill: QColor
    stroke: QColor
    stroke_width: float
    shadow_blur: float


@dataclass
class DrawRing:
    marker_id: str
    center: QPointF
    radius: float
    color: QColor
    opacity: float


DrawCommand = Union[DrawImage, DrawText, DrawCircle, DrawRing]


@dataclass
class RenderState:
    image: Optional[QImage] = None
    markers: Sequence[Marker] = field(default_factory=list)
    selected_id: Optional[str] = None
    highlighted_id: Optional[str] = None
    highlight_label: Optional[str] = None
    pulse: Tuple[float, float] = (PULSE_SCALE_FROM, PULSE_OPACITY_FROM)
    marker_radius: float = MARKER_RADIUS


def render(state: RenderState) -> List[DrawCommand]:
    out: List[DrawCommand] = []
    r = state.marker_radius

    # 1) background
    if state.image is not None and not state.image.isNull():
        out.append(DrawImage(state.image, state.image.width(), state.image.height()))
    else:
        out.append(DrawText(PLACEHOLDER_TEXT, QPointF(PLACEHOLDER_POS), PLACEHOLDER_FONT_SIZE,
                            PLACEHOLDER_COLOR, left_aligned=True))

    # 2) markers
    highlighted: Optional[Marker] = None
    for m in state.markers:
        c = QPointF(m.x, m.y)
        is_hl = m.id == state.highlighted_id
        if is_hl:
            highlighted = m
        st = marker_style(m, m.id == state.selected_id, is_hl)
        out.append(DrawCircle(m.id, c, r, st.fill, st.stroke, st.stroke_width, st.shadow_blur))
        out.append(DrawText(m.label, c, LABEL_FONT_SIZE, LABEL_COLOR, width=2 * r, bold=True))

    # 3) pulse ring + highlight label
    if highlighted is not None:
        scale, opacity = state.pulse
        c = QPointF(highlighted.x, highlighted.y)
        out.append(DrawRing(highlighted.id, c, r * scale, HIGHLIGHT, opacity))
        if state.highlight_label:
            out.append(DrawText(state.highlight_label, QPointF(c.x(), c.y() - r * 1.3 - 12),
                                HIGHLIGHT_FONT_SIZE, HIGHLIGHT, width=ASSIGNED_LABEL_WIDTH, bold=True))

    # 4) occupant labels, below the circle
    for m in state.markers:
        if m.assigned is None:
            continue
        out.append(DrawText(m.assigned.display_name, QPointF(m.x, m.y + r + 18 + ASSIGNED_FONT_SIZE / 2),
                            ASSIGNED_FONT_SIZE, ASSIGNED_COLOR, width=ASSIGNED_LABEL_WIDTH))
    return out
