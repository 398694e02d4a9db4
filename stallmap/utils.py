from __future__ import annotations
import math
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor

# ===== Viewport =====
MIN_SCALE = 0.5
MAX_SCALE = 3.0
SCALE_FACTOR = 1.05

# ===== Markers / gestures =====
MARKER_RADIUS = 20.0      # screen px, hit target
DRAG_THRESHOLD = 3.0      # screen px of jitter before a press becomes a drag
LABEL_FONT_SIZE = 14
ASSIGNED_FONT_SIZE = 12
ASSIGNED_LABEL_WIDTH = 140.0
HIGHLIGHT_FONT_SIZE = 12

# ===== Pulse =====
PULSE_HALF_PERIOD = 0.9   # seconds per direction
PULSE_SCALE_FROM = 1.0
PULSE_SCALE_TO = 1.3
PULSE_OPACITY_FROM = 0.45
PULSE_OPACITY_TO = 0.1
PULSE_TICK_MS = 16

# ===== Colors =====
ACCENT = QColor("#22c55e")
ACCENT_STRONG = QColor("#2563eb")
NEUTRAL = QColor("#9ca3af")
HIGHLIGHT = QColor("#f59e0b")
MARKER_BORDER = QColor("#ffffff")
LABEL_COLOR = QColor("#111827")
ASSIGNED_COLOR = QColor("#1f2937")
PLACEHOLDER_COLOR = QColor("#6b7280")
BG_COLOR = QColor("#F2F4F7")

# ===== Placeholder =====
PLACEHOLDER_TEXT = "Upload a floor map to begin placing stalls"
PLACEHOLDER_FONT_SIZE = 24
PLACEHOLDER_POS = QPointF(40, 40)

DEFAULT_HIGHLIGHT_LABEL = "You are here"


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))

def distance(a: QPointF, b: QPointF) -> float:
    return math.hypot(a.x() - b.x(), a.y() - b.y())

def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t
