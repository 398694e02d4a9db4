from .utils import *
from .models import AssignedRef, Marker, ViewportState, Mode, GestureState, new_transient_id, is_transient_id
from .errors import StallMapError, ImageLoadError, FloorFormatError
from .config import EngineConfig
from .logging_config import setup_logging
from .viewport import ViewportTransform
from .image_layer import ImageLayer
from .registry import MarkerRegistry, MarkerStyle, marker_style
from .gestures import GestureDisambiguator, hit_test
from .highlight import HighlightAnimator, PulseClock
from .render import RenderState, DrawImage, DrawText, DrawCircle, DrawRing, render
from .canvas import FloorCanvas, paint_commands
from .state import FloorRecord, marker_from_row, marker_to_row
from .store import FloorStore
from .properties import StallPanel

__all__ = [
    "AssignedRef", "Marker", "ViewportState", "Mode", "GestureState",
    "new_transient_id", "is_transient_id",
    "StallMapError", "ImageLoadError", "FloorFormatError",
    "EngineConfig", "setup_logging",
    "ViewportTransform", "ImageLayer", "MarkerRegistry", "MarkerStyle", "marker_style",
    "GestureDisambiguator", "hit_test", "HighlightAnimator", "PulseClock",
    "RenderState", "DrawImage", "DrawText", "DrawCircle", "DrawRing", "render",
    "FloorCanvas", "paint_commands", "FloorRecord", "marker_from_row", "marker_to_row",
    "FloorStore", "StallPanel", "DEFAULT_HIGHLIGHT_LABEL",
]
