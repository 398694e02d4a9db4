from __future__ import annotations
import uuid
from dataclasses import dataclass
from typing import Optional

TRANSIENT_PREFIX = "tmp-"


@dataclass(frozen=True)
class AssignedRef:
    id: str
    display_name: str = ""


@dataclass
class Marker:
    id: str
    label: str = ""
    x: float = 0.0
    y: float = 0.0
    assigned: Optional[AssignedRef] = None  # occupant of the stall, if any


@dataclass(frozen=True)
class ViewportState:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0


class Mode:
    EDIT = "edit"
    VIEW = "view"


class GestureState:
    IDLE = "idle"
    PANNING_STAGE = "panning_stage"
    DRAGGING_MARKER = "dragging_marker"


def new_transient_id() -> str:
    """Placeholder id for a marker whose create call has not resolved yet."""
    return TRANSIENT_PREFIX + uuid.uuid4().hex[:12]

def is_transient_id(marker_id: str) -> bool:
    return marker_id.startswith(TRANSIENT_PREFIX)
