from __future__ import annotations
import logging
from dataclasses import dataclass, fields, replace
from typing import Dict, Iterable, Iterator, List, Optional

from PySide6.QtGui import QColor

from .models import Marker
from .utils import ACCENT, ACCENT_STRONG, NEUTRAL, HIGHLIGHT, MARKER_BORDER

logger = logging.getLogger(__name__)

_MARKER_FIELDS = {f.name for f in fields(Marker)} - {"id"}


@dataclass(frozen=True)
class MarkerStyle:
    fill: QColor
    stroke: QColor
    stroke_width: float
    shadow_blur: float


def marker_style(marker: Marker, selected: bool, highlighted: bool) -> MarkerStyle:
    """Derived every frame; selection and highlight change independently of marker data."""
    fill = ACCENT if marker.assigned is not None else NEUTRAL
    if selected:
        stroke = ACCENT_STRONG
    elif highlighted:
        stroke = HIGHLIGHT
    else:
        stroke = MARKER_BORDER
    return MarkerStyle(fill=fill, stroke=stroke,
                       stroke_width=4.0 if selected else 2.0,
                       shadow_blur=16.0 if selected else 6.0)


class MarkerRegistry:
    """In-memory ordered store of markers, keyed by id."""

    def __init__(self, markers: Iterable[Marker] = ()):
        self._items: Dict[str, Marker] = {}
        for m in markers:
            self.add(m)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, marker_id) -> bool:
        return marker_id in self._items

    def __iter__(self) -> Iterator[Marker]:
        return iter(list(self._items.values()))

    def add(self, marker: Marker) -> Marker:
        if marker.id in self._items:
            raise KeyError(f"marker {marker.id!r} already exists")
        self._items[marker.id] = marker
        return marker

    def get(self, marker_id: Optional[str]) -> Optional[Marker]:
        if marker_id is None:
            return None
        return self._items.get(marker_id)

    def all(self) -> List[Marker]:
        return list(self._items.values())

    def update(self, marker_id: str, **changes) -> Marker:
        if marker_id not in self._items:
            raise KeyError(f"unknown marker {marker_id!r}")
        unknown = set(changes) - _MARKER_FIELDS
        if unknown:
            raise ValueError(f"cannot update marker fields: {sorted(unknown)}")
        m = replace(self._items[marker_id], **changes)
        self._items[marker_id] = m
        return m

    def move(self, marker_id: str, x: float, y: float) -> Marker:
        return self.update(marker_id, x=float(x), y=float(y))

    def remove(self, marker_id: str) -> Marker:
        if marker_id not in self._items:
            raise KeyError(f"unknown marker {marker_id!r}")
        return self._items.pop(marker_id)

    def replace_id(self, old_id: str, new_id: str) -> Marker:
        """Swap a transient id for the one issued by persistence, keeping order."""
        if old_id not in self._items:
            raise KeyError(f"unknown marker {old_id!r}")
        if new_id != old_id and new_id in self._items:
            raise KeyError(f"marker {new_id!r} already exists")
        rebuilt: Dict[str, Marker] = {}
        for key, m in self._items.items():
            if key == old_id:
                m = replace(m, id=new_id)
                key = new_id
            rebuilt[key] = m
        self._items = rebuilt
        logger.debug("marker id %s -> %s", old_id, new_id)
        return rebuilt[new_id]

    def sync(self, markers: Iterable[Marker]):
        """Replace the whole content with the caller's ordered sequence."""
        items: Dict[str, Marker] = {}
        for m in markers:
            if m.id in items:
                logger.warning("Duplicate marker id %r ignored", m.id)
                continue
            items[m.id] = m
        self._items = items

    def clear(self):
        self._items.clear()
