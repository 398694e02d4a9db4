"""
Engine configuration.

Defaults are the constants in ``stallmap.utils``. A host can override them
through ``QSettings("StallMap", "Editor")`` under the ``engine/`` group, e.g.
``engine/max_scale = 4``. Missing or unparsable entries fall back to the
default silently (a warning is logged for unparsable ones).
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, fields
from typing import Optional

from PySide6.QtCore import QSettings

from .utils import (MIN_SCALE, MAX_SCALE, SCALE_FACTOR, MARKER_RADIUS, DRAG_THRESHOLD,
                    PULSE_HALF_PERIOD, PULSE_TICK_MS)

logger = logging.getLogger(__name__)

SETTINGS_ORG = "StallMap"
SETTINGS_APP = "Editor"


@dataclass
class EngineConfig:
    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE
    scale_factor: float = SCALE_FACTOR
    marker_radius: float = MARKER_RADIUS
    drag_threshold: float = DRAG_THRESHOLD
    pulse_half_period: float = PULSE_HALF_PERIOD
    pulse_tick_ms: int = PULSE_TICK_MS

    def validate(self) -> "EngineConfig":
        if not (0 < self.min_scale <= self.max_scale):
            raise ValueError(f"bad scale range [{self.min_scale}, {self.max_scale}]")
        if self.scale_factor <= 1.0:
            raise ValueError("scale_factor must be > 1")
        if self.marker_radius <= 0:
            raise ValueError("marker_radius must be positive")
        if self.drag_threshold < 0:
            raise ValueError("drag_threshold must not be negative")
        if self.pulse_half_period <= 0 or self.pulse_tick_ms <= 0:
            raise ValueError("pulse timing must be positive")
        return self

    @classmethod
    def from_settings(cls, settings: Optional[QSettings] = None) -> "EngineConfig":
        st = settings if settings is not None else QSettings(SETTINGS_ORG, SETTINGS_APP)
        cfg = cls()
        for f in fields(cls):
            key = f"engine/{f.name}"
            if not st.contains(key):
                continue
            raw = st.value(key)
            conv = int if f.name == "pulse_tick_ms" else float
            try:
                setattr(cfg, f.name, conv(raw))
            except (TypeError, ValueError):
                logger.warning("Ignoring unparsable setting %s=%r", key, raw)
        return cfg.validate()
