from __future__ import annotations
from typing import Optional


class StallMapError(Exception):
    """Base class for errors raised by the stall map engine and its host."""


class ImageLoadError(StallMapError):
    def __init__(self, source_ref: Optional[str], reason: str):
        super().__init__(f"cannot load floor image {source_ref!r}: {reason}")
        self.source_ref = source_ref
        self.reason = reason


class FloorFormatError(StallMapError):
    """A floor file or floor record does not have the expected shape."""
