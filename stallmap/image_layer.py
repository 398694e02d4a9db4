from __future__ import annotations
import logging
import os
from typing import Optional
from urllib.parse import unquote_to_bytes

from PySide6.QtCore import QByteArray, QSize
from PySide6.QtGui import QImage, QImageReader

from .errors import ImageLoadError

logger = logging.getLogger(__name__)


def _decode_data_url(source_ref: str) -> QImage:
    head, sep, payload = source_ref.partition(",")
    if not sep:
        raise ImageLoadError(source_ref[:40], "malformed data URL")
    if head.endswith(";base64"):
        raw = QByteArray.fromBase64(QByteArray(payload.encode("ascii", errors="ignore")))
    else:
        raw = QByteArray(unquote_to_bytes(payload))
    img = QImage.fromData(raw)
    if img.isNull():
        raise ImageLoadError(source_ref[:40], "data URL is not a decodable raster")
    return img

def _read_file(path: str) -> QImage:
    if not os.path.exists(path):
        raise ImageLoadError(path, "file not found")
    reader = QImageReader(path)
    img = reader.read()
    if img.isNull():
        raise ImageLoadError(path, reader.errorString() or "not a decodable raster")
    return img


class ImageLayer:
    """The background raster. Its natural pixel grid defines world space."""

    def __init__(self):
        self._image: Optional[QImage] = None
        self._source_ref: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self._image is not None

    @property
    def image(self) -> Optional[QImage]:
        return self._image

    @property
    def source_ref(self) -> Optional[str]:
        return self._source_ref

    @property
    def natural_width(self) -> int:
        return self._image.width() if self._image is not None else 0

    @property
    def natural_height(self) -> int:
        return self._image.height() if self._image is not None else 0

    def load(self, source_ref: str) -> QSize:
        """Replace the layer with the raster at ``source_ref`` (path or data URL).

        On failure the layer is left unloaded and ImageLoadError propagates.
        Markers are never re-projected when the new image has a different size.
        """
        self.clear()
        if not source_ref:
            raise ImageLoadError(source_ref, "empty source")
        if source_ref.startswith("data:"):
            img = _decode_data_url(source_ref)
        else:
            img = _read_file(source_ref)
        self._image = img
        self._source_ref = source_ref
        logger.info("Loaded floor image %dx%d", img.width(), img.height())
        return QSize(img.width(), img.height())

    def clear(self):
        self._image = None
        self._source_ref = None
