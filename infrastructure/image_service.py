"""Image decoding with a small in-memory memo cache.

Decodes with Qt's `QImageReader` (EXIF orientation applied, bounded scaling)
and keeps recently used images in an LRU keyed by path, mtime, size and the
requested side, so revisiting an image in a session does not decode it again.
"""

from __future__ import annotations

from collections import OrderedDict
import hashlib
import os

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QImage, QImageReader
from loguru import logger

DEFAULT_MEM_CACHE = 64
PLACEHOLDER_SIDE = 64


def _compute_cache_key(path: str, size_key: int) -> str:
    """Compute a stable cache key from path, mtime, size, and requested side."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{int(size_key)}".encode(
            "utf-8", errors="ignore"
        )
    except OSError:
        sig = f"{path}|0|0|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, QImage] = OrderedDict()

    def get(self, key: str) -> QImage | None:
        """Return cached image for key, moving it to the MRU position."""
        image = self._data.get(key)
        if image is None:
            return None
        self._data.move_to_end(key)
        return image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key`, evicting the LRU entry when over capacity."""
        self._data[key] = image
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()


class ImageService:
    """Loads images for display and memoizes decoded results."""

    def __init__(self, settings: object | None = None) -> None:
        self._mem_cap = DEFAULT_MEM_CACHE
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("image_mem_cache", DEFAULT_MEM_CACHE) or 0)
            except (ValueError, TypeError):
                self._mem_cap = DEFAULT_MEM_CACHE
        self._mem_cache = _LRUCache(self._mem_cap or DEFAULT_MEM_CACHE)

    def get_image(self, path: str, max_side: int = 0) -> QImage:
        """Return the image at `path` bounded by `max_side` (0 = original size).

        Undecodable files yield a grey placeholder instead of raising.
        """
        key = _compute_cache_key(path, max_side)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        img = self._load_from_source(path, max_side)
        if img is None or img.isNull():
            img = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
            img.fill(QColor(220, 220, 220))
            return img

        self._mem_cache.put(key, img)
        return img

    def clear(self) -> None:
        self._mem_cache.clear()

    def _load_from_source(self, path: str, requested_side: int) -> QImage | None:
        try:
            reader = QImageReader(path)
            reader.setAutoTransform(True)
            if requested_side and requested_side > 0 and reader.size().isValid():
                orig = reader.size()
                w, h = orig.width(), orig.height()
                if w > 0 and h > 0:
                    if w >= h:
                        nw = min(requested_side, w)
                        nh = int(h * (nw / max(1, w)))
                    else:
                        nh = min(requested_side, h)
                        nw = int(w * (nh / max(1, h)))
                    reader.setScaledSize(QSize(nw, nh))
            img = reader.read()
            if img is None or img.isNull():
                logger.warning("Could not decode {}: {}", path, reader.errorString())
                return None
            if requested_side and requested_side > 0:
                img = img.scaled(
                    requested_side, requested_side, Qt.KeepAspectRatio, Qt.SmoothTransformation
                )
            return img
        except (OSError, ValueError) as ex:
            logger.debug("QImageReader failed for {}: {}", path, ex)
            return None
