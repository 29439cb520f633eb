"""Image catalog: the known images and their inclusion and draw-count metadata.

Records are keyed by absolute path. The catalog keeps an *active* set (the
images of the currently loaded folder, in discovery order) plus *dormant*
metadata for paths seen in earlier folders, so switching back to a folder
restores its inclusion flags and draw counts. Every mutation is written
through the metadata store before returning.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from core.models import ImageRecord
from core.services.interfaces import ImageMetadataStore, PersistenceError


class ImageCatalog:
    """Owns `ImageRecord`s and persists every change through an `ImageMetadataStore`."""

    def __init__(
        self,
        store: ImageMetadataStore,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self.on_error = on_error
        self._active: dict[str, ImageRecord] = {}
        self._dormant: dict[str, ImageRecord] = {}
        for record in store.load():
            self._dormant.setdefault(record.path, record)

    # Queries
    @property
    def records(self) -> list[ImageRecord]:
        """Active records in discovery order."""
        return list(self._active.values())

    def get(self, image_id: str) -> ImageRecord | None:
        return self._active.get(image_id)

    def included_pool(self) -> list[ImageRecord]:
        """Active records eligible for random draws."""
        return [r for r in self._active.values() if r.included]

    @property
    def included_count(self) -> int:
        return len(self.included_pool())

    @property
    def total_count(self) -> int:
        return len(self._active)

    # Mutations
    def load_folder(self, paths: Iterable[str]) -> None:
        """Make `paths` the active record set, reusing stored metadata by path."""
        for record in self._active.values():
            self._dormant[record.path] = record
        self._active = {}
        for path in paths:
            if path in self._active:
                continue
            record = self._dormant.pop(path, None) or ImageRecord(path=path)
            self._active[path] = record
        logger.info(
            "Catalog loaded {} images ({} included)", self.total_count, self.included_count
        )
        self._save()

    def set_included(self, image_id: str, included: bool) -> bool:
        """Set one record's inclusion flag. Returns False for an unknown id."""
        record = self._active.get(image_id)
        if record is None:
            logger.debug("set_included ignored unknown image: {}", image_id)
            return False
        record.included = bool(included)
        self._save()
        return True

    def set_all_included(self, included: bool) -> None:
        for record in self._active.values():
            record.included = bool(included)
        self._save()

    def increment_draw_count(self, image_id: str) -> bool:
        """Count one completed drawing of `image_id`. Returns False for an unknown id."""
        record = self._active.get(image_id)
        if record is None:
            logger.debug("increment_draw_count ignored unknown image: {}", image_id)
            return False
        record.drawn_count += 1
        self._save()
        return True

    def reset_draw_counts(self) -> None:
        for record in self._all_records():
            record.drawn_count = 0
        logger.info("Draw counts reset")
        self._save()

    def reset(self) -> None:
        """Forget every record, active and dormant."""
        self._active = {}
        self._dormant = {}
        logger.info("Image catalog reset")
        self._save()

    # Internal helpers
    def _all_records(self) -> list[ImageRecord]:
        return list(self._active.values()) + list(self._dormant.values())

    def _save(self) -> None:
        try:
            self._store.save(self._all_records())
        except PersistenceError as ex:
            logger.error("Saving image metadata failed: {}", ex)
            if self.on_error is not None:
                self.on_error(f"Could not save image metadata: {ex}")
