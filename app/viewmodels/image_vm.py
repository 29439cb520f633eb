"""Lightweight view model wrapper around `ImageRecord`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import ImageRecord


@dataclass
class ImageVM:
    """Expose convenient properties for bindings/templates."""

    record: ImageRecord

    @property
    def id(self) -> str:
        return self.record.path

    @property
    def file_name(self) -> str:
        """Base name of the file path."""
        return self.record.name

    @property
    def included(self) -> bool:
        return bool(self.record.included)

    @property
    def drawn_count(self) -> int:
        return int(self.record.drawn_count or 0)

    @property
    def drawn_label(self) -> str:
        return f"Drawn {self.drawn_count}x"
