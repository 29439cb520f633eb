"""Core service interfaces and shared error types.

The catalog and history services depend only on these protocols so that the
JSON-backed stores (or in-memory fakes in tests) can be swapped freely.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from core.models import ImageRecord, SessionLog


class PersistenceError(RuntimeError):
    """Raised by a store when its data could not be written."""


class ImageMetadataStore(Protocol):
    """Durable storage for per-image metadata."""

    def load(self) -> list[ImageRecord]:
        """Return every stored record (empty when nothing was saved yet)."""
        raise NotImplementedError

    def save(self, records: Iterable[ImageRecord]) -> None:
        """Replace the stored records with `records`.

        Raises:
            PersistenceError: The records could not be written.
        """
        raise NotImplementedError


class HistoryStore(Protocol):
    """Durable storage for session logs."""

    def load(self) -> list[SessionLog]:
        """Return stored logs in insertion order."""
        raise NotImplementedError

    def save(self, logs: Iterable[SessionLog]) -> None:
        """Replace the stored logs with `logs`.

        Raises:
            PersistenceError: The logs could not be written.
        """
        raise NotImplementedError
