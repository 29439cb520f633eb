"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
import os
import random

import pytest

from core.models import ImageRecord, SessionLog
from core.services.catalog_service import ImageCatalog
from core.services.history_service import HistoryRecorder
from core.services.interfaces import PersistenceError
from core.services.selector import WeightedSelector
from core.services.session_engine import SessionEngine


@dataclass
class InMemoryImageStore:
    """In-memory image metadata store for tests."""

    records: list[ImageRecord] = field(default_factory=list)
    save_calls: int = 0
    fail: bool = False

    def load(self) -> list[ImageRecord]:
        return [replace(r) for r in self.records]

    def save(self, records: Iterable[ImageRecord]) -> None:
        if self.fail:
            raise PersistenceError("disk full")
        self.save_calls += 1
        self.records = [replace(r) for r in records]


@dataclass
class InMemoryHistoryStore:
    """In-memory history store for tests."""

    logs: list[SessionLog] = field(default_factory=list)
    save_calls: int = 0
    fail: bool = False

    def load(self) -> list[SessionLog]:
        return list(self.logs)

    def save(self, logs: Iterable[SessionLog]) -> None:
        if self.fail:
            raise PersistenceError("read-only")
        self.save_calls += 1
        self.logs = list(logs)


class FakeClock:
    """Clock that returns a fixed time until advanced."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 1, 5, 9, 30, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def image_paths(count: int) -> list[str]:
    return [f"/images/pose_{i:02d}.jpg" for i in range(count)]


@pytest.fixture(scope="session")
def qt_app():
    """One QApplication for every Qt test, rendering offscreen."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication

    return QApplication.instance() or QApplication([])


@pytest.fixture
def image_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def history_store() -> InMemoryHistoryStore:
    return InMemoryHistoryStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_catalog(image_store: InMemoryImageStore) -> Callable[[int], ImageCatalog]:
    def _make(count: int) -> ImageCatalog:
        catalog = ImageCatalog(image_store)
        catalog.load_folder(image_paths(count))
        return catalog

    return _make


@pytest.fixture
def history(history_store: InMemoryHistoryStore, clock: FakeClock) -> HistoryRecorder:
    return HistoryRecorder(history_store, clock=clock)


@pytest.fixture
def make_engine(
    make_catalog: Callable[[int], ImageCatalog], history: HistoryRecorder, clock: FakeClock
) -> Callable[..., tuple[SessionEngine, ImageCatalog]]:
    def _make(count: int, seed: int = 7) -> tuple[SessionEngine, ImageCatalog]:
        catalog = make_catalog(count)
        engine = SessionEngine(
            catalog, history, selector=WeightedSelector(random.Random(seed)), clock=clock
        )
        return engine, catalog

    return _make
