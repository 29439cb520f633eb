"""Core domain models for images, drawing sessions, and history logs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path

MIN_COUNT = 2
MAX_COUNT = 20


@dataclass
class ImageRecord:
    """A drawable image known to the catalog, identified by its absolute path."""

    path: str
    included: bool = True
    drawn_count: int = 0

    @property
    def id(self) -> str:
        return self.path

    @property
    def name(self) -> str:
        """Base name of the file path."""
        return Path(self.path).name


class SessionStatus(Enum):
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class SessionTarget:
    """Stopping condition of a session: a fixed count, or unbounded when `count` is None."""

    count: int | None = None

    def __post_init__(self) -> None:
        if self.count is not None and self.count < 1:
            raise ValueError(f"Session target count must be positive, got {self.count}")

    @classmethod
    def fixed(cls, count: int) -> SessionTarget:
        return cls(count=count)

    @classmethod
    def infinite(cls) -> SessionTarget:
        return cls(count=None)

    @property
    def is_infinite(self) -> bool:
        return self.count is None

    @property
    def label(self) -> str:
        return "∞" if self.count is None else str(self.count)


@dataclass
class SessionState:
    """One in-progress or paused drawing session.

    `sequence` only grows at its end; `index` always points into it.
    """

    status: SessionStatus
    sequence: list[str]
    index: int
    remaining_seconds: int
    target: SessionTarget
    minutes_per_image: int
    started_at: datetime
    weighted: bool = True
    completed_count: int = 0
    skipped_count: int = 0
    completed_image_ids: list[str] = field(default_factory=list)

    @property
    def is_timed(self) -> bool:
        return self.minutes_per_image > 0

    @property
    def current_id(self) -> str:
        return self.sequence[self.index]

    def copy(self) -> SessionState:
        """Return a snapshot that shares no mutable lists with this state."""
        return replace(
            self,
            sequence=list(self.sequence),
            completed_image_ids=list(self.completed_image_ids),
        )


@dataclass(frozen=True)
class SessionLog:
    """Immutable summary of a finished session."""

    id: str
    start: datetime
    end: datetime
    minutes_per_image: int
    target_count: int | None
    is_infinite: bool
    is_timed: bool
    image_ids: tuple[str, ...] = ()

    @property
    def duration_seconds(self) -> float:
        return max(0.0, (self.end - self.start).total_seconds())


@dataclass
class SessionPreferences:
    """Setup-screen choices used to start new sessions."""

    folder_path: str = ""
    minutes: int = 1
    count: int = 10
    infinite: bool = False
    prioritize_low_draw: bool = True
    history_enabled: bool = True

    def adjust_count(self, value: int) -> None:
        self.count = min(MAX_COUNT, max(MIN_COUNT, int(value)))

    def target(self) -> SessionTarget:
        if self.infinite:
            return SessionTarget.infinite()
        return SessionTarget.fixed(self.count)
