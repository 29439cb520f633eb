"""Day-by-day aggregation of session logs for the history screen.

Nothing here depends on a UI toolkit; views only format the returned
dataclasses.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from core.models import SessionLog

DAY_LABEL_FMT = "%b %d, %Y"
TIME_LABEL_FMT = "%H:%M"


@dataclass
class HistoryEntry:
    """One session as shown in a day section."""

    log_id: str
    time: str
    session_length: str
    timer: str
    count: str
    image_paths: list[str] = field(default_factory=list)


@dataclass
class HistorySection:
    """All sessions started on one calendar day, newest first."""

    day: date
    label: str
    total_seconds: float
    total_label: str
    entries: list[HistoryEntry] = field(default_factory=list)


def session_length_label(seconds: float) -> str:
    """Format a duration as "<1 min", "N min", "Hh" or "Hh Mm"."""
    total_minutes = int(max(0.0, seconds) // 60)
    if total_minutes < 1:
        return "<1 min"
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    return f"{minutes} min"


def timer_label(log: SessionLog) -> str:
    if not log.is_timed or log.minutes_per_image <= 0:
        return "∞"
    return f"{log.minutes_per_image} min"


def count_label(log: SessionLog) -> str:
    if log.target_count is not None:
        return str(log.target_count)
    return str(len(log.image_ids))


def unique_image_paths(log: SessionLog) -> list[str]:
    """Image ids of `log` without repeats, in first-seen order."""
    return list(dict.fromkeys(log.image_ids))


def build_sections(logs: Iterable[SessionLog]) -> list[HistorySection]:
    """Group logs by the day they started, newest day and newest session first."""
    ordered = sorted(logs, key=lambda log: log.start, reverse=True)
    grouped: dict[date, list[SessionLog]] = defaultdict(list)
    for log in ordered:
        grouped[log.start.date()].append(log)

    sections: list[HistorySection] = []
    for day in sorted(grouped, reverse=True):
        day_logs = grouped[day]
        total = sum(log.duration_seconds for log in day_logs)
        entries = [
            HistoryEntry(
                log_id=log.id,
                time=log.start.strftime(TIME_LABEL_FMT),
                session_length=session_length_label(log.duration_seconds),
                timer=timer_label(log),
                count=count_label(log),
                image_paths=unique_image_paths(log),
            )
            for log in day_logs
        ]
        sections.append(
            HistorySection(
                day=day,
                label=day.strftime(DAY_LABEL_FMT),
                total_seconds=total,
                total_label=session_length_label(total),
                entries=entries,
            )
        )
    return sections


def session_days(logs: Iterable[SessionLog], year: int, month: int) -> set[int]:
    """Days of `year`/`month` on which at least one session started."""
    return {
        log.start.day for log in logs if log.start.year == year and log.start.month == month
    }
