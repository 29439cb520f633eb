"""JSON persistence for image metadata and session history.

Each store keeps its whole collection in one JSON array and rewrites the file
on every save (last write wins). Writes go to a temporary sibling first and
are then swapped in with `os.replace`, so a crash never leaves a half-written
file behind.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
import json
import os
from pathlib import Path
import tempfile
from typing import Any

from loguru import logger

from core.models import ImageRecord, SessionLog
from core.services.interfaces import PersistenceError


def _read_array(path: Path) -> list[Any]:
    """Return the JSON array stored at `path`; [] when missing or malformed."""
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as ex:
        logger.warning("Could not read {} ({}); starting empty", path, ex)
        return []
    if not isinstance(data, list):
        logger.warning("Expected a JSON array in {}; starting empty", path)
        return []
    return data


def _bool_field(row: dict[str, Any], key: str, default: bool) -> bool:
    """Return `row[key]` (or `default` when absent); non-boolean values are rejected."""
    value = row.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _write_array(path: Path, rows: list[dict[str, Any]]) -> None:
    """Atomically replace `path` with `rows` encoded as JSON."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
    except OSError as ex:
        raise PersistenceError(f"write failed for {path}: {ex}") from ex


class JsonImageMetadataStore:
    """Stores `ImageRecord`s as `{"path", "included", "drawnCount"}` objects."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> list[ImageRecord]:
        records: list[ImageRecord] = []
        for row in _read_array(self._path):
            try:
                records.append(
                    ImageRecord(
                        path=str(row["path"]),
                        included=_bool_field(row, "included", True),
                        drawn_count=max(0, int(row.get("drawnCount", 0))),
                    )
                )
            except (KeyError, ValueError, TypeError, AttributeError) as ex:
                logger.error("Metadata row error: {} | row={}", ex, row)
        return records

    def save(self, records: Iterable[ImageRecord]) -> None:
        rows = [
            {"path": r.path, "included": r.included, "drawnCount": r.drawn_count}
            for r in records
        ]
        _write_array(self._path, rows)


class JsonHistoryStore:
    """Stores `SessionLog`s with ISO-8601 timestamps."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def load(self) -> list[SessionLog]:
        logs: list[SessionLog] = []
        for row in _read_array(self._path):
            try:
                target = row.get("targetCount")
                logs.append(
                    SessionLog(
                        id=str(row["id"]),
                        start=datetime.fromisoformat(row["start"]),
                        end=datetime.fromisoformat(row["end"]),
                        minutes_per_image=int(row.get("minutesPerImage", 0)),
                        target_count=int(target) if target is not None else None,
                        is_infinite=_bool_field(row, "isInfinite", target is None),
                        is_timed=_bool_field(row, "isTimed", False),
                        image_ids=tuple(str(i) for i in row.get("imageIds", [])),
                    )
                )
            except (KeyError, ValueError, TypeError, AttributeError) as ex:
                logger.error("History row error: {} | row={}", ex, row)
        return logs

    def save(self, logs: Iterable[SessionLog]) -> None:
        rows = [
            {
                "id": log.id,
                "start": log.start.isoformat(),
                "end": log.end.isoformat(),
                "minutesPerImage": log.minutes_per_image,
                "targetCount": log.target_count,
                "isInfinite": log.is_infinite,
                "isTimed": log.is_timed,
                "imageIds": list(log.image_ids),
            }
            for log in logs
        ]
        _write_array(self._path, rows)
