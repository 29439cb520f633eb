"""History recorder: the log of finished drawing sessions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
import uuid

from loguru import logger

from core.models import SessionLog, SessionState
from core.services.interfaces import HistoryStore, PersistenceError


class HistoryRecorder:
    """Sole owner of the `SessionLog` collection.

    Logs are kept in insertion order; sorting for display is left to
    `core.services.history_summary`.
    """

    def __init__(
        self,
        store: HistoryStore,
        clock: Callable[[], datetime] = datetime.now,
        enabled: bool = True,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self.on_error = on_error
        self.enabled = enabled
        self._logs: list[SessionLog] = list(store.load())

    @property
    def logs(self) -> list[SessionLog]:
        return list(self._logs)

    def get(self, log_id: str) -> SessionLog | None:
        for log in self._logs:
            if log.id == log_id:
                return log
        return None

    def record(self, session: SessionState) -> SessionLog | None:
        """Append a log built from a finalized `session`.

        Returns None without storing anything while history is disabled.
        """
        if not self.enabled:
            logger.info("History disabled; session not recorded")
            return None
        log = SessionLog(
            id=str(uuid.uuid4()),
            start=session.started_at,
            end=self._clock(),
            minutes_per_image=session.minutes_per_image,
            target_count=session.target.count,
            is_infinite=session.target.is_infinite,
            is_timed=session.is_timed,
            image_ids=tuple(session.completed_image_ids),
        )
        self._logs.append(log)
        logger.info("Session recorded: {} ({} images)", log.id, len(log.image_ids))
        self._save()
        return log

    def delete(self, log_id: str) -> bool:
        """Remove one log. Returns False when no log has `log_id`."""
        kept = [log for log in self._logs if log.id != log_id]
        if len(kept) == len(self._logs):
            return False
        self._logs = kept
        logger.info("Session log deleted: {}", log_id)
        self._save()
        return True

    def clear(self) -> None:
        self._logs = []
        logger.info("History cleared")
        self._save()

    def _save(self) -> None:
        try:
            self._store.save(self._logs)
        except PersistenceError as ex:
            logger.error("Saving history failed: {}", ex)
            if self.on_error is not None:
                self.on_error(f"Could not save history: {ex}")
