"""Session engine: sequencing, timing, and completion tracking of a drawing session.

The engine is a plain state container. Views either pull `state` or
`subscribe` to be told about every transition. All operations must be
dispatched from a single thread (the UI thread drives both the 1 Hz `tick`
and user actions); the engine does no locking of its own. Calls made while no
session is active, including stray ticks after teardown, are no-ops.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from loguru import logger

from core.models import ImageRecord, SessionState, SessionStatus, SessionTarget
from core.services.catalog_service import ImageCatalog
from core.services.history_service import HistoryRecorder
from core.services.selector import WeightedSelector
from core.services.sequence_builder import SequenceBuilder

Listener = Callable[[SessionState | None], None]


class SessionEngine:
    """Drives one drawing session at a time."""

    def __init__(
        self,
        catalog: ImageCatalog,
        history: HistoryRecorder,
        selector: WeightedSelector | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._catalog = catalog
        self._history = history
        self._selector = selector or WeightedSelector()
        self._builder = SequenceBuilder(self._selector)
        self._clock = clock
        self._session: SessionState | None = None
        self._last_session: SessionState | None = None
        self._listeners: list[Listener] = []

    # Observable state
    @property
    def state(self) -> SessionState | None:
        """Snapshot of the active session, or None when no session is running."""
        return self._session.copy() if self._session is not None else None

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def active_image_id(self) -> str | None:
        return self._session.current_id if self._session is not None else None

    @property
    def last_session(self) -> SessionState | None:
        """The most recently finalized session, kept for the summary screen."""
        return self._last_session.copy() if self._last_session is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` after every transition. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Session lifecycle
    def start(
        self,
        target: SessionTarget,
        minutes_per_image: int,
        pool: Sequence[ImageRecord],
        weighted: bool,
    ) -> bool:
        """Start a session over `pool`. Returns False (no-op) when the pool is empty."""
        if not pool:
            logger.info("Session not started: no included images")
            return False
        sequence = self._builder.build(pool, target, weighted)
        self._begin(sequence, target, minutes_per_image, weighted)
        logger.info(
            "Session started: {} images in pool, target {}, {} min per image",
            len(pool),
            target.label,
            minutes_per_image,
        )
        return True

    def start_single(self, image_id: str, minutes_per_image: int, weighted: bool = True) -> bool:
        """Start an open-ended session on one image, regardless of its inclusion flag.

        Later images are drawn from the included pool, weighted or uniform per `weighted`.
        """
        if self._catalog.get(image_id) is None:
            logger.info("Single-image session not started: unknown image {}", image_id)
            return False
        self._begin([image_id], SessionTarget.infinite(), minutes_per_image, weighted)
        logger.info("Single-image session started: {}", image_id)
        return True

    def tick(self) -> None:
        """Advance the countdown by one second; auto-advance when it runs out."""
        current = self._session
        if current is None or current.status is not SessionStatus.RUNNING:
            return
        if not current.is_timed:
            return
        if current.remaining_seconds > 1:
            current.remaining_seconds -= 1
            self._notify()
            return
        self.advance(count_current=True)

    def advance(self, count_current: bool) -> None:
        """Move past the current image, counting it as completed or skipped."""
        current = self._session
        if current is None:
            return
        current_id = current.current_id

        if count_current:
            current.completed_count += 1
            current.completed_image_ids.append(current_id)
            self._catalog.increment_draw_count(current_id)
        else:
            current.skipped_count += 1

        if not current.target.is_infinite and current.completed_count >= int(
            current.target.count or 0
        ):
            logger.info("Session target reached: {}", current.completed_count)
            self._finalize()
            return

        current.index += 1
        if current.index >= len(current.sequence):
            current.sequence.append(self._draw_next(current, fallback=current_id))
        current.remaining_seconds = current.minutes_per_image * 60
        logger.info(
            "{} image {}; now at {}",
            "Completed" if count_current else "Skipped",
            current_id,
            current.index,
        )
        self._notify()

    def previous(self) -> None:
        current = self._session
        if current is None or current.index == 0:
            return
        current.index -= 1
        current.remaining_seconds = current.minutes_per_image * 60
        logger.info("Previous image; now at {}", current.index)
        self._notify()

    def toggle_pause(self) -> None:
        current = self._session
        if current is None:
            return
        if current.status is SessionStatus.RUNNING:
            current.status = SessionStatus.PAUSED
        else:
            current.status = SessionStatus.RUNNING
        logger.info("Session {}", current.status.value)
        self._notify()

    def stop(self) -> None:
        """Finalize the active session, however far it got."""
        if self._session is None:
            return
        logger.info("Session stopped by user")
        self._finalize()

    def reset(self) -> None:
        """Discard the active session without recording it."""
        if self._session is None:
            return
        self._session = None
        self._last_session = None
        logger.info("Session discarded")
        self._notify()

    # Internal helpers
    def _begin(
        self,
        sequence: list[str],
        target: SessionTarget,
        minutes_per_image: int,
        weighted: bool,
    ) -> None:
        minutes = max(0, int(minutes_per_image))
        self._session = SessionState(
            status=SessionStatus.RUNNING,
            sequence=sequence,
            index=0,
            remaining_seconds=minutes * 60,
            target=target,
            minutes_per_image=minutes,
            started_at=self._clock(),
            weighted=weighted,
        )
        self._notify()

    def _draw_next(self, session: SessionState, fallback: str) -> str:
        # deselecting an image only affects draws made from now on
        pool = self._catalog.included_pool()
        if not pool:
            return fallback
        return self._selector.pick(pool, session.weighted).path

    def _finalize(self) -> None:
        finished = self._session
        if finished is None:
            return
        self._session = None
        finished.status = SessionStatus.PAUSED
        finished.remaining_seconds = 0
        self._last_session = finished
        self._history.record(finished)
        logger.info(
            "Session finished: {} completed, {} skipped",
            finished.completed_count,
            finished.skipped_count,
        )
        self._notify()

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)
