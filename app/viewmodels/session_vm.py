"""Qt adapter that drives the session engine from a 1 Hz timer."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer, Signal

from core.models import SessionState, SessionStatus
from core.services.session_engine import SessionEngine

TICK_INTERVAL_MS = 1000


def format_clock(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class SessionVM(QObject):
    """Re-emits engine transitions as Qt signals and owns the tick timer.

    The timer runs only while a session exists, so ending or discarding a
    session also cancels the tick source.
    """

    stateChanged = Signal(object)  # SessionState | None
    sessionEnded = Signal(object)  # last finished SessionState | None

    def __init__(self, engine: SessionEngine, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._timer = QTimer(self)
        self._timer.setInterval(TICK_INTERVAL_MS)
        self._timer.timeout.connect(self._engine.tick)
        self._was_active = engine.is_active
        self._unsubscribe = engine.subscribe(self._on_engine_changed)

    @property
    def state(self) -> SessionState | None:
        return self._engine.state

    @property
    def active_image_id(self) -> str | None:
        return self._engine.active_image_id

    # Controls
    def next(self) -> None:
        self._engine.advance(count_current=True)

    def skip(self) -> None:
        self._engine.advance(count_current=False)

    def previous(self) -> None:
        self._engine.previous()

    def toggle_pause(self) -> None:
        self._engine.toggle_pause()

    def stop(self) -> None:
        self._engine.stop()

    def shutdown(self) -> None:
        """Stop the timer and detach from the engine (view teardown)."""
        self._timer.stop()
        self._unsubscribe()

    # Labels
    def timer_label(self) -> str:
        state = self._engine.state
        if state is None:
            return ""
        if not state.is_timed:
            return "No timer"
        label = format_clock(state.remaining_seconds)
        if state.status is SessionStatus.PAUSED:
            label += " (paused)"
        return label

    def progress_label(self) -> str:
        state = self._engine.state
        if state is None:
            return ""
        return (
            f"Completed {state.completed_count} / {state.target.label}"
            f" · Skipped {state.skipped_count}"
        )

    def _on_engine_changed(self, state: SessionState | None) -> None:
        if state is not None and not self._timer.isActive():
            self._timer.start()
        elif state is None:
            self._timer.stop()
        self.stateChanged.emit(state)
        if state is None and self._was_active:
            self.sessionEnded.emit(self._engine.last_session)
        self._was_active = state is not None
