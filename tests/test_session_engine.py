"""Tests for the session state machine."""

from collections.abc import Callable

from core.models import SessionState, SessionStatus, SessionTarget
from core.services.catalog_service import ImageCatalog
from core.services.history_service import HistoryRecorder
from core.services.session_engine import SessionEngine
from tests.conftest import FakeClock, image_paths

EngineFactory = Callable[..., tuple[SessionEngine, ImageCatalog]]


def _start(
    engine: SessionEngine,
    catalog: ImageCatalog,
    target: SessionTarget,
    minutes: int = 1,
    weighted: bool = False,
) -> SessionState:
    assert engine.start(target, minutes, catalog.included_pool(), weighted) is True
    state = engine.state
    assert state is not None
    return state


def test_count_session_runs_to_target_and_records_one_log(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(5)

    state = _start(engine, catalog, SessionTarget.fixed(3))
    assert len(state.sequence) == 3
    assert state.index == 0
    assert state.status is SessionStatus.RUNNING
    assert state.remaining_seconds == 60

    engine.advance(count_current=True)
    engine.advance(count_current=True)
    assert engine.state is not None
    engine.advance(count_current=True)

    assert engine.state is None
    assert len(history.logs) == 1
    log = history.logs[0]
    assert len(log.image_ids) == 3
    assert log.target_count == 3
    assert log.is_infinite is False
    assert list(log.image_ids) == state.sequence


def test_completed_images_increment_draw_counts_skips_do_not(
    make_engine: EngineFactory,
) -> None:
    engine, catalog = make_engine(4)
    state = _start(engine, catalog, SessionTarget.fixed(4))
    first, second = state.sequence[0], state.sequence[1]

    engine.advance(count_current=True)
    engine.advance(count_current=False)

    current = engine.state
    assert current is not None
    assert current.completed_count == 1
    assert current.skipped_count == 1
    assert current.completed_image_ids == [first]
    assert catalog.get(first).drawn_count == 1
    assert catalog.get(second).drawn_count == 0


def test_log_image_ids_match_completed_not_shown(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(5)
    _start(engine, catalog, SessionTarget.fixed(2))

    engine.advance(count_current=False)
    engine.advance(count_current=True)
    engine.advance(count_current=True)

    assert engine.state is None
    assert len(history.logs[0].image_ids) == 2


def test_infinite_single_image_pool_repeats_and_never_finalizes(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(1)
    only = image_paths(1)[0]

    state = _start(engine, catalog, SessionTarget.infinite())
    assert state.sequence == [only]

    for _ in range(10):
        engine.advance(count_current=True)

    current = engine.state
    assert current is not None
    assert current.sequence == [only] * 11
    assert current.index == 10
    assert current.completed_count == 10
    assert history.logs == []


def test_start_with_nothing_included_is_a_no_op(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(3)
    catalog.set_all_included(False)

    assert engine.start(SessionTarget.fixed(3), 1, catalog.included_pool(), True) is False

    assert engine.state is None
    engine.stop()
    assert history.logs == []


def test_sequence_grows_only_past_its_end(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(2)
    state = _start(engine, catalog, SessionTarget.fixed(5))
    assert len(state.sequence) == 5

    engine.advance(count_current=False)
    engine.advance(count_current=False)
    engine.advance(count_current=False)
    engine.advance(count_current=False)
    current = engine.state
    assert current is not None
    assert current.index == 4
    assert len(current.sequence) == 5

    engine.advance(count_current=False)
    current = engine.state
    assert current is not None
    assert current.index == 5
    assert len(current.sequence) == 6
    assert current.sequence[5] in image_paths(2)


def test_growth_respects_later_deselection(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    paths = image_paths(3)
    state = _start(engine, catalog, SessionTarget.infinite())
    keep = paths[2]
    for path in paths:
        if path != keep:
            catalog.set_included(path, False)

    for _ in range(5):
        engine.advance(count_current=False)

    current = engine.state
    assert current is not None
    assert current.sequence[0] == state.sequence[0]
    assert current.sequence[1:] == [keep] * 5


def test_growth_with_empty_pool_reuses_current_image(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(2)
    state = _start(engine, catalog, SessionTarget.infinite())
    catalog.set_all_included(False)

    engine.advance(count_current=True)

    current = engine.state
    assert current is not None
    assert current.sequence == [state.sequence[0], state.sequence[0]]


def test_finalize_happens_before_growth(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(1)
    _start(engine, catalog, SessionTarget.fixed(1))
    seen: list[SessionState | None] = []
    engine.subscribe(seen.append)

    engine.advance(count_current=True)

    assert seen == [None]
    last = engine.last_session
    assert last is not None
    assert len(last.sequence) == 1


def test_previous_at_start_is_a_no_op(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    before = _start(engine, catalog, SessionTarget.fixed(3))
    notified: list[SessionState | None] = []
    engine.subscribe(notified.append)

    engine.previous()

    assert engine.state == before
    assert notified == []


def test_previous_rewinds_without_uncounting(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    state = _start(engine, catalog, SessionTarget.fixed(3))
    engine.advance(count_current=True)
    engine.tick()

    engine.previous()

    current = engine.state
    assert current is not None
    assert current.index == 0
    assert current.remaining_seconds == 60
    assert current.completed_count == 1
    assert current.sequence == state.sequence
    assert catalog.get(state.sequence[0]).drawn_count == 1


def test_tick_counts_down_then_auto_advances(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    state = _start(engine, catalog, SessionTarget.fixed(3), minutes=1)

    for _ in range(59):
        engine.tick()
    current = engine.state
    assert current is not None
    assert current.remaining_seconds == 1
    assert current.index == 0

    engine.tick()
    current = engine.state
    assert current is not None
    assert current.index == 1
    assert current.completed_count == 1
    assert current.remaining_seconds == 60
    assert catalog.get(state.sequence[0]).drawn_count == 1


def test_tick_is_ignored_when_untimed(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    before = _start(engine, catalog, SessionTarget.fixed(3), minutes=0)

    for _ in range(200):
        engine.tick()

    current = engine.state
    assert current is not None
    assert current.index == before.index
    assert current.remaining_seconds == before.remaining_seconds


def test_tick_is_ignored_when_paused(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    _start(engine, catalog, SessionTarget.fixed(3), minutes=1)

    engine.toggle_pause()
    engine.tick()
    current = engine.state
    assert current is not None
    assert current.status is SessionStatus.PAUSED
    assert current.remaining_seconds == 60

    engine.toggle_pause()
    engine.tick()
    current = engine.state
    assert current is not None
    assert current.status is SessionStatus.RUNNING
    assert current.remaining_seconds == 59


def test_calls_without_a_session_are_safe_no_ops(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, _catalog = make_engine(3)

    engine.tick()
    engine.advance(count_current=True)
    engine.previous()
    engine.toggle_pause()
    engine.stop()

    assert engine.state is None
    assert engine.active_image_id is None
    assert history.logs == []


def test_stray_tick_after_stop_is_ignored(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(3)
    _start(engine, catalog, SessionTarget.fixed(3))
    engine.stop()

    engine.tick()

    assert engine.state is None
    assert len(history.logs) == 1


def test_stop_records_partial_session(
    make_engine: EngineFactory, history: HistoryRecorder, clock: FakeClock
) -> None:
    engine, catalog = make_engine(5)
    state = _start(engine, catalog, SessionTarget.infinite(), minutes=2)
    engine.advance(count_current=True)
    clock.advance(minutes=3)

    engine.stop()

    assert engine.state is None
    log = history.logs[0]
    assert log.image_ids == (state.sequence[0],)
    assert log.is_infinite is True
    assert log.target_count is None
    assert log.is_timed is True
    assert log.duration_seconds == 180
    last = engine.last_session
    assert last is not None and last.completed_count == 1


def test_reset_discards_without_recording(
    make_engine: EngineFactory, history: HistoryRecorder
) -> None:
    engine, catalog = make_engine(2)
    _start(engine, catalog, SessionTarget.fixed(2))

    engine.reset()

    assert engine.state is None
    assert engine.last_session is None
    assert history.logs == []


def test_start_single_ignores_inclusion(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    target_id = image_paths(3)[1]
    catalog.set_included(target_id, False)

    assert engine.start_single(target_id, 2) is True

    state = engine.state
    assert state is not None
    assert state.sequence == [target_id]
    assert state.target.is_infinite
    assert state.remaining_seconds == 120
    assert engine.active_image_id == target_id


def test_start_single_unknown_id_is_a_no_op(make_engine: EngineFactory) -> None:
    engine, _catalog = make_engine(2)

    assert engine.start_single("/nowhere.jpg", 1) is False
    assert engine.state is None


def test_state_is_a_snapshot(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    state = _start(engine, catalog, SessionTarget.fixed(3))

    state.sequence.clear()
    state.index = 99

    current = engine.state
    assert current is not None
    assert len(current.sequence) == 3
    assert current.index == 0


def test_subscribers_are_notified_until_unsubscribed(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(3)
    seen: list[SessionState | None] = []
    unsubscribe = engine.subscribe(seen.append)

    _start(engine, catalog, SessionTarget.fixed(3))
    engine.toggle_pause()
    unsubscribe()
    engine.toggle_pause()

    assert len(seen) == 2
    assert seen[0] is not None and seen[0].status is SessionStatus.RUNNING
    assert seen[1] is not None and seen[1].status is SessionStatus.PAUSED


def test_weighted_growth_uses_session_mode(make_engine: EngineFactory) -> None:
    engine, catalog = make_engine(2, seed=5)
    favored, heavy = image_paths(2)
    for _ in range(50):
        catalog.increment_draw_count(heavy)
    _start(engine, catalog, SessionTarget.infinite(), weighted=True)

    for _ in range(300):
        engine.advance(count_current=False)

    current = engine.state
    assert current is not None
    tail = current.sequence[1:]
    assert tail.count(favored) > tail.count(heavy) * 10


def test_start_single_follows_weighting_choice(make_engine: EngineFactory) -> None:
    engine, _catalog = make_engine(3)

    assert engine.start_single(image_paths(3)[0], 1, weighted=False) is True

    state = engine.state
    assert state is not None
    assert state.weighted is False
