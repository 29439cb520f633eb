"""Tests for weighted and uniform image selection."""

from collections import Counter
import random

import pytest

from core.models import ImageRecord
from core.services.selector import WeightedSelector, draw_weight


class FixedRandom(random.Random):
    """Random source whose `random()` always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


def _pool(*counts: int) -> list[ImageRecord]:
    return [ImageRecord(path=f"/img/{i}.png", drawn_count=c) for i, c in enumerate(counts)]


def test_draw_weight_decreases_but_stays_positive() -> None:
    weights = [draw_weight(ImageRecord(path="/a.png", drawn_count=n)) for n in range(5)]

    assert weights[0] == 1.0
    assert weights[1] == 0.5
    assert all(a > b for a, b in zip(weights, weights[1:]))
    assert all(w > 0 for w in weights)


def test_pick_from_empty_pool_fails_fast() -> None:
    selector = WeightedSelector(random.Random(1))

    with pytest.raises(ValueError):
        selector.pick([], weighted=True)
    with pytest.raises(ValueError):
        selector.pick([], weighted=False)


def test_weighted_pick_walks_cumulative_weights_in_pool_order() -> None:
    pool = _pool(0, 1)  # weights 1.0 and 0.5, total 1.5

    # threshold 0.9 falls inside the first bucket
    assert WeightedSelector(FixedRandom(0.6)).pick(pool, weighted=True) is pool[0]
    # threshold 1.05 falls inside the second bucket
    assert WeightedSelector(FixedRandom(0.7)).pick(pool, weighted=True) is pool[1]
    assert WeightedSelector(FixedRandom(0.0)).pick(pool, weighted=True) is pool[0]


def test_weighted_pick_falls_back_to_last_candidate() -> None:
    pool = _pool(0, 0, 0)

    assert WeightedSelector(FixedRandom(1.0)).pick(pool, weighted=True) is pool[-1]


def test_same_seed_gives_same_picks() -> None:
    pool = _pool(0, 3, 1, 7, 2)
    first = WeightedSelector(random.Random(42))
    second = WeightedSelector(random.Random(42))

    picks_a = [first.pick(pool, weighted=True).path for _ in range(50)]
    picks_b = [second.pick(pool, weighted=True).path for _ in range(50)]

    assert picks_a == picks_b


def test_weighted_pick_favors_never_drawn_image() -> None:
    pool = _pool(0, 9, 9, 9, 9)
    selector = WeightedSelector(random.Random(2024))
    trials = 20000

    hits = sum(1 for _ in range(trials) if selector.pick(pool, weighted=True) is pool[0])

    expected = 10 / (10 + 9 * (len(pool) - 1))
    assert abs(hits / trials - expected) < 0.02


def test_unweighted_pick_is_roughly_uniform_and_ignores_counts() -> None:
    pool = _pool(0, 9, 9, 9)
    selector = WeightedSelector(random.Random(99))
    trials = 20000

    counts = Counter(selector.pick(pool, weighted=False).path for _ in range(trials))

    assert set(counts) == {r.path for r in pool}
    for record in pool:
        assert abs(counts[record.path] / trials - 0.25) < 0.02
