"""Random image selection, optionally biased toward less-drawn images."""

from __future__ import annotations

from collections.abc import Sequence
import random

from core.models import ImageRecord


def draw_weight(record: ImageRecord) -> float:
    """Weight of `record` in a weighted pick: 1 / (drawn_count + 1)."""
    return 1.0 / (max(0, record.drawn_count) + 1)


class WeightedSelector:
    """Picks one record from a pool using an injectable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def pick(self, pool: Sequence[ImageRecord], weighted: bool) -> ImageRecord:
        """Return one record from `pool`.

        Args:
            pool: Candidate records. Must not be empty; callers check this
                before drawing.
            weighted: If True, never-drawn images are favored; every record
                keeps a non-zero chance.

        Raises:
            ValueError: `pool` is empty.
        """
        if not pool:
            raise ValueError("Cannot pick from an empty pool")
        if not weighted:
            return self._rng.choice(pool)

        weights = [draw_weight(r) for r in pool]
        total = sum(weights)
        threshold = self._rng.random() * total
        cumulative = 0.0
        for record, weight in zip(pool, weights):
            cumulative += weight
            if threshold <= cumulative:
                return record
        # float rounding can leave the threshold just past the last bucket
        return pool[-1]
