"""Builds the initial image sequence of a session."""

from __future__ import annotations

from collections.abc import Sequence

from core.models import ImageRecord, SessionTarget
from core.services.selector import WeightedSelector


class SequenceBuilder:
    """Turns a candidate pool and a target into an ordered list of image ids."""

    def __init__(self, selector: WeightedSelector) -> None:
        self._selector = selector

    def build(
        self, pool: Sequence[ImageRecord], target: SessionTarget, weighted: bool
    ) -> list[str]:
        """Return image ids for a new session.

        For a fixed count `n`, the first `min(n, len(pool))` ids are distinct;
        any further ids are drawn independently from the full pool and may
        repeat. An infinite target yields a single id.

        Raises:
            ValueError: `pool` is empty.
        """
        if not pool:
            raise ValueError("Cannot build a sequence from an empty pool")

        if target.is_infinite:
            return [self._selector.pick(pool, weighted).path]

        limit = int(target.count or 0)
        distinct = min(limit, len(pool))
        remaining = list(pool)
        sequence: list[str] = []
        while len(sequence) < distinct:
            picked = self._selector.pick(remaining, weighted)
            sequence.append(picked.path)
            remaining = [r for r in remaining if r.path != picked.path]

        while len(sequence) < limit:
            sequence.append(self._selector.pick(pool, weighted).path)
        return sequence
