"""Policies deciding when a pattern-deleting matcher should rebuild itself."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class RebuildStats:
    """Counters kept by a matcher that supports pattern deletion."""

    live: int = 0
    added: int = 0
    deleted: int = 0
    filtered: int = 0


@dataclass
class LiveRatioTrigger:
    """Fires on deletion when enough patterns are live and the deleted ratio is high."""

    ratio: float
    min_live: int

    def rebuild(self, added: bool, stats: RebuildStats) -> bool:
        if added:
            return False
        live = stats.live - stats.deleted
        if live == 0 or live < self.min_live:
            return False
        return self.ratio <= stats.deleted / live


class NeverTrigger(LiveRatioTrigger):
    """A trigger that never asks for a rebuild: its ratio threshold is unreachable."""

    def __init__(self) -> None:
        super().__init__(ratio=math.inf, min_live=0)

    def rebuild(self, added: bool, stats: RebuildStats) -> bool:
        # No finite deleted/live ratio reaches an infinite threshold.
        return super().rebuild(added, stats)