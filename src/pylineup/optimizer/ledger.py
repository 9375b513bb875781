"""Unfilled/overfilled slot accounting for a roster's capacity map."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Mapping, Optional


class PositionLedger:
    """Remaining capacity per position, computed from the live assignments.

    A ledger is a throwaway view: the roster builds a fresh one whenever it
    is asked, so it can never drift from the players' positions. Positions
    that are not in the capacity map are ignored.
    """

    def __init__(self, capacities: Mapping[str, int], assigned: Iterable[Optional[str]]):
        self._capacities: Dict[str, int] = dict(capacities)
        self._remaining: Dict[str, int] = dict(capacities)
        for position in assigned:
            if position in self._remaining:
                self._remaining[position] -= 1

    def capacity(self, position: str) -> int:
        return self._capacities.get(position, 0)

    def remaining(self, position: str) -> int:
        return self._remaining.get(position, 0)

    def filled(self, position: str) -> int:
        return self.capacity(position) - self.remaining(position)

    def unfilled(self, predicate: Callable[[str], bool] | None = None) -> List[str]:
        return [
            position
            for position, remaining in self._remaining.items()
            if remaining > 0 and (predicate is None or predicate(position))
        ]

    def overfilled(self, predicate: Callable[[str], bool] | None = None) -> List[str]:
        return [
            position
            for position, remaining in self._remaining.items()
            if remaining < 0 and (predicate is None or predicate(position))
        ]

    def total_remaining(self, predicate: Callable[[str], bool] | None = None) -> int:
        return sum(
            remaining
            for position, remaining in self._remaining.items()
            if predicate is None or predicate(position)
        )
