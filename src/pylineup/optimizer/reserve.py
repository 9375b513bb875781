"""Promote bench and inactive-list players who beat current starters."""

from __future__ import annotations

import logging
from typing import List, Optional

from .roster import Roster, RosterPlayer, sort_ascending_by_start_score
from .swaps import Rotation, RosterMoves, find_rotation


logger = logging.getLogger(__name__)

_MIN_ITERATIONS = 100


class ReserveOptimizer:
    """Work through reserve players from the highest start score down.

    Whenever a player's turn changes the roster, every reserve player goes
    back on the queue, since a player skipped earlier may now have a move.
    A player displaced from the starting lineup is evaluated next.
    """

    def __init__(self, roster: Roster, moves: RosterMoves):
        self.roster = roster
        self.moves = moves

    def _iteration_limit(self) -> int:
        size = len(self.roster.editable_players)
        return max(_MIN_ITERATIONS, size * size * size)

    def run(self) -> None:
        reserve = sort_ascending_by_start_score(self.roster.reserve_players)
        self.moves.trace("reserve players: %s", ", ".join(p.player_name for p in reserve))

        limit = self._iteration_limit()
        iterations = 0
        while reserve:
            iterations += 1
            if iterations > limit:
                logger.warning(
                    "Stopping reserve optimization for team %s after %s iterations with %s players queued",
                    self.roster.team_key,
                    limit,
                    len(reserve),
                )
                break

            a = reserve.pop()
            if a.is_starting():
                continue
            self.moves.trace("evaluating reserve player %s (%s)", a.player_name, a.start_score)

            before = self.roster.positions()
            displaced = self._promote(a)
            if self.roster.positions() == before:
                self.moves.trace("no moves for %s", a.player_name)
                continue

            reserve = sort_ascending_by_start_score(
                player for player in self.roster.reserve_players if player is not displaced
            )
            if displaced is not None and displaced.is_reserve():
                reserve.append(displaced)

    def _promote(self, a: RosterPlayer) -> Optional[RosterPlayer]:
        """Try every way of getting ``a`` into the lineup; returns a displaced player."""

        can_start = True
        if a.is_inactive_list():
            can_start = self.moves.move_inactive_player_to_active_roster(a)
            if can_start and a.is_starting():
                return None
        if can_start and self.moves.move_to_unfilled_position(a, self.roster.unfilled_starting_positions):
            return None
        return self._swap_with_starting_players(a)

    def _eligible_starting_players(self, a: RosterPlayer) -> List[RosterPlayer]:
        starters = sort_ascending_by_start_score(self.roster.starting_players)
        if a.has_lower_start_score_than_all(starters):
            self.moves.trace("%s scores below every starter; skipping", a.player_name)
            return []
        return a.eligible_target_players(starters)

    def _swap_with_starting_players(self, a: RosterPlayer) -> Optional[RosterPlayer]:
        """Try to get ``a`` into the lineup; returns a player to re-queue."""

        for b in self._eligible_starting_players(a):
            if a.is_eligible_and_higher_score_than(b):
                self.moves.swap(a, b)
                return b

            displaced = self._three_way_swap(a, b)
            if displaced is not None:
                return displaced

            moved = self._three_way_move_to_unfilled_position(a, b)
            if moved is not None:
                return moved
        return None

    def _three_way_swap(self, a: RosterPlayer, b: RosterPlayer) -> Optional[RosterPlayer]:
        if a.is_inactive_list():
            candidates = self.roster.inactive_list_eligible_players
        else:
            candidates = self.roster.starting_players

        def improves_lineup(rotation: Rotation) -> bool:
            if a.compare_start_score(rotation.c) <= 0:
                return False
            if rotation.c.is_reserve():
                return a.compare_start_score(b) > 0
            return True

        rotation = find_rotation(a, b, candidates, accept=improves_lineup)
        if rotation is None:
            return None

        self.moves.apply_rotation(rotation)
        return rotation.c

    def _three_way_move_to_unfilled_position(self, a: RosterPlayer, b: RosterPlayer) -> Optional[RosterPlayer]:
        if a.is_inactive_list():
            # b gives up its slot for a, so a has to be the better player
            if a.compare_start_score(b) <= 0:
                return None
            targets = self.roster.unfilled_inactive_positions
        else:
            targets = self.roster.unfilled_starting_positions

        if self.moves.three_way_move_to_unfilled_position(a, b, targets):
            return b
        return None
