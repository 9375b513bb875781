"""Repair players sitting in positions they are not eligible for."""

from __future__ import annotations

import logging
from typing import Callable, List

from .roster import Roster, RosterPlayer, sort_ascending_by_start_score, sort_descending_by_start_score
from .swaps import RosterMoves, find_rotation


logger = logging.getLogger(__name__)


class IllegalPositionResolver:
    """Single pass over illegal players, best players first.

    Each player tries, in order: coming off the inactive list onto the
    active roster, a direct move to an unfilled slot of its class, a two-way
    swap, a three-way rotation, and finally shifting a swap partner into an
    unfilled slot. The first success wins.
    """

    def __init__(self, roster: Roster, moves: RosterMoves):
        self.roster = roster
        self.moves = moves

    def resolve_overfilled_positions(self) -> None:
        bench = self.roster.rules.bench_position
        for position in self.roster.overfilled_positions:
            while self.roster.ledger.remaining(position) < 0:
                at_position = sort_ascending_by_start_score(self.roster.players_at(position))
                if not at_position:
                    logger.warning(
                        "Position %s on team %s is overfilled by locked players",
                        position,
                        self.roster.team_key,
                    )
                    break
                self.moves.move(at_position[0], bench)

    def resolve_all(self) -> List[RosterPlayer]:
        """Resolve every illegal player; returns the ones left illegal."""

        illegal = sort_descending_by_start_score(self.roster.illegal_players)
        if not illegal:
            return []
        self.moves.trace("resolving illegal players: %s", ", ".join(p.player_name for p in illegal))

        unresolved = [player for player in illegal if not self.resolve(player)]
        for player in unresolved:
            logger.info(
                "Could not find a legal position for %s (%s) on team %s",
                player.player_key,
                player.selected_position,
                self.roster.team_key,
            )
        return unresolved

    def resolve(self, player: RosterPlayer) -> bool:
        # an earlier swap may already have fixed this player
        if not player.is_illegal():
            return True
        self.moves.trace("resolving illegal player %s at %s", player.player_name, player.selected_position)

        if player.is_inactive_list():
            if self.moves.move_inactive_player_to_active_roster(player):
                return True
            targets = self.roster.unfilled_inactive_positions
        else:
            targets = self.roster.unfilled_active_positions

        if self.moves.move_to_unfilled_position(player, targets):
            return True
        return self._attempt_swaps(player)

    def _attempt_swaps(self, a: RosterPlayer) -> bool:
        bench = self.roster.rules.bench_position
        for b in sort_ascending_by_start_score(self.roster.editable_players):
            if b is a:
                continue
            if a.is_eligible_to_swap_with(b):
                self.moves.swap(a, b)
                return True

            rotation = find_rotation(
                a,
                b,
                self.roster.editable_players,
                bench_has_room=self.roster.ledger.remaining(bench) > 0,
            )
            if rotation is not None:
                self.moves.apply_rotation(rotation)
                return True

            if a.is_inactive_list():
                targets = self.roster.unfilled_inactive_positions
            else:
                targets = self.roster.unfilled_all_positions
            if self.moves.three_way_move_to_unfilled_position(a, b, targets):
                return True

        self.moves.trace("no swaps found for %s", a.player_name)
        return False

    def evict_healthy_from_inactive_list(self, on_unresolved: Callable[[RosterPlayer], object]) -> None:
        """Try to activate healthy inactive-list players; hand failures to ``on_unresolved``."""

        for player in sort_descending_by_start_score(self.roster.healthy_on_inactive_list):
            if not self.resolve(player):
                on_unresolved(player)
