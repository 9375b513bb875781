"""Low-level position moves shared by the resolver and the reserve optimizer.

Rotation search is kept pure (:func:`find_rotation` only inspects players);
every state change goes through :class:`RosterMoves`, which writes to the
roster's move log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .roster import Roster, RosterPlayer, sort_ascending_by_start_score, sort_descending_by_start_score


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rotation:
    """A proposed three-player cycle: A takes B's slot, B takes C's, C takes A's.

    ``a_position`` is B's slot, or the bench when A is coming off an
    inactive list and cannot play B's position.
    """

    a: RosterPlayer
    b: RosterPlayer
    c: RosterPlayer
    a_position: str
    b_position: str
    c_position: str

    def assignments(self) -> Tuple[Tuple[RosterPlayer, str], ...]:
        return (
            (self.a, self.a_position),
            (self.b, self.b_position),
            (self.c, self.c_position),
        )


def rotation_candidates(
    a: RosterPlayer,
    b: RosterPlayer,
    candidates: Iterable[RosterPlayer],
    *,
    bench_has_room: bool = False,
) -> List[Rotation]:
    """All legal rotations A -> B -> C -> A drawing C from ``candidates``."""

    a_position = b.selected_position if a.is_eligible_for(b.selected_position) else None
    if a_position is None and bench_has_room and a.is_inactive_list() and b.is_active_roster():
        bench = a.rules.bench_position
        if a.is_eligible_for(bench):
            a_position = bench
    if a_position is None or a.selected_position is None:
        return []

    result = []
    for c in candidates:
        if c is a or c is b:
            continue
        if c.selected_position is None or c.selected_position == a.selected_position:
            continue
        if b.is_eligible_for(c.selected_position) and c.is_eligible_for(a.selected_position):
            result.append(
                Rotation(
                    a=a,
                    b=b,
                    c=c,
                    a_position=a_position,
                    b_position=c.selected_position,
                    c_position=a.selected_position,
                )
            )
    return result


def find_rotation(
    a: RosterPlayer,
    b: RosterPlayer,
    candidates: Iterable[RosterPlayer],
    *,
    accept: Optional[Callable[[Rotation], bool]] = None,
    bench_has_room: bool = False,
) -> Optional[Rotation]:
    """First rotation in candidate order that ``accept`` allows, if any."""

    for rotation in rotation_candidates(a, b, candidates, bench_has_room=bench_has_room):
        if accept is None or accept(rotation):
            return rotation
    return None


class RosterMoves:
    """Position-changing operations bound to one roster."""

    def __init__(self, roster: Roster, *, verbose: bool = False):
        self.roster = roster
        self.verbose = verbose

    def trace(self, message: str, *args) -> None:
        if self.verbose:
            logger.debug(message, *args)

    @property
    def bench(self) -> str:
        return self.roster.rules.bench_position

    def move(self, player: RosterPlayer, position: str) -> None:
        self.trace("moving %s from %s to %s", player.player_name, player.selected_position, position)
        self.roster.move(player, position)

    def swap(self, a: RosterPlayer, b: RosterPlayer) -> None:
        self.trace(
            "swapping %s (%s) with %s (%s)",
            a.player_name,
            a.selected_position,
            b.player_name,
            b.selected_position,
        )
        a_position = a.selected_position
        b_position = b.selected_position
        self.roster.move(a, b_position)
        self.roster.move(b, a_position)

    def apply_rotation(self, rotation: Rotation) -> None:
        self.trace(
            "rotating %s -> %s, %s -> %s, %s -> %s",
            rotation.a.player_name,
            rotation.a_position,
            rotation.b.player_name,
            rotation.b_position,
            rotation.c.player_name,
            rotation.c_position,
        )
        for player, position in rotation.assignments():
            self.roster.move(player, position)

    def move_to_unfilled_position(self, player: RosterPlayer, targets: Sequence[str]) -> bool:
        position = player.find_eligible_position_in(targets)
        if position is None:
            return False
        self.move(player, position)
        return True

    def three_way_move_to_unfilled_position(
        self,
        a: RosterPlayer,
        b: RosterPlayer,
        targets: Sequence[str],
    ) -> bool:
        """Shift B into an unfilled slot from ``targets`` and A into B's old slot."""

        b_position = b.selected_position
        if b_position is None or not a.is_eligible_for(b_position):
            return False
        if not self.move_to_unfilled_position(b, targets):
            return False
        self.move(a, b_position)
        return True

    def open_one_roster_spot(self, for_player: Optional[RosterPlayer] = None) -> Optional[RosterPlayer]:
        """Park one active-roster, inactive-eligible player in an unfilled inactive slot.

        With ``for_player`` only players scoring below that player qualify.
        Bench players are parked before starters, lowest score first.
        Returns the player that was moved.
        """

        unfilled_inactive = self.roster.unfilled_inactive_positions
        if not unfilled_inactive:
            return None

        candidates = self.roster.inactive_on_roster_players
        if for_player is not None:
            candidates = [
                player
                for player in candidates
                if player is not for_player and for_player.compare_start_score(player) > 0
            ]

        for player in sorted(candidates, key=lambda p: (p.is_starting(), p.start_score)):
            position = player.find_eligible_position_in(unfilled_inactive)
            if position is not None:
                self.trace("freeing a roster spot by moving %s to %s", player.player_name, position)
                self.move(player, position)
                return player
        return None

    def make_bench_room(self) -> bool:
        """Promote the best bench player able to fill an open starting slot."""

        unfilled_starting = self.roster.unfilled_starting_positions
        if not unfilled_starting:
            return False
        for player in sort_descending_by_start_score(self.roster.players_at(self.bench)):
            if self.move_to_unfilled_position(player, unfilled_starting):
                return True
        return False

    def shift_starter_for(self, player: RosterPlayer) -> bool:
        """Move a starter into an open starting slot and ``player`` into its old one."""

        unfilled_starting = self.roster.unfilled_starting_positions
        if not unfilled_starting:
            return False
        for starter in sort_ascending_by_start_score(self.roster.starting_players):
            if self.three_way_move_to_unfilled_position(player, starter, unfilled_starting):
                return True
        return False

    def _land_on_active_roster(self, player: RosterPlayer) -> bool:
        if self.roster.ledger.remaining(self.bench) > 0 and player.is_eligible_for(self.bench):
            self.move(player, self.bench)
            return True
        if self.move_to_unfilled_position(player, self.roster.unfilled_starting_positions):
            return True
        if player.is_eligible_for(self.bench) and self.make_bench_room():
            self.move(player, self.bench)
            return True
        return self.shift_starter_for(player)

    def move_inactive_player_to_active_roster(self, player: RosterPlayer) -> bool:
        """Bring an inactive-list player onto the active roster.

        Needs an empty standard roster spot; when there is none, one is
        opened by parking a lower-scoring player on an inactive list. A
        parked starter's slot can only go to ``player`` itself.
        """

        if not player.is_inactive_list():
            return False

        self.trace(
            "%s of %s standard roster spots empty",
            self.roster.num_empty_roster_spots,
            self.roster.num_standard_roster_spots,
        )
        parked: Optional[RosterPlayer] = None
        parked_from: Optional[str] = None
        if self.roster.num_empty_roster_spots <= 0:
            parked = self.open_one_roster_spot(player)
            if parked is None:
                return False
            parked_from = self.roster.moves[-1].from_position

        if parked_from is not None and self.roster.rules.is_starting(parked_from):
            if player.is_eligible_for(parked_from):
                self.move(player, parked_from)
                return True
        elif self._land_on_active_roster(player):
            return True

        if parked is not None and parked_from is not None:
            self.trace("no active slot for %s; returning %s to %s", player.player_name, parked.player_name, parked_from)
            self.move(parked, parked_from)
        return False
