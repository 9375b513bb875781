"""Roster aggregate: the player arena, its derived views and the move log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pylineup.config import DEFAULT_RULES, PositionRules
from pylineup.models import PlayerRecord, TeamSnapshot

from .ledger import PositionLedger


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class RosterPlayer:
    """A player record plus the one field the optimizer changes.

    ``selected_position`` is only ever written by :meth:`Roster.move`.
    Players compare by identity.
    """

    record: PlayerRecord
    eligible_positions: Tuple[str, ...]
    selected_position: Optional[str]
    rules: PositionRules = field(default=DEFAULT_RULES, repr=False)

    @classmethod
    def from_record(cls, record: PlayerRecord, rules: PositionRules = DEFAULT_RULES) -> "RosterPlayer":
        eligible = list(dict.fromkeys(record.eligible_positions))
        if eligible and rules.bench_position not in eligible:
            # roster feeds omit the bench from eligibility
            eligible.append(rules.bench_position)
        return cls(
            record=record,
            eligible_positions=tuple(eligible),
            selected_position=record.selected_position,
            rules=rules,
        )

    @property
    def player_key(self) -> str:
        return self.record.player_key

    @property
    def player_name(self) -> str:
        return self.record.player_name or self.record.player_key

    @property
    def start_score(self) -> float:
        return self.record.start_score

    @property
    def ownership_score(self) -> float:
        return self.record.ownership_score

    @property
    def is_editable(self) -> bool:
        return self.record.is_editable

    @property
    def is_undroppable(self) -> bool:
        return self.record.is_undroppable

    @property
    def injury_status(self) -> str:
        return self.record.injury_status

    def compare_start_score(self, other: "RosterPlayer") -> float:
        return self.rules.compare_scores(self.start_score, other.start_score)

    def compare_ownership_score(self, other: "RosterPlayer") -> float:
        return self.rules.compare_scores(self.ownership_score, other.ownership_score)

    def is_eligible_for(self, position: Optional[str]) -> bool:
        return position is not None and position in self.eligible_positions

    def is_inactive_list(self) -> bool:
        return self.rules.is_inactive(self.selected_position)

    def is_inactive_list_eligible(self) -> bool:
        return any(self.rules.is_inactive(position) for position in self.eligible_positions)

    def is_active_roster(self) -> bool:
        return self.selected_position is not None and not self.is_inactive_list()

    def is_starting(self) -> bool:
        return self.rules.is_starting(self.selected_position)

    def is_reserve(self) -> bool:
        return not self.is_starting()

    def is_illegal(self) -> bool:
        return not self.is_eligible_for(self.selected_position)

    def is_healthy(self) -> bool:
        return self.injury_status in self.rules.healthy_statuses

    def is_eligible_to_swap_with(self, other: "RosterPlayer") -> bool:
        return (
            other is not self
            and other.selected_position != self.selected_position
            and self.is_eligible_for(other.selected_position)
            and other.is_eligible_for(self.selected_position)
        )

    def is_eligible_and_higher_score_than(self, other: "RosterPlayer") -> bool:
        return self.compare_start_score(other) > 0 and self.is_eligible_to_swap_with(other)

    def eligible_target_players(self, players: Iterable["RosterPlayer"]) -> List["RosterPlayer"]:
        """Players whose current position this player could take over."""

        return [
            target
            for target in players
            if target is not self
            and target.selected_position != self.selected_position
            and self.is_eligible_for(target.selected_position)
        ]

    def find_eligible_position_in(self, positions: Sequence[str]) -> Optional[str]:
        """First eligible position in ``positions``; long-term inactive lists win."""

        matches = [
            position
            for position in self.eligible_positions
            if position != self.selected_position and position in positions
        ]
        for position in matches:
            if self.rules.is_long_term_inactive(position):
                return position
        return matches[0] if matches else None

    def is_eligible_for_any_position_in(self, positions: Iterable[str]) -> bool:
        return any(position in self.eligible_positions for position in positions)

    def has_lower_start_score_than_all(self, players: Iterable["RosterPlayer"]) -> bool:
        return all(self.compare_start_score(player) <= 0 for player in players)


@dataclass(frozen=True)
class Move:
    player_key: str
    from_position: Optional[str]
    to_position: str


def sort_ascending_by_start_score(players: Iterable[RosterPlayer]) -> List[RosterPlayer]:
    return sorted(players, key=lambda player: player.start_score)


def sort_descending_by_start_score(players: Iterable[RosterPlayer]) -> List[RosterPlayer]:
    return sorted(players, key=lambda player: player.start_score, reverse=True)


class Roster:
    """All players of one team, indexed by key, with derived subsets.

    Every view is recomputed from the current assignments on access.
    """

    def __init__(self, team: TeamSnapshot, rules: PositionRules = DEFAULT_RULES):
        self.team = team
        self.rules = rules
        self.capacities: Dict[str, int] = dict(team.roster_positions)
        self._players: Dict[str, RosterPlayer] = {}
        self.skipped_player_keys: List[str] = []
        self.moves: List[Move] = []

        for record in team.players:
            if record.player_key in self._players:
                logger.warning("Duplicate player %s on team %s; keeping the first entry", record.player_key, team.team_key)
                continue
            self._players[record.player_key] = RosterPlayer.from_record(record, rules)

        self._editable: List[RosterPlayer] = []
        for player in self._players.values():
            if not player.is_editable:
                continue
            if not self._is_well_formed(player):
                self.skipped_player_keys.append(player.player_key)
                continue
            self._editable.append(player)

    def _is_well_formed(self, player: RosterPlayer) -> bool:
        if not player.eligible_positions:
            logger.warning(
                "Player %s on team %s has no eligible positions; skipping",
                player.player_key,
                self.team.team_key,
            )
            return False
        if player.selected_position not in self.capacities:
            logger.warning(
                "Player %s on team %s sits at %r which is not a roster position; skipping",
                player.player_key,
                self.team.team_key,
                player.selected_position,
            )
            return False
        return True

    @property
    def team_key(self) -> str:
        return self.team.team_key

    @property
    def same_day_transactions(self) -> bool:
        return self.team.has_same_day_transactions

    def get(self, player_key: str) -> Optional[RosterPlayer]:
        return self._players.get(player_key)

    def move(self, player: RosterPlayer, position: str) -> None:
        self.moves.append(Move(player.player_key, player.selected_position, position))
        player.selected_position = position

    def positions(self) -> Dict[str, Optional[str]]:
        """Current position of every editable player, keyed by player key."""

        return {player.player_key: player.selected_position for player in self._editable}

    # -- player views -----------------------------------------------------

    @property
    def all_players(self) -> List[RosterPlayer]:
        return list(self._players.values())

    @property
    def editable_players(self) -> List[RosterPlayer]:
        return list(self._editable)

    @property
    def illegal_players(self) -> List[RosterPlayer]:
        return [player for player in self._editable if player.is_illegal()]

    @property
    def starting_players(self) -> List[RosterPlayer]:
        return [player for player in self._editable if player.is_starting()]

    @property
    def reserve_players(self) -> List[RosterPlayer]:
        """Bench and inactive-list players."""

        return [player for player in self._editable if player.is_reserve()]

    @property
    def inactive_list_eligible_players(self) -> List[RosterPlayer]:
        return [player for player in self._editable if player.is_inactive_list_eligible()]

    @property
    def inactive_on_roster_players(self) -> List[RosterPlayer]:
        """Active-roster players who could be parked on an inactive list."""

        return [
            player
            for player in self._editable
            if player.is_active_roster() and player.is_inactive_list_eligible()
        ]

    @property
    def healthy_on_inactive_list(self) -> List[RosterPlayer]:
        return [player for player in self._editable if player.is_healthy() and player.is_inactive_list()]

    def players_at(self, position: str) -> List[RosterPlayer]:
        return [player for player in self._editable if player.selected_position == position]

    # -- position views ---------------------------------------------------

    @property
    def ledger(self) -> PositionLedger:
        return PositionLedger(self.capacities, (player.selected_position for player in self._players.values()))

    def _is_active_position(self, position: str) -> bool:
        return not self.rules.is_inactive(position)

    @property
    def unfilled_all_positions(self) -> List[str]:
        return self.ledger.unfilled()

    @property
    def unfilled_active_positions(self) -> List[str]:
        return self.ledger.unfilled(self._is_active_position)

    @property
    def unfilled_inactive_positions(self) -> List[str]:
        return self.ledger.unfilled(self.rules.is_inactive)

    @property
    def unfilled_starting_positions(self) -> List[str]:
        return self.ledger.unfilled(self.rules.is_starting)

    @property
    def overfilled_positions(self) -> List[str]:
        return self.ledger.overfilled(lambda position: not self.rules.is_bench(position))

    @property
    def num_empty_roster_spots(self) -> int:
        return self.ledger.total_remaining(self._is_active_position)

    @property
    def num_standard_roster_spots(self) -> int:
        return sum(
            capacity
            for position, capacity in self.capacities.items()
            if self._is_active_position(position)
        )

    @property
    def critical_positions(self) -> List[str]:
        """Starting positions with no more eligible players than slots."""

        result = []
        for position, capacity in self.capacities.items():
            if not self.rules.is_starting(position):
                continue
            eligible_count = sum(1 for player in self._players.values() if player.is_eligible_for(position))
            if eligible_count <= capacity:
                result.append(position)
        return result

    # -- snapshots --------------------------------------------------------

    def to_snapshot(self) -> TeamSnapshot:
        """The team as it stands now, with updated selected positions."""

        players = []
        for record in self.team.players:
            player = self._players.get(record.player_key)
            if player is None or player.selected_position == record.selected_position:
                players.append(record)
            else:
                players.append(record.model_copy(update={"selected_position": player.selected_position}))
        return self.team.model_copy(update={"players": players})
