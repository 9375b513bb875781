"""Post-run lineup checks.

The verifier never changes the roster and never raises. Every violation is
logged at ERROR with the team key and the change set so an operator can
replay the run, and the collected violations are returned to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Tuple

from .roster import Roster


logger = logging.getLogger(__name__)

UNFILLED_STARTING_POSITION = "unfilled_starting_position"
OVERFILLED_POSITION = "overfilled_position"
ILLEGAL_CHANGE = "illegal_change"
SUBOPTIMAL_LINEUP = "suboptimal_lineup"
ILLEGAL_PLAYER = "illegal_player"


@dataclass(frozen=True)
class Violation:
    check: str
    message: str
    player_keys: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VerificationReport:
    team_key: str
    violations: List[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def checks(self) -> List[str]:
        return [violation.check for violation in self.violations]


def _unfilled_starting_positions(roster: Roster) -> List[Violation]:
    bench = [player for player in roster.reserve_players if player.is_active_roster()]
    violations = []
    for position in roster.unfilled_starting_positions:
        idle = [player.player_key for player in bench if player.is_eligible_for(position)]
        if idle:
            violations.append(
                Violation(
                    UNFILLED_STARTING_POSITION,
                    f"{position} is unfilled while eligible players sit on the bench",
                    tuple(idle),
                )
            )
    return violations


def _overfilled_positions(roster: Roster) -> List[Violation]:
    ledger = roster.ledger
    return [
        Violation(
            OVERFILLED_POSITION,
            f"{position} holds {ledger.filled(position)} players for {ledger.capacity(position)} slots",
        )
        for position in ledger.overfilled()
    ]


def _illegal_changes(roster: Roster, new_positions: Mapping[str, str]) -> List[Violation]:
    violations = []
    for player_key, position in new_positions.items():
        player = roster.get(player_key)
        if player is None or player.is_eligible_for(position):
            continue
        violations.append(
            Violation(ILLEGAL_CHANGE, f"{player.player_name} was moved to ineligible position {position}", (player_key,))
        )
    return violations


def _suboptimal_lineup(roster: Roster) -> List[Violation]:
    violations = []
    starters = roster.starting_players
    for reserve in roster.reserve_players:
        for starter in starters:
            if reserve.is_eligible_and_higher_score_than(starter):
                violations.append(
                    Violation(
                        SUBOPTIMAL_LINEUP,
                        f"{reserve.player_name} ({reserve.start_score}) outscores starter "
                        f"{starter.player_name} ({starter.start_score}) at {starter.selected_position}",
                        (reserve.player_key, starter.player_key),
                    )
                )
    return violations


def _illegal_players(roster: Roster) -> List[Violation]:
    return [
        Violation(
            ILLEGAL_PLAYER,
            f"{player.player_name} is still at ineligible position {player.selected_position}",
            (player.player_key,),
        )
        for player in roster.illegal_players
    ]


def verify_lineup(roster: Roster, new_positions: Mapping[str, str]) -> VerificationReport:
    """Inspect the roster's final state against the change set that produced it."""

    violations: List[Violation] = []
    violations.extend(_unfilled_starting_positions(roster))
    violations.extend(_overfilled_positions(roster))
    violations.extend(_illegal_changes(roster, new_positions))
    violations.extend(_suboptimal_lineup(roster))
    violations.extend(_illegal_players(roster))

    for violation in violations:
        logger.error(
            "Lineup check %s failed for team %s: %s (changes=%s)",
            violation.check,
            roster.team_key,
            violation.message,
            dict(new_positions),
        )
    return VerificationReport(team_key=roster.team_key, violations=violations)
