"""Small roster factories shared by the test modules."""

from __future__ import annotations

from typing import Dict, Iterable, List

from pylineup.models import PlayerRecord, TeamSnapshot
from pylineup.optimizer import Roster


def make_player(
    key: str,
    positions: Iterable[str],
    selected: str | None,
    score: float = 0.0,
    *,
    ownership: float | None = None,
    **extra,
) -> PlayerRecord:
    return PlayerRecord(
        player_key=key,
        player_name=key.upper(),
        eligible_positions=list(positions),
        selected_position=selected,
        start_score=score,
        ownership_score=score if ownership is None else ownership,
        **extra,
    )


def make_team(players: List[PlayerRecord], positions: Dict[str, int], **extra) -> TeamSnapshot:
    extra.setdefault("team_key", "nhl.l.1.t.1")
    extra.setdefault("coverage_period", "2026-10-17")
    return TeamSnapshot(roster_positions=positions, players=players, **extra)


def make_roster(players: List[PlayerRecord], positions: Dict[str, int], **extra) -> Roster:
    return Roster(make_team(players, positions, **extra))


def positions_of(team: TeamSnapshot) -> Dict[str, str | None]:
    return {player.player_key: player.selected_position for player in team.players}
