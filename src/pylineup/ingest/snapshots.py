"""Helpers to load roster JSON and emit validated team snapshots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from pylineup.models import TeamSnapshot


logger = logging.getLogger(__name__)


def _normalize_capacities(raw: Any) -> Any:
    """Accept ``[{"position": "C", "count": 2}, ...]`` as well as a plain mapping."""

    if not isinstance(raw, list):
        return raw
    capacities: Dict[str, int] = {}
    for entry in raw:
        if not isinstance(entry, Mapping) or "position" not in entry:
            raise ValueError(f"roster position entry {entry!r} has no position")
        position = str(entry["position"])
        capacities[position] = capacities.get(position, 0) + int(entry.get("count", 1))
    return capacities


def _normalize_team(raw: Mapping[str, Any]) -> Dict[str, Any]:
    team = dict(raw)
    if "roster_positions" in team:
        team["roster_positions"] = _normalize_capacities(team["roster_positions"])
    players = []
    for player in team.get("players") or []:
        if isinstance(player, Mapping) and isinstance(player.get("eligible_positions"), str):
            player = dict(player)
            player["eligible_positions"] = [
                code.strip() for code in player["eligible_positions"].split(",") if code.strip()
            ]
        players.append(player)
    team["players"] = players
    return team


def parse_team_snapshots(payload: Any, *, source: str = "<payload>") -> List[TeamSnapshot]:
    """Validate one team, a list of teams, or ``{"teams": [...]}``."""

    if isinstance(payload, Mapping) and "teams" in payload:
        payload = payload["teams"]
    if isinstance(payload, Mapping):
        payload = [payload]
    if not isinstance(payload, list):
        raise ValueError(f"{source}: expected a team object or a list of teams")

    teams: List[TeamSnapshot] = []
    for index, raw in enumerate(payload):
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source}: team #{index} is not an object")
        try:
            teams.append(TeamSnapshot.model_validate(_normalize_team(raw)))
        except (ValidationError, ValueError, TypeError) as exc:
            raise ValueError(f"{source}: team #{index} is invalid: {exc}") from exc

    seen: Dict[str, int] = {}
    for team in teams:
        seen[team.team_key] = seen.get(team.team_key, 0) + 1
    for team_key, count in seen.items():
        if count > 1:
            logger.warning("%s: team %s appears %s times", source, team_key, count)
    return teams


def load_team_snapshots(path: Path) -> List[TeamSnapshot]:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path}: invalid JSON: {exc}") from exc
    teams = parse_team_snapshots(payload, source=str(path))
    logger.info("Loaded %s teams from %s", len(teams), path)
    return teams
