"""Input adapters that turn roster JSON into team snapshots."""

from .snapshots import load_team_snapshots, parse_team_snapshots

__all__ = [
    "load_team_snapshots",
    "parse_team_snapshots",
]
