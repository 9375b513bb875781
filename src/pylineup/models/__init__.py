"""Pydantic records for roster snapshots and optimizer output."""

from .changes import LineupChanges, PlayerTransaction, TransactionPlayer
from .player import PlayerRecord
from .team import TeamSnapshot

__all__ = [
    "LineupChanges",
    "PlayerRecord",
    "PlayerTransaction",
    "TeamSnapshot",
    "TransactionPlayer",
]
