"""Optimizer outputs consumed by the roster-update and transaction layers."""

from __future__ import annotations

from typing import Dict, List, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class LineupChanges(BaseModel):
    team_key: str
    coverage_type: str
    coverage_period: str
    new_player_positions: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.new_player_positions


class TransactionPlayer(BaseModel):
    player_key: str
    transaction_type: Literal["add", "drop"]
    is_inactive_list: bool = False

    model_config = ConfigDict(frozen=True)


class PlayerTransaction(BaseModel):
    team_key: str
    same_day_transactions: bool
    reason: str = ""
    players: List[TransactionPlayer]

    model_config = ConfigDict(frozen=True)
