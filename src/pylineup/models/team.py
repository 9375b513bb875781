"""Roster snapshot handed to the optimizer."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from .player import PlayerRecord


class TeamSnapshot(BaseModel):
    """One team's roster, position capacities and transaction settings."""

    team_key: str = Field(..., min_length=1)
    game_code: str = ""
    coverage_type: str = "date"
    coverage_period: str = ""
    weekly_deadline: str = ""
    edit_key: str = ""
    roster_positions: Dict[str, int]
    players: List[PlayerRecord] = Field(default_factory=list)
    same_day_transactions: Optional[bool] = None
    allow_dropping: bool = True

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("roster_positions")
    @classmethod
    def _capacities_not_negative(cls, value: Dict[str, int]) -> Dict[str, int]:
        negative = sorted(position for position, capacity in value.items() if capacity < 0)
        if negative:
            raise ValueError(f"negative capacity for positions: {', '.join(negative)}")
        return value

    @property
    def has_same_day_transactions(self) -> bool:
        """Whether add/drops made now take effect in the current period.

        Falls back to the provider convention when the feed carries no
        explicit flag: daily leagues whose edit key is the period on display.
        """

        if self.same_day_transactions is not None:
            return self.same_day_transactions
        return self.weekly_deadline != "1" and self.edit_key == self.coverage_period
