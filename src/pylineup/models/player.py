"""Canonical player models shared across ingestion and optimizer layers."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class PlayerRecord(BaseModel):
    """Rostered player as delivered by the upstream roster feed.

    ``start_score`` and ``ownership_score`` are computed upstream and are
    treated as opaque comparable floats by the optimizer.
    """

    player_key: str = Field(..., min_length=1)
    player_name: str = ""
    eligible_positions: List[str] = Field(default_factory=list)
    selected_position: Optional[str] = None
    is_editable: bool = True
    is_undroppable: bool = False
    is_playing: bool = True
    injury_status: str = "Healthy"
    percent_owned: float = 0.0
    start_score: float = 0.0
    ownership_score: float = 0.0

    model_config = ConfigDict(frozen=True, extra="ignore")
