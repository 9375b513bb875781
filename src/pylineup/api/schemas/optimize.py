from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from pylineup.models import LineupChanges, PlayerTransaction
from pylineup.optimizer import OptimizationResult, VerificationReport


class ViolationResponse(BaseModel):
    check: str
    message: str
    player_keys: List[str] = Field(default_factory=list)


class VerificationResponse(BaseModel):
    ok: bool
    violations: List[ViolationResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: VerificationReport) -> "VerificationResponse":
        return cls(
            ok=report.ok,
            violations=[
                ViolationResponse(check=v.check, message=v.message, player_keys=list(v.player_keys))
                for v in report.violations
            ],
        )


class OptimizeResponse(BaseModel):
    team_key: str
    lineup_changes: LineupChanges
    transactions: List[PlayerTransaction]
    verification: VerificationResponse

    @classmethod
    def from_result(cls, result: OptimizationResult) -> "OptimizeResponse":
        return cls(
            team_key=result.team_key,
            lineup_changes=result.lineup_changes,
            transactions=result.transactions,
            verification=VerificationResponse.from_report(result.report),
        )


class BatchFailureResponse(BaseModel):
    team_key: str
    error: str


class OptimizeBatchResponse(BaseModel):
    results: List[OptimizeResponse]
    failures: List[BatchFailureResponse] = Field(default_factory=list)
    message: str | None = None
