"""Lineup optimization engine."""

from .drops import PlayerTransactions, select_drop_candidate
from .ledger import PositionLedger
from .roster import Move, Roster, RosterPlayer
from .service import (
    BatchOutcome,
    LineupOptimizer,
    OptimizationResult,
    optimize_lineup,
    optimize_teams,
)
from .verifier import VerificationReport, Violation, verify_lineup

__all__ = [
    "BatchOutcome",
    "LineupOptimizer",
    "Move",
    "OptimizationResult",
    "PlayerTransactions",
    "PositionLedger",
    "Roster",
    "RosterPlayer",
    "VerificationReport",
    "Violation",
    "optimize_lineup",
    "optimize_teams",
    "select_drop_candidate",
    "verify_lineup",
]
