"""Run the lineup optimizer for one team or a batch of teams."""

from __future__ import annotations

import logging
import multiprocessing as mp
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pylineup.config import DEFAULT_RULES, PositionRules
from pylineup.models import LineupChanges, PlayerTransaction, TeamSnapshot

from .drops import DropSelector, PlayerTransactions
from .reserve import ReserveOptimizer
from .resolver import IllegalPositionResolver
from .roster import Roster
from .swaps import RosterMoves
from .verifier import VerificationReport, verify_lineup


logger = logging.getLogger(__name__)

_WORKERS_ENV = "PYLINEUP_WORKERS"
_WORKERS_DEFAULT = 1


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _default_workers() -> int:
    return _env_int(_WORKERS_ENV, _WORKERS_DEFAULT, min_value=1)


class LineupOptimizer:
    """Optimizes one team's lineup.

    The team snapshot is never modified; the optimizer works on its own
    :class:`Roster` built from it. Run :meth:`optimize_starting_lineup`
    once, then read the results from :meth:`lineup_changes`,
    :meth:`player_transactions`, :meth:`verify` and
    :meth:`current_team_state`.
    """

    def __init__(self, team: TeamSnapshot, rules: PositionRules | None = None, *, verbose: bool = False):
        self.team = team
        self.rules = rules or DEFAULT_RULES
        self.verbose = verbose
        self.roster = Roster(team, self.rules)
        self.moves = RosterMoves(self.roster, verbose=verbose)
        self.resolver = IllegalPositionResolver(self.roster, self.moves)
        self.reserve = ReserveOptimizer(self.roster, self.moves)
        self.transactions = PlayerTransactions()
        self.drops = DropSelector(self.roster, self.transactions)
        self._original_positions = self.roster.positions()

    def optimize_starting_lineup(self, *, generate_drops: bool = True) -> LineupChanges:
        if not self.roster.editable_players:
            logger.info("Team %s has no editable players; nothing to optimize", self.team.team_key)
            return self.lineup_changes()

        self.resolver.resolve_overfilled_positions()
        self.resolver.resolve_all()
        if generate_drops:
            self.generate_drop_transactions()
        self.reserve.run()

        changes = self.lineup_changes()
        if self.verbose:
            logger.debug(
                "Team %s: %s moves recorded, %s net changes",
                self.team.team_key,
                len(self.roster.moves),
                len(changes.new_player_positions),
            )
        return changes

    def generate_drop_transactions(self) -> List[PlayerTransaction]:
        """Queue drops for healthy inactive-list players that cannot be moved."""

        if not self.team.allow_dropping:
            logger.info("Dropping is disabled for team %s", self.team.team_key)
            return []
        before = len(self.transactions)
        self.resolver.evict_healthy_from_inactive_list(self.drops.drop_for)
        return self.transactions.transactions[before:]

    def lineup_changes(self) -> LineupChanges:
        new_positions: Dict[str, str] = {}
        for player_key, position in self.roster.positions().items():
            if position is not None and position != self._original_positions.get(player_key):
                new_positions[player_key] = position
        return LineupChanges(
            team_key=self.team.team_key,
            coverage_type=self.team.coverage_type,
            coverage_period=self.team.coverage_period,
            new_player_positions=new_positions,
        )

    def player_transactions(self) -> List[PlayerTransaction]:
        return self.transactions.transactions

    def verify(self) -> VerificationReport:
        return verify_lineup(self.roster, self.lineup_changes().new_player_positions)

    def current_team_state(self) -> TeamSnapshot:
        return self.roster.to_snapshot()


@dataclass(frozen=True)
class OptimizationResult:
    lineup_changes: LineupChanges
    transactions: List[PlayerTransaction]
    report: VerificationReport
    team_state: TeamSnapshot

    @property
    def team_key(self) -> str:
        return self.lineup_changes.team_key


@dataclass(frozen=True)
class BatchOutcome:
    team_key: str
    result: Optional[OptimizationResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def optimize_lineup(
    team: TeamSnapshot,
    rules: PositionRules | None = None,
    *,
    generate_drops: bool = True,
    verbose: bool = False,
) -> OptimizationResult:
    optimizer = LineupOptimizer(team, rules, verbose=verbose)
    changes = optimizer.optimize_starting_lineup(generate_drops=generate_drops)
    return OptimizationResult(
        lineup_changes=changes,
        transactions=optimizer.player_transactions(),
        report=optimizer.verify(),
        team_state=optimizer.current_team_state(),
    )


def _optimize_team(job: Tuple[TeamSnapshot, PositionRules | None, bool, bool]) -> BatchOutcome:
    team, rules, generate_drops, verbose = job
    try:
        result = optimize_lineup(team, rules, generate_drops=generate_drops, verbose=verbose)
    except Exception as exc:
        logger.exception("Optimization failed for team %s", team.team_key)
        return BatchOutcome(team_key=team.team_key, error=str(exc) or exc.__class__.__name__)
    logger.info(
        "Team %s: %s lineup changes, %s transactions, %s violations",
        team.team_key,
        len(result.lineup_changes.new_player_positions),
        len(result.transactions),
        len(result.report.violations),
    )
    return BatchOutcome(team_key=team.team_key, result=result)


def optimize_teams(
    teams: Sequence[TeamSnapshot],
    rules: PositionRules | None = None,
    *,
    generate_drops: bool = True,
    parallel_jobs: int | None = None,
    verbose: bool = False,
) -> List[BatchOutcome]:
    """Optimize each team independently; outcomes keep the input order.

    With more than one worker the teams are spread over a spawn-context
    process pool. ``parallel_jobs`` defaults to ``PYLINEUP_WORKERS``.
    """

    if not teams:
        return []
    jobs = [(team, rules, generate_drops, verbose) for team in teams]
    workers = parallel_jobs if parallel_jobs is not None else _default_workers()
    workers = max(1, min(workers, len(jobs)))

    if workers == 1:
        return [_optimize_team(job) for job in jobs]

    logger.info("Optimizing %s teams across %s workers", len(jobs), workers)
    ctx = mp.get_context("spawn")
    with ctx.Pool(processes=workers) as pool:
        return pool.map(_optimize_team, jobs)
