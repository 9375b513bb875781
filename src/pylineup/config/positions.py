"""Position-class conventions shared by every league."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, FrozenSet, Iterable, Mapping


logger = logging.getLogger(__name__)

_INACTIVE_ENV = "PYLINEUP_INACTIVE_POSITIONS"
_LONG_TERM_ENV = "PYLINEUP_LONG_TERM_POSITIONS"
_HEALTHY_ENV = "PYLINEUP_HEALTHY_STATUSES"
_TOLERANCE_ENV = "PYLINEUP_SCORE_TOLERANCE"


@dataclass(frozen=True)
class PositionRules:
    """Which position codes are bench or inactive, and who counts as healthy.

    Every capacity key that is neither the bench code nor an inactive code
    is an active starting position.
    """

    bench_position: str = "BN"
    inactive_positions: FrozenSet[str] = frozenset({"IL", "IL+", "IR", "IR+", "NA"})
    long_term_inactive_positions: FrozenSet[str] = frozenset({"IL", "IR"})
    healthy_statuses: FrozenSet[str] = frozenset(
        {"Healthy", "Questionable", "Probable", "Game Time Decision"}
    )
    score_tolerance: float = 1e-12

    def is_inactive(self, position: str | None) -> bool:
        return position is not None and position in self.inactive_positions

    def is_long_term_inactive(self, position: str | None) -> bool:
        return position is not None and position in self.long_term_inactive_positions

    def is_bench(self, position: str | None) -> bool:
        return position == self.bench_position

    def is_starting(self, position: str | None) -> bool:
        return position is not None and not self.is_bench(position) and not self.is_inactive(position)

    def compare_scores(self, first: float, second: float) -> float:
        """Return ``first - second``, collapsing float noise to zero."""

        diff = first - second
        if abs(diff) < self.score_tolerance:
            return 0.0
        return diff


DEFAULT_RULES = PositionRules()

_SET_FIELDS = {"inactive_positions", "long_term_inactive_positions", "healthy_statuses"}


def _as_frozenset(value: Any) -> FrozenSet[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, Iterable):
        raise ValueError(f"expected a list of codes, got {value!r}")
    return frozenset(str(item).strip() for item in value if str(item).strip())


def load_rules(overrides: Mapping[str, Any] | None = None, *, base: PositionRules = DEFAULT_RULES) -> PositionRules:
    """Apply a mapping of field overrides on top of ``base``."""

    if not overrides:
        return base

    known = {field.name for field in fields(PositionRules)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown position rule keys: {', '.join(unknown)}")

    updates: dict[str, Any] = {}
    for key, value in overrides.items():
        if key in _SET_FIELDS:
            updates[key] = _as_frozenset(value)
        elif key == "score_tolerance":
            updates[key] = float(value)
        else:
            updates[key] = str(value).strip()

    rules = replace(base, **updates)
    if rules.bench_position in rules.inactive_positions:
        raise ValueError(f"bench position {rules.bench_position!r} cannot also be an inactive position")
    if not rules.long_term_inactive_positions <= rules.inactive_positions:
        extra = sorted(rules.long_term_inactive_positions - rules.inactive_positions)
        raise ValueError(f"long-term positions must be inactive positions: {', '.join(extra)}")
    return rules


def _env_codes(name: str) -> FrozenSet[str] | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    codes = _as_frozenset(raw)
    if not codes:
        logger.warning("Empty position list for %s; using default", name)
        return None
    return codes


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default", name, raw)
        return None
    if value < 0:
        logger.warning("Negative value for %s: %s; using default", name, raw)
        return None
    return value


def rules_from_env(base: PositionRules = DEFAULT_RULES) -> PositionRules:
    """Build rules from ``PYLINEUP_*`` environment variables."""

    overrides: dict[str, Any] = {}
    inactive = _env_codes(_INACTIVE_ENV)
    if inactive is not None:
        overrides["inactive_positions"] = inactive
    long_term = _env_codes(_LONG_TERM_ENV)
    if long_term is not None:
        overrides["long_term_inactive_positions"] = long_term
    elif inactive is not None:
        overrides["long_term_inactive_positions"] = base.long_term_inactive_positions & inactive
    healthy = _env_codes(_HEALTHY_ENV)
    if healthy is not None:
        overrides["healthy_statuses"] = healthy
    tolerance = _env_float(_TOLERANCE_ENV)
    if tolerance is not None:
        overrides["score_tolerance"] = tolerance

    try:
        return load_rules(overrides, base=base)
    except ValueError as exc:
        logger.warning("Ignoring position rule environment overrides: %s", exc)
        return base
