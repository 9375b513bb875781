"""Command-line interface for optimizing roster lineups from JSON snapshots."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

from pylineup.config import rules_from_env
from pylineup.config_loader import RulesProfile
from pylineup.ingest import load_team_snapshots
from pylineup.optimizer import BatchOutcome, optimize_teams


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Optimize fantasy roster lineups")
    parser.add_argument("rosters", type=Path, help="Path to a roster JSON file (one team, a list, or {'teams': [...]})")
    parser.add_argument("--output", type=Path, default=None, help="Write results as a JSON array to this path")
    parser.add_argument(
        "--no-drops",
        dest="drops",
        action="store_false",
        help="Do not queue drop transactions for healthy inactive-list players",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (defaults to PYLINEUP_WORKERS or 1)",
    )
    parser.add_argument("--rules", type=Path, default=None, help="Position rules profile JSON")
    parser.add_argument("--verbose", action="store_true", help="Log every optimizer step at DEBUG")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (e.g., INFO, DEBUG)")
    return parser.parse_args(argv)


def _outcome_payload(outcome: BatchOutcome) -> Dict[str, Any]:
    if outcome.result is None:
        return {"team_key": outcome.team_key, "error": outcome.error}
    result = outcome.result
    return {
        "team_key": outcome.team_key,
        "lineup_changes": result.lineup_changes.model_dump(mode="json"),
        "transactions": [transaction.model_dump(mode="json") for transaction in result.transactions],
        "verification": {
            "ok": result.report.ok,
            "violations": [
                {"check": v.check, "message": v.message, "player_keys": list(v.player_keys)}
                for v in result.report.violations
            ],
        },
    }


def _summary_line(outcome: BatchOutcome) -> str:
    if outcome.result is None:
        return f"{outcome.team_key}: failed ({outcome.error})"
    result = outcome.result
    changes = result.lineup_changes.new_player_positions
    moves = ", ".join(f"{key}->{position}" for key, position in sorted(changes.items())) or "no changes"
    line = f"{outcome.team_key}: {moves}"
    if result.transactions:
        dropped = [p.player_key for t in result.transactions for p in t.players if p.transaction_type == "drop"]
        line += f"; drop {', '.join(dropped)}"
    if not result.report.ok:
        line += f"; {len(result.report.violations)} check(s) failed"
    return line


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    if args.verbose:
        logging.getLogger("pylineup").setLevel(logging.DEBUG)

    rules = rules_from_env()
    if args.rules:
        try:
            rules = RulesProfile.load(args.rules).to_rules()
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Could not load rules profile {args.rules}: {exc}") from exc

    try:
        teams = load_team_snapshots(args.rosters)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Could not load rosters: {exc}") from exc

    outcomes = optimize_teams(
        teams,
        rules,
        generate_drops=args.drops,
        parallel_jobs=args.workers,
        verbose=args.verbose,
    )

    for outcome in outcomes:
        print(_summary_line(outcome))

    if args.output:
        payload = [_outcome_payload(outcome) for outcome in outcomes]
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote {len(payload)} results to {args.output}")

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    if failed:
        raise SystemExit(f"{failed} of {len(outcomes)} teams failed")


if __name__ == "__main__":
    main()
