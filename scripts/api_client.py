"""Lightweight REST client for the pylineup API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def load_payload(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid roster JSON in {path}: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pylineup REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("rosters", type=Path, nargs="?", help="Roster JSON (one team, a list, or {'teams': [...]})")
    parser.add_argument("--no-drops", action="store_true", help="Ask the API not to queue drop transactions")
    parser.add_argument("--health", action="store_true", help="Check the API health endpoint and exit")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.health:
            resp = client.get("/health")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        if args.rosters is None:
            raise SystemExit("a roster file is required unless using --health")

        payload = load_payload(args.rosters)
        if isinstance(payload, dict) and "teams" in payload:
            payload = payload["teams"]
        params = {"drops": "false" if args.no_drops else "true"}

        if isinstance(payload, list):
            resp = client.post("/optimize/batch", json=payload, params=params)
        else:
            resp = client.post("/optimize", json=payload, params=params)
        if resp.status_code in (400, 422):
            raise SystemExit(f"API rejected the rosters: {resp.text}")
        resp.raise_for_status()
        body = resp.json()

        results = body["results"] if "results" in body else [body]
        for result in results:
            changes = result["lineup_changes"]["new_player_positions"]
            print(f"{result['team_key']}: {len(changes)} changes, {len(result['transactions'])} transactions")
            print(json.dumps(changes, indent=2))
            if not result["verification"]["ok"]:
                print("Verification:", json.dumps(result["verification"]["violations"], indent=2))
        for failure in body.get("failures", []):
            print(f"{failure['team_key']}: failed ({failure['error']})")


if __name__ == "__main__":
    main()
