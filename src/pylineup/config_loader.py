"""Persist and load position-rule profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pylineup.config import PositionRules, load_rules


@dataclass
class RulesProfile:
    overrides: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "RulesProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{path}: rules profile must be a JSON object")
        return cls(overrides=data.get("position_rules", {}))

    def save(self, path: Path) -> None:
        payload = {
            "position_rules": {
                key: sorted(value) if isinstance(value, (set, frozenset, list, tuple)) else value
                for key, value in self.overrides.items()
            },
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def to_rules(self) -> PositionRules:
        return load_rules(self.overrides)
