import logging
import random
from collections import Counter

import pytest

from pylineup.config import DEFAULT_RULES
from pylineup.optimizer import LineupOptimizer, optimize_lineup, optimize_teams
from pylineup.optimizer import service

from tests.helpers import make_player, make_team, positions_of


def _full_team(**extra):
    return make_team(
        [
            make_player("a", ["C"], "BN", 8.0),
            make_player("b", ["C", "LW"], "C", 6.0),
            make_player("c", ["LW", "RW"], "LW", 4.0),
            make_player("d", ["RW"], "RW", 7.0),
            make_player("e", ["LW"], "BN", 5.0),
            make_player("f", ["RW", "IR"], "IR", 1.0, injury_status="IR"),
        ],
        {"C": 1, "LW": 1, "RW": 1, "BN": 2, "IR": 1},
        **extra,
    )


def _healthy_on_ir_team(**extra):
    return make_team(
        [
            make_player("c1", ["C"], "C", 5.0, ownership=50.0),
            make_player("b1", ["C"], "BN", 4.0, ownership=20.0),
            make_player("h", ["C"], "IR", 3.0, ownership=30.0),
        ],
        {"C": 1, "BN": 1, "IR": 1},
        **extra,
    )


def _starting_total(team):
    return sum(p.start_score for p in team.players if DEFAULT_RULES.is_starting(p.selected_position))


def test_spare_slot_is_filled():
    team = make_team(
        [make_player("lw1", ["LW"], "LW", 5.0), make_player("c1", ["C"], "BN", 4.0)],
        {"C": 1, "LW": 1, "BN": 1},
    )

    result = optimize_lineup(team)

    assert result.lineup_changes.new_player_positions == {"c1": "C"}
    assert result.transactions == []
    assert result.report.ok


def test_better_bench_player_swaps_with_starter():
    team = make_team(
        [make_player("y", ["C"], "C", 3.0), make_player("x", ["C"], "BN", 5.0)],
        {"C": 1, "BN": 1},
    )

    result = optimize_lineup(team)

    assert result.lineup_changes.new_player_positions == {"x": "C", "y": "BN"}
    assert result.report.ok


def test_healthy_player_on_ir_without_room_is_flagged():
    result = optimize_lineup(_healthy_on_ir_team(), generate_drops=False)

    assert result.lineup_changes.is_empty
    assert result.transactions == []
    assert result.report.checks() == ["illegal_player"]
    assert result.report.violations[0].player_keys == ("h",)


def test_healthy_player_on_ir_forces_a_drop():
    result = optimize_lineup(_healthy_on_ir_team(same_day_transactions=False))

    assert result.lineup_changes.is_empty
    assert len(result.transactions) == 1
    transaction = result.transactions[0]
    assert [(p.player_key, p.transaction_type) for p in transaction.players] == [("b1", "drop")]
    assert transaction.same_day_transactions is False
    assert "H coming back from injury" in transaction.reason


def test_drops_respect_team_setting():
    result = optimize_lineup(_healthy_on_ir_team(allow_dropping=False))

    assert result.transactions == []


def test_full_run_changes_and_properties():
    team = _full_team()

    result = optimize_lineup(team)
    changes = result.lineup_changes.new_player_positions

    assert changes == {"a": "C", "b": "LW", "c": "BN"}
    assert result.report.ok
    # every changed player lands on an eligible position
    eligible = {p.player_key: set(p.eligible_positions) | {"BN"} for p in team.players}
    assert all(position in eligible[key] for key, position in changes.items())
    assert _starting_total(result.team_state) >= _starting_total(team)
    # the caller's snapshot is untouched
    assert positions_of(team)["a"] == "BN"


def test_rerun_on_optimized_state_is_a_no_op():
    first = optimize_lineup(_full_team())
    second = optimize_lineup(first.team_state)

    assert not first.lineup_changes.is_empty
    assert second.lineup_changes.is_empty
    assert second.transactions == []


def test_capacity_is_preserved_after_overfill_repair():
    team = make_team(
        [
            make_player("p1", ["C", "LW"], "C", 5.0),
            make_player("p2", ["C", "LW"], "C", 3.0),
            make_player("p3", ["LW"], "BN", 1.0),
        ],
        {"C": 1, "LW": 1, "BN": 2},
    )

    result = optimize_lineup(team)

    counts = {}
    for position in positions_of(result.team_state).values():
        counts[position] = counts.get(position, 0) + 1
    assert all(counts.get(pos, 0) <= cap for pos, cap in team.roster_positions.items())
    assert result.lineup_changes.new_player_positions == {"p2": "LW"}
    assert result.report.ok


def test_team_without_editable_players_is_a_no_op():
    team = make_team(
        [make_player("c1", ["C"], "BN", 5.0, is_editable=False)],
        {"C": 1, "BN": 1},
    )

    optimizer = LineupOptimizer(team)
    changes = optimizer.optimize_starting_lineup()

    assert changes.is_empty
    assert changes.team_key == team.team_key
    assert changes.coverage_period == "2026-10-17"


def test_verbose_run_traces_moves(caplog):
    team = make_team(
        [make_player("y", ["C"], "C", 3.0), make_player("x", ["C"], "BN", 5.0)],
        {"C": 1, "BN": 1},
    )

    with caplog.at_level(logging.DEBUG, logger="pylineup.optimizer"):
        optimize_lineup(team)
    assert "swapping" not in caplog.text

    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger="pylineup.optimizer"):
        optimize_lineup(team, verbose=True)
    assert "swapping X (BN) with Y (C)" in caplog.text


def test_optimize_teams_keeps_order_and_isolates_failures(monkeypatch):
    good = _full_team(team_key="good")
    bad = _full_team(team_key="bad")
    real = service.optimize_lineup

    def flaky(team, rules=None, **kwargs):
        if team.team_key == "bad":
            raise RuntimeError("boom")
        return real(team, rules, **kwargs)

    monkeypatch.setattr(service, "optimize_lineup", flaky)

    outcomes = optimize_teams([bad, good], parallel_jobs=1)

    assert [o.team_key for o in outcomes] == ["bad", "good"]
    assert outcomes[0].error == "boom"
    assert not outcomes[0].ok
    assert outcomes[1].result.lineup_changes.new_player_positions == {"a": "C", "b": "LW", "c": "BN"}


def test_optimize_teams_reads_worker_count_from_env(monkeypatch):
    monkeypatch.setenv("PYLINEUP_WORKERS", "many")
    assert service._default_workers() == 1
    monkeypatch.setenv("PYLINEUP_WORKERS", "0")
    assert service._default_workers() == 1
    monkeypatch.setenv("PYLINEUP_WORKERS", "3")
    assert service._default_workers() == 3


def test_optimize_teams_in_process_pool():
    teams = [_full_team(team_key=f"team-{i}") for i in range(3)]

    outcomes = optimize_teams(teams, parallel_jobs=2)

    assert [o.team_key for o in outcomes] == ["team-0", "team-1", "team-2"]
    assert all(o.ok for o in outcomes)
    assert all(o.result.lineup_changes.new_player_positions == {"a": "C", "b": "LW", "c": "BN"} for o in outcomes)


def test_empty_batch():
    assert optimize_teams([]) == []


@pytest.mark.parametrize("generate_drops", [True, False])
def test_injured_player_on_ir_is_left_alone(generate_drops):
    result = optimize_lineup(_full_team(), generate_drops=generate_drops)
    assert "f" not in result.lineup_changes.new_player_positions


def test_rerun_after_late_bench_promotion_is_a_no_op():
    team = make_team(
        [
            make_player("p0", ["LW", "RW"], "LW", 7.25),
            make_player("p1", ["IR", "LW", "RW"], "IR", 7.84),
            make_player("p2", ["D", "IR", "LW"], "LW", 8.7),
            make_player("p3", ["D"], "BN", 3.01),
            make_player("p4", ["IR", "LW", "RW"], "RW", 3.64),
        ],
        {"C": 2, "LW": 2, "RW": 1, "D": 1, "BN": 3, "IR": 1},
    )

    first = optimize_lineup(team)
    second = optimize_lineup(first.team_state)

    assert first.lineup_changes.new_player_positions == {"p1": "RW", "p2": "D", "p4": "LW"}
    assert first.report.ok
    assert second.lineup_changes.is_empty


_SKATER_POSITIONS = ["C", "LW", "RW", "D"]


def _random_legal_team(seed):
    rng = random.Random(seed)
    capacities = {
        "C": rng.randint(1, 2),
        "LW": rng.randint(1, 2),
        "RW": 1,
        "D": rng.randint(1, 2),
        "BN": rng.randint(1, 3),
        "IR": rng.randint(1, 2),
    }
    slots = [position for position, count in capacities.items() for _ in range(count)]
    rng.shuffle(slots)

    players = []
    for index, slot in enumerate(slots[: rng.randint(3, len(slots))]):
        eligible = rng.sample(_SKATER_POSITIONS, rng.randint(1, 2))
        if slot in _SKATER_POSITIONS and slot not in eligible:
            eligible.append(slot)
        if slot == "IR" or rng.random() < 0.3:
            eligible.append("IR")
        players.append(
            make_player(
                f"p{index}",
                eligible,
                slot,
                round(rng.uniform(0.0, 10.0), 2),
                injury_status="IR" if slot == "IR" else "Healthy",
            )
        )
    return make_team(players, capacities, team_key=f"seed-{seed}")


@pytest.mark.parametrize("seed", range(150))
def test_generated_rosters_keep_lineup_properties(seed):
    team = _random_legal_team(seed)

    first = optimize_lineup(team)
    state = first.team_state

    counts = Counter(positions_of(state).values())
    assert all(counts[position] <= capacity for position, capacity in team.roster_positions.items())
    assert all(p.selected_position in set(p.eligible_positions) | {"BN"} for p in state.players)
    assert _starting_total(state) >= _starting_total(team) - 1e-9
    assert first.transactions == []

    second = optimize_lineup(state)
    assert second.lineup_changes.is_empty
    assert second.transactions == []
