from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from fleet_scaledown.fleet.machine import DELETE_MACHINE_ANNOTATION, Machine
from fleet_scaledown.fleet.priority import (
    MUST_DELETE,
    newest_delete_priority,
    oldest_delete_priority,
    random_delete_priority,
)
from fleet_scaledown.fleet.selection import get_machines_to_delete_prioritized, rank_machines

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _healthy(name: str, age_days: float) -> Machine:
    return Machine(name=name, creation_timestamp=NOW - timedelta(days=age_days), node_ref=f"node-{name}")


def _names(machines) -> list[str]:
    return [m.name for m in machines]


def _mixed_fleet() -> list[Machine]:
    return [
        _healthy("a", 20),
        Machine(name="b", creation_timestamp=NOW - timedelta(days=2)),  # no node yet
        Machine(
            name="c",
            creation_timestamp=NOW - timedelta(days=3),
            annotations={DELETE_MACHINE_ANNOTATION: ""},
            node_ref="node-c",
        ),
        _healthy("d", 1),
    ]


@pytest.mark.parametrize("diff", [4, 5, 100])
def test_diff_covering_fleet_returns_everything(diff) -> None:
    fleet = _mixed_fleet()
    selected = get_machines_to_delete_prioritized(fleet, diff, oldest_delete_priority, NOW)
    assert sorted(_names(selected)) == ["a", "b", "c", "d"]
    assert len(selected) == len(fleet)


@pytest.mark.parametrize("diff", [0, -1])
def test_non_positive_diff_returns_nothing(diff) -> None:
    assert get_machines_to_delete_prioritized(_mixed_fleet(), diff, oldest_delete_priority, NOW) == []


def test_empty_fleet() -> None:
    assert get_machines_to_delete_prioritized([], 3, random_delete_priority, NOW) == []
    assert rank_machines([], random_delete_priority, NOW) == []


def test_oldest_prefers_forced_then_unhealthy() -> None:
    selected = get_machines_to_delete_prioritized(_mixed_fleet(), 2, oldest_delete_priority, NOW)
    assert _names(selected) == ["c", "b"]


def test_newest_picks_youngest_healthy() -> None:
    fleet = [_healthy("x", 5), _healthy("y", 3), _healthy("z", 1)]
    selected = get_machines_to_delete_prioritized(fleet, 1, newest_delete_priority, NOW)
    assert _names(selected) == ["z"]


def test_oldest_picks_oldest_healthy() -> None:
    fleet = [_healthy("x", 5), _healthy("y", 3), _healthy("z", 1)]
    selected = get_machines_to_delete_prioritized(fleet, 2, oldest_delete_priority, NOW)
    assert _names(selected) == ["x", "y"]


def test_deleting_machines_always_selected_first() -> None:
    fleet = _mixed_fleet() + [
        Machine(name="zz-deleting", deletion_timestamp=NOW, node_ref="node-zz"),
    ]
    for priority in (oldest_delete_priority, newest_delete_priority, random_delete_priority):
        selected = get_machines_to_delete_prioritized(fleet, 1, priority, NOW)
        assert _names(selected) == ["zz-deleting"]


def test_random_policy_breaks_ties_by_name() -> None:
    fleet = [_healthy("m-3", 1), _healthy("m-1", 9), _healthy("m-2", 4)]
    selected = get_machines_to_delete_prioritized(fleet, 2, random_delete_priority, NOW)
    assert _names(selected) == ["m-1", "m-2"]


def test_selection_independent_of_input_order() -> None:
    fleet = _mixed_fleet() + [_healthy("e", 1), _healthy("f", 20)]
    results = {
        tuple(_names(get_machines_to_delete_prioritized(list(p), 3, random_delete_priority, NOW)))
        for p in itertools.permutations(fleet)
    }
    assert results == {("c", "b", "a")}


def test_repeated_selection_is_identical() -> None:
    fleet = [_healthy(f"m-{i}", i % 3) for i in range(10)]
    first = get_machines_to_delete_prioritized(fleet, 4, oldest_delete_priority, NOW)
    second = get_machines_to_delete_prioritized(fleet, 4, oldest_delete_priority, NOW)
    assert _names(first) == _names(second)


def test_input_is_not_mutated_and_results_reference_members() -> None:
    fleet = _mixed_fleet()
    before = list(fleet)
    selected = get_machines_to_delete_prioritized(fleet, 2, oldest_delete_priority, NOW)

    assert fleet == before
    assert all(any(s is m for m in before) for s in selected)


def test_rank_machines_reports_scores() -> None:
    fleet = _mixed_fleet() + [Machine(name="gone", deletion_timestamp=NOW)]
    ranked = rank_machines(fleet, oldest_delete_priority, NOW)

    assert [r.rank for r in ranked] == list(range(len(fleet)))
    assert ranked[0].machine.name == "gone"
    assert ranked[0].priority == MUST_DELETE
    assert [r.priority for r in ranked] == sorted((r.priority for r in ranked), reverse=True)


def test_unhealthy_beats_year_old_healthy_machine() -> None:
    fleet = [_healthy("a-old", 400), Machine(name="b-sick", creation_timestamp=NOW - timedelta(days=1))]
    selected = get_machines_to_delete_prioritized(fleet, 1, oldest_delete_priority, NOW)
    assert _names(selected) == ["b-sick"]
