from __future__ import annotations

from typing import List

from fleet_scaledown.fleet.machine import Machine
from fleet_scaledown.fleet.policy import resolve_delete_priority_func
from fleet_scaledown.fleet.selection import get_machines_to_delete_prioritized
from fleet_scaledown.preprocessing.schema import ScaleDownScenario


def select_machines_for_scale_down(scenario: ScaleDownScenario) -> List[Machine]:
    """Resolve the delete policy once, then pick scenario.n_to_delete machines."""
    priority_func = resolve_delete_priority_func(scenario.delete_policy)
    return get_machines_to_delete_prioritized(
        scenario.fleet.machines,
        scenario.n_to_delete,
        priority_func,
        now=scenario.evaluated_at,
    )
