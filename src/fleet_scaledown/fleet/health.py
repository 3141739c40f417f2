from __future__ import annotations

from .machine import (
    CONDITION_FALSE,
    HEALTH_CHECK_SUCCEEDED_CONDITION,
    NODE_HEALTHY_CONDITION,
    Machine,
)


def _condition_is_false(machine: Machine, condition_type: str) -> bool:
    c = machine.get_condition(condition_type)
    return c is not None and c.status == CONDITION_FALSE


def is_machine_healthy(machine: Machine) -> bool:
    """
    Health as seen by the deletion prioritizer:
    - no node binding yet -> unhealthy
    - failure reason or message reported -> unhealthy
    - NodeHealthy or HealthCheckSucceeded explicitly False -> unhealthy

    Unknown or missing conditions are not held against the machine.
    """
    if not machine.has_node_binding:
        return False
    if machine.has_reported_failure:
        return False
    if _condition_is_false(machine, NODE_HEALTHY_CONDITION):
        return False
    if _condition_is_false(machine, HEALTH_CHECK_SUCCEEDED_CONDITION):
        return False
    return True
