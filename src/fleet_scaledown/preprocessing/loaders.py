from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional

from fleet_scaledown.fleet.machine import Condition, Machine
from fleet_scaledown.preprocessing.schema import Fleet, ScaleDownScenario

logger = logging.getLogger(__name__)


def load_json(path: str | Path) -> dict:
    path = Path(path)
    with open(path, "r") as f:
        return json.load(f)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """RFC 3339 timestamp ("2024-01-02T03:04:05Z") or None."""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def load_condition(data: Mapping[str, Any]) -> Condition:
    return Condition(
        type=str(data["type"]),
        status=str(data["status"]),
        reason=data.get("reason"),
        message=data.get("message"),
    )


def load_machine(data: Mapping[str, Any]) -> Machine:
    """
    Build a Machine from a Kubernetes-like mapping:
        metadata: name, creationTimestamp, deletionTimestamp, annotations
        status:   nodeRef.name, failureReason, failureMessage, conditions[]
    """
    metadata = data.get("metadata") or {}
    status = data.get("status") or {}

    name = metadata.get("name")
    if not name:
        raise ValueError("machine is missing metadata.name")

    node_ref = status.get("nodeRef")
    if isinstance(node_ref, Mapping):
        node_ref = node_ref.get("name")

    return Machine(
        name=str(name),
        creation_timestamp=parse_timestamp(metadata.get("creationTimestamp")),
        deletion_timestamp=parse_timestamp(metadata.get("deletionTimestamp")),
        annotations=dict(metadata.get("annotations") or {}),
        node_ref=node_ref,
        failure_reason=status.get("failureReason"),
        failure_message=status.get("failureMessage"),
        conditions=tuple(load_condition(c) for c in status.get("conditions") or []),
    )


def load_fleet(data: Mapping[str, Any]) -> Fleet:
    machines: List[Machine] = []
    seen = set()

    for m in data.get("machines", []):
        machine = load_machine(m)

        # Names are the tie-break key, they must be unique
        if machine.name in seen:
            raise ValueError(f"Duplicate machine name {machine.name}")
        seen.add(machine.name)

        machines.append(machine)

    return Fleet(machines=machines)


def load_fleet_from_json(path: str | Path) -> Fleet:
    return load_fleet(load_json(path))


def load_scenario(path: str | Path) -> ScaleDownScenario:
    """
    Load scale-down scenario.
    Scenario JSON must contain:
        - fleet_file
        - replicas
    Optional:
        - delete_policy (default "", i.e. Random)
        - evaluated_at  (default: current time at selection)
    """
    path = Path(path)
    data = load_json(path)

    # Resolve fleet file relative to scenario file
    fleet_path = Path(data["fleet_file"])
    if not fleet_path.is_absolute():
        fleet_path = path.parent / fleet_path

    fleet = load_fleet_from_json(fleet_path)

    replicas = int(data["replicas"])
    if replicas < 0:
        raise ValueError("replicas must be >= 0")

    scenario = ScaleDownScenario(
        replicas=replicas,
        delete_policy=str(data.get("delete_policy") or ""),
        fleet=fleet,
        evaluated_at=parse_timestamp(data.get("evaluated_at")),
    )
    logger.info(
        "scenario.loaded",
        extra={"path": str(path), "machines": len(fleet.machines), "replicas": replicas},
    )
    return scenario
