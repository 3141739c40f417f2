from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional, Tuple

DELETE_MACHINE_ANNOTATION = "cluster.x-k8s.io/delete-machine"

NODE_HEALTHY_CONDITION = "NodeHealthy"
HEALTH_CHECK_SUCCEEDED_CONDITION = "HealthCheckSucceeded"

CONDITION_TRUE = "True"
CONDITION_FALSE = "False"
CONDITION_UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Condition:
    """Externally reported health signal attached to a machine."""
    type: str
    status: str                      # True | False | Unknown
    reason: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class Machine:
    """Snapshot of one fleet member at decision time."""
    name: str
    creation_timestamp: Optional[datetime] = None
    deletion_timestamp: Optional[datetime] = None
    annotations: Mapping[str, str] = field(default_factory=dict)
    node_ref: Optional[str] = None
    failure_reason: Optional[str] = None
    failure_message: Optional[str] = None
    conditions: Tuple[Condition, ...] = ()

    @property
    def deletion_requested(self) -> bool:
        return self.deletion_timestamp is not None

    @property
    def force_delete_marker(self) -> bool:
        # presence is enough, the value is ignored
        return DELETE_MACHINE_ANNOTATION in self.annotations

    @property
    def has_node_binding(self) -> bool:
        return self.node_ref is not None

    @property
    def has_reported_failure(self) -> bool:
        return self.failure_reason is not None or self.failure_message is not None

    def get_condition(self, condition_type: str) -> Optional[Condition]:
        for c in self.conditions:
            if c.type == condition_type:
                return c
        return None
