from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from fleet_scaledown.fleet.machine import Machine


@dataclass
class Fleet:
    machines: List[Machine]


@dataclass(frozen=True)
class ScaleDownScenario:
    replicas: int
    delete_policy: str
    fleet: Fleet
    evaluated_at: Optional[datetime] = None

    @property
    def n_to_delete(self) -> int:
        return max(0, len(self.fleet.machines) - self.replicas)
