from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

import numpy as np

from .machine import Machine
from .priority import DeletePriorityFunc, utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedMachine:
    rank: int          # 0 = deleted first
    priority: float
    machine: Machine


def rank_machines(
    machines: Sequence[Machine],
    priority_func: DeletePriorityFunc,
    now: Optional[datetime] = None,
) -> List[RankedMachine]:
    """
    Scores every machine once against a single `now` and orders them
    by priority (high to low), then by name (ascending).

    The name key makes the order independent of the input order.
    """
    now = utcnow() if now is None else now
    machines = list(machines)

    scores = np.fromiter(
        (priority_func(m, now) for m in machines), dtype=float, count=len(machines)
    )
    names = np.array([m.name for m in machines], dtype=str)

    # lexsort: last key is the primary one
    order = np.lexsort((names, -scores))

    return [
        RankedMachine(rank=r, priority=float(scores[i]), machine=machines[i])
        for r, i in enumerate(order)
    ]


def get_machines_to_delete_prioritized(
    machines: Sequence[Machine],
    diff: int,
    priority_func: DeletePriorityFunc,
    now: Optional[datetime] = None,
) -> List[Machine]:
    """
    Picks `diff` machines to remove:
    - diff >= len(machines): all of them
    - diff <= 0: none
    - otherwise the top `diff` of rank_machines()
    """
    if diff >= len(machines):
        return list(machines)
    if diff <= 0:
        return []

    ranked = rank_machines(machines, priority_func, now)
    selected = [r.machine for r in ranked[:diff]]

    logger.debug(
        "scale_down.machines_selected",
        extra={
            "candidates": len(machines),
            "diff": diff,
            "selected": [m.name for m in selected],
        },
    )
    return selected
