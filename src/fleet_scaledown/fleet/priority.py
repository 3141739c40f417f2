from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from .health import is_machine_healthy
from .machine import Machine

# Deletion priority tiers, higher is deleted first.
MUST_DELETE = 100.0
SHOULD_DELETE = 75.0
BETTER_DELETE = 50.0
COULD_DELETE = 20.0
MUST_NOT_DELETE = 0.0

SECONDS_PER_TEN_DAYS = 864000.0

# Largest healthy score, strictly below the unhealthy tier.
MAX_AGE_SCORE = math.nextafter(BETTER_DELETE, MUST_NOT_DELETE)


class DeletePriorityFunc(Protocol):
    def __call__(self, machine: Machine, now: Optional[datetime] = None) -> float: ...


TailScorer = Callable[[Machine, datetime], float]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def machine_age_seconds(machine: Machine, now: datetime) -> Optional[float]:
    """Age at `now`, or None when the creation time is unset."""
    if machine.creation_timestamp is None:
        return None
    return (_as_utc(now) - _as_utc(machine.creation_timestamp)).total_seconds()


def oldest_age_score(machine: Machine, now: datetime) -> float:
    """
    Maps machine age onto [0, BETTER_DELETE) with an exponential saturation:
        score = BETTER_DELETE * (1 - exp(-age / 10 days))

    Unset creation time or negative age (clock skew) scores MUST_NOT_DELETE.
    Very old machines are capped at MAX_AGE_SCORE so they never tie with
    unhealthy ones.
    """
    age = machine_age_seconds(machine, now)
    if age is None or age < 0:
        return MUST_NOT_DELETE
    score = BETTER_DELETE * (1.0 - math.exp(-age / SECONDS_PER_TEN_DAYS))
    # 1 - exp() rounds to exactly 1.0 past about a year of age
    return min(score, MAX_AGE_SCORE)


def newest_age_score(machine: Machine, now: datetime) -> float:
    return BETTER_DELETE - oldest_age_score(machine, now)


def flat_score(machine: Machine, now: datetime) -> float:
    return COULD_DELETE


def make_delete_priority_func(tail: TailScorer) -> DeletePriorityFunc:
    """
    Builds a priority function sharing the leading tier checks:
      1. deletion already requested -> MUST_DELETE
      2. delete-machine annotation   -> SHOULD_DELETE
      3. unhealthy                   -> BETTER_DELETE
    Healthy machines are scored by `tail`.
    """

    def priority(machine: Machine, now: Optional[datetime] = None) -> float:
        if machine.deletion_requested:
            return MUST_DELETE
        if machine.force_delete_marker:
            return SHOULD_DELETE
        if not is_machine_healthy(machine):
            return BETTER_DELETE
        return tail(machine, utcnow() if now is None else now)

    priority.__name__ = f"delete_priority_{tail.__name__}"
    return priority


oldest_delete_priority = make_delete_priority_func(oldest_age_score)
newest_delete_priority = make_delete_priority_func(newest_age_score)
random_delete_priority = make_delete_priority_func(flat_score)
