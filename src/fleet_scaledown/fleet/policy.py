from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .priority import (
    DeletePriorityFunc,
    newest_delete_priority,
    oldest_delete_priority,
    random_delete_priority,
)

logger = logging.getLogger(__name__)


class DeletePolicy(str, Enum):
    RANDOM = "Random"
    NEWEST = "Newest"
    OLDEST = "Oldest"


class UnsupportedDeletePolicyError(ValueError):
    """Raised when a configured delete policy name is not recognized."""

    def __init__(self, policy: str) -> None:
        self.policy = policy
        super().__init__(
            f"Unsupported delete policy {policy}. Must be one of 'Random', 'Newest', or 'Oldest'"
        )


def parse_delete_policy(name: Optional[str]) -> DeletePolicy:
    """Empty or missing name defaults to Random. Matching is case sensitive."""
    if not name:
        return DeletePolicy.RANDOM
    for policy in DeletePolicy:
        if policy.value == name:
            return policy
    raise UnsupportedDeletePolicyError(name)


def resolve_delete_priority_func(name: Optional[str]) -> DeletePriorityFunc:
    policy = parse_delete_policy(name)
    logger.debug("delete_policy.resolved", extra={"configured": name, "policy": policy.value})

    if policy is DeletePolicy.NEWEST:
        return newest_delete_priority
    if policy is DeletePolicy.OLDEST:
        return oldest_delete_priority
    return random_delete_priority
