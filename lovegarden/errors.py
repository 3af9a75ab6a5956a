"""Error types for the garden engine.

Expected, recoverable outcomes (a placement that overlaps, watering during the
cooldown, not enough coins) are never raised. They come back as a `Problem`
inside the result object. Exceptions are reserved for programming defects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Optional


class GardenError(Exception):
    """Base class for engine exceptions."""


class UnknownPlantType(GardenError):
    """A plant type has no category mapping (raised only in strict mode)."""

    def __init__(self, plant_type: str) -> None:
        super().__init__(f"No category mapping for plant type: {plant_type!r}")
        self.plant_type = plant_type


class ProblemKind(Enum):
    INVALID_PLACEMENT = "invalid_placement"
    ACTION_BLOCKED = "action_blocked"
    INSUFFICIENT_FUNDS = "insufficient_funds"


# Reason strings shown to users
REASON_TOO_CLOSE = "too close to existing object"
REASON_OUT_OF_BOUNDS = "out of bounds"
REASON_COOLDOWN = "watering is cooling down"
REASON_WILTED = "garden is wilted"
REASON_NOT_WILTED = "garden is not wilted"
REASON_NO_WATER = "not enough water drops"
REASON_NO_COINS = "not enough coins"


@dataclass(frozen=True)
class Problem:
    """A structured, expected failure.

    `required` is the amount of currency the action needs (for
    INSUFFICIENT_FUNDS). `retry_after` is how long until a cooldown ends.
    """

    kind: ProblemKind
    reason: str
    required: Optional[int] = None
    retry_after: Optional[timedelta] = None

    @classmethod
    def invalid_placement(cls, reason: str) -> "Problem":
        return cls(ProblemKind.INVALID_PLACEMENT, reason)

    @classmethod
    def blocked(cls, reason: str, retry_after: Optional[timedelta] = None) -> "Problem":
        return cls(ProblemKind.ACTION_BLOCKED, reason, retry_after=retry_after)

    @classmethod
    def insufficient(cls, reason: str, required: int) -> "Problem":
        return cls(ProblemKind.INSUFFICIENT_FUNDS, reason, required=required)
