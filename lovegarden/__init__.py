"""LoveGarden - the simulation engine behind a garden shared by two partners.

Pure, time-driven rules for:
- Growth stage of each planted flower (sapling / mature)
- Garden-wide health (fresh / wilting / wilted)
- Placement validation and automatic positioning
- Depth scale and stacking order shared by preview and final layout
- The watering ritual: cooldowns, streaks, harmony bonus and revival

Storage, sync and rendering live elsewhere; they hand snapshots in and
persist what comes back.
"""

from __future__ import annotations

import logging

from .config import GardenConfig
from .depth import Transform, depth_scale, transform, z_order
from .engine import EntityView, GardenEngine, PlacementOutcome
from .errors import GardenError, Problem, ProblemKind, UnknownPlantType
from .growth import category_for, resolve_growth_stage
from .health import GardenStatus, garden_status, resolve_health
from .placement import PlacementCheck, can_place, find_initial_position
from .state import (
    GrowthStage,
    Health,
    PlantCategory,
    PlantedDecor,
    PlantedFlower,
    PlantedLandmark,
    WateringRecord,
    WateringState,
)
from .tracker import ActionOutcome, RewardGrant, WateringEvent, revive, water, watering_state

# Library logging: callers decide where records go.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ActionOutcome",
    "EntityView",
    "GardenConfig",
    "GardenEngine",
    "GardenError",
    "GardenStatus",
    "GrowthStage",
    "Health",
    "PlacementCheck",
    "PlacementOutcome",
    "PlantCategory",
    "PlantedDecor",
    "PlantedFlower",
    "PlantedLandmark",
    "Problem",
    "ProblemKind",
    "RewardGrant",
    "Transform",
    "UnknownPlantType",
    "WateringEvent",
    "WateringRecord",
    "WateringState",
    "can_place",
    "category_for",
    "depth_scale",
    "find_initial_position",
    "garden_status",
    "resolve_growth_stage",
    "resolve_health",
    "revive",
    "transform",
    "water",
    "watering_state",
    "z_order",
]
