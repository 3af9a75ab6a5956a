"""Collision and placement validation.

Flowers and decor share one collision space; landmarks live on the horizon
layer and never collide with anything. Coordinates are the bottom-middle
point of an item (where it touches the ground).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import GardenConfig
from .errors import REASON_OUT_OF_BOUNDS, REASON_TOO_CLOSE, Problem
from .growth import category_for, resolve_growth_stage
from .state import GrowthStage, PlantedDecor, PlantedFlower, PlantedLandmark

logger = logging.getLogger(__name__)

_DEFAULT = GardenConfig.default()


@dataclass(frozen=True)
class PlacementCheck:
    """Result of validating one proposed position."""

    valid: bool
    reason: Optional[str] = None
    # Nearest item that blocked the placement, if any.
    blocker_id: Optional[str] = None

    @property
    def problem(self) -> Optional[Problem]:
        if self.valid:
            return None
        return Problem.invalid_placement(self.reason or REASON_TOO_CLOSE)


# ----------------------------------------------------------------------
# Radii
# ----------------------------------------------------------------------
def flower_radius(
    plant_type: str,
    config: Optional[GardenConfig] = None,
    stage: Optional[GrowthStage] = None,
) -> float:
    """Effective collision radius for a flower type.

    Base radius times the per-type override (or the category multiplier),
    reduced further for saplings.
    """

    config = config or _DEFAULT
    col = config.collision
    base = col.flower_radius.get(plant_type, col.default_flower_radius)
    multiplier = col.overrides.get(plant_type)
    if multiplier is None:
        category = category_for(plant_type, config.growth, strict=config.strict)
        multiplier = col.category_multipliers.get(category.value, 1.0)
    radius = base * multiplier
    if stage is GrowthStage.SAPLING:
        radius *= col.sapling_factor
    return radius


def decor_radius(decor_type: str, config: Optional[GardenConfig] = None) -> float:
    config = config or _DEFAULT
    return config.collision.decor_radius.get(decor_type, config.collision.default_decor_radius)


def collision_radius(
    item_type: str,
    is_decor: bool = False,
    config: Optional[GardenConfig] = None,
    stage: Optional[GrowthStage] = None,
) -> float:
    if is_decor:
        return decor_radius(item_type, config)
    return flower_radius(item_type, config, stage)


def _existing_flower_radius(
    flower: PlantedFlower, config: GardenConfig, now: Optional[datetime]
) -> float:
    stage = None
    if now is not None:
        category = category_for(flower.type, config.growth, strict=config.strict)
        stage = resolve_growth_stage(category, flower.planted_at, now, config.growth)
    return flower_radius(flower.type, config, stage)


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------
def in_bounds(x: float, y: float, config: Optional[GardenConfig] = None) -> bool:
    config = config or _DEFAULT
    if not (math.isfinite(x) and math.isfinite(y)):
        return False
    return 0.0 <= x <= config.collision.screen_width and 0.0 <= y <= config.depth.max_depth


def can_place(
    existing_flowers: Iterable[PlantedFlower],
    existing_decor: Iterable[PlantedDecor],
    candidate_type: str,
    x: float,
    y: float,
    config: Optional[GardenConfig] = None,
    *,
    candidate_is_decor: bool = False,
    now: Optional[datetime] = None,
    ignore_id: Optional[str] = None,
    candidate_stage: Optional[GrowthStage] = None,
) -> PlacementCheck:
    """Check a candidate position against every existing flower and decor item.

    Invalid when the distance between centres is less than the sum of both
    effective radii. The full list is always scanned and the nearest blocker
    reported, so the answer does not depend on iteration order.

    With `now`, existing saplings use their reduced radius. A flower
    candidate uses the radius of `candidate_stage` (mature when omitted).
    `ignore_id` skips the item being moved.
    """

    config = config or _DEFAULT
    if not in_bounds(x, y, config):
        logger.debug("Rejecting %s at (%s, %s): out of bounds", candidate_type, x, y)
        return PlacementCheck(valid=False, reason=REASON_OUT_OF_BOUNDS)

    own = collision_radius(candidate_type, candidate_is_decor, config, candidate_stage)

    obstacles: List[Tuple[str, float, float, float]] = []
    for flower in existing_flowers:
        if flower.id == ignore_id or not flower.has_position:
            continue
        obstacles.append((flower.id, flower.x, flower.y, _existing_flower_radius(flower, config, now)))
    for item in existing_decor:
        if item.id == ignore_id or not item.has_position:
            continue
        obstacles.append((item.id, item.x, item.y, decor_radius(item.type, config)))

    blocker: Optional[Tuple[float, str]] = None
    for item_id, ox, oy, radius in obstacles:
        distance = math.hypot(x - ox, y - oy)
        if distance < own + radius:
            key = (distance, item_id)
            if blocker is None or key < blocker:
                blocker = key

    if blocker is not None:
        logger.debug("Rejecting %s at (%s, %s): blocked by %s", candidate_type, x, y, blocker[1])
        return PlacementCheck(valid=False, reason=REASON_TOO_CLOSE, blocker_id=blocker[1])
    return PlacementCheck(valid=True)


# ----------------------------------------------------------------------
# Automatic initial position
# ----------------------------------------------------------------------
def footprint_half_width(
    candidate_type: str,
    config: Optional[GardenConfig] = None,
    candidate_is_decor: bool = False,
) -> float:
    config = config or _DEFAULT
    col = config.collision
    if candidate_is_decor:
        return col.sapling_base_width / 2
    category = category_for(candidate_type, config.growth, strict=config.strict)
    return col.sapling_base_width * col.sapling_size_factors.get(category.value, 1.0) / 2


def candidate_positions(
    candidate_type: str,
    config: Optional[GardenConfig] = None,
    candidate_is_decor: bool = False,
) -> List[Tuple[float, float]]:
    """The fixed attempt order: centre, a fan-out of eight spots, then a scan."""

    config = config or _DEFAULT
    width = config.collision.screen_width
    mid = config.collision.default_depth
    max_depth = config.depth.max_depth
    half = footprint_half_width(candidate_type, config, candidate_is_decor)
    min_x, max_x = half, width - half
    if min_x > max_x:
        min_x = max_x = width / 2

    def clamp_x(x: float) -> float:
        return max(min_x, min(max_x, x))

    positions = [(width / 2, mid)]
    fan_out = [
        (width * 0.3, 15.0),
        (width * 0.7, 15.0),
        (width * 0.3, 35.0),
        (width * 0.7, 35.0),
        (width * 0.1, mid),
        (width * 0.9, mid),
        (min_x, mid),
        (max_x, mid),
    ]
    positions.extend((clamp_x(x), y) for x, y in fan_out)

    test_y = 5.0
    while test_y < max_depth:
        test_x = min_x
        while test_x <= max_x:
            positions.append((test_x, test_y))
            test_x += 50.0
        test_y += 10.0
    return positions


def find_initial_position(
    existing_flowers: Sequence[PlantedFlower],
    existing_decor: Sequence[PlantedDecor],
    candidate_type: str,
    config: Optional[GardenConfig] = None,
    *,
    candidate_is_decor: bool = False,
    now: Optional[datetime] = None,
    candidate_stage: Optional[GrowthStage] = None,
) -> Tuple[float, float]:
    """First valid spot in the attempt order, or the centre if none is free.

    Best effort only; the centre fallback may overlap.
    """

    config = config or _DEFAULT
    for x, y in candidate_positions(candidate_type, config, candidate_is_decor):
        check = can_place(
            existing_flowers,
            existing_decor,
            candidate_type,
            x,
            y,
            config,
            candidate_is_decor=candidate_is_decor,
            now=now,
            candidate_stage=candidate_stage,
        )
        if check.valid:
            return x, y
    logger.debug("No free spot for %s, falling back to centre", candidate_type)
    return config.collision.screen_width / 2, config.collision.default_depth


# ----------------------------------------------------------------------
# Landmarks
# ----------------------------------------------------------------------
def landmark_y(config: Optional[GardenConfig] = None) -> float:
    config = config or _DEFAULT
    return config.collision.horizon_y


def _index_of(landmarks: Sequence[PlantedLandmark], landmark_id: str) -> Optional[int]:
    for idx, landmark in enumerate(landmarks):
        if landmark.id == landmark_id:
            return idx
    return None


def move_landmark(
    landmarks: Sequence[PlantedLandmark],
    landmark_id: str,
    x: float,
    config: Optional[GardenConfig] = None,
) -> Optional[List[PlantedLandmark]]:
    """Slide a landmark along the horizon. Returns None if it doesn't exist."""

    config = config or _DEFAULT
    idx = _index_of(landmarks, landmark_id)
    if idx is None:
        return None
    x = max(0.0, min(config.collision.screen_width, x))
    updated = list(landmarks)
    updated[idx] = replace(updated[idx], x=x, y=landmark_y(config))
    return updated


def move_landmark_to_front(
    landmarks: Sequence[PlantedLandmark], landmark_id: str
) -> Optional[List[PlantedLandmark]]:
    idx = _index_of(landmarks, landmark_id)
    if idx is None:
        return None
    top = max([len(landmarks)] + [l.order or 0 for l in landmarks])
    updated = list(landmarks)
    updated[idx] = replace(updated[idx], order=top + 1)
    return updated


def move_landmark_to_back(
    landmarks: Sequence[PlantedLandmark], landmark_id: str
) -> Optional[List[PlantedLandmark]]:
    idx = _index_of(landmarks, landmark_id)
    if idx is None:
        return None
    bottom = min([0] + [l.order or 0 for l in landmarks])
    updated = list(landmarks)
    updated[idx] = replace(updated[idx], order=bottom - 1)
    return updated


def stack_landmarks(landmarks: Sequence[PlantedLandmark]) -> List[PlantedLandmark]:
    """Back-to-front drawing order. Unordered landmarks keep list position."""

    keyed = [
        (l.order if l.order is not None else idx, idx, l) for idx, l in enumerate(landmarks)
    ]
    keyed.sort(key=lambda t: (t[0], t[1]))
    return [l for _, _, l in keyed]
