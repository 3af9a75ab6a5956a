"""Growth stage resolution.

Stage is never stored: it is recomputed from `planted_at` and the injected
`now` every time it is needed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from .config import GardenConfig, GrowthConfig
from .errors import UnknownPlantType
from .state import GrowthStage, PlantCategory, PlantedDecor, PlantedFlower, as_utc

logger = logging.getLogger(__name__)

_DEFAULT = GardenConfig.default()


def _category(value: str, fallback: PlantCategory) -> PlantCategory:
    try:
        return PlantCategory(value)
    except ValueError:
        return fallback


def category_for(
    plant_type: str,
    config: Optional[GrowthConfig] = None,
    *,
    strict: bool = False,
) -> PlantCategory:
    """Return the category of a flower type.

    An unmapped type is a programming defect: it raises in strict mode and
    otherwise falls back to the default category.
    """

    config = config or _DEFAULT.growth
    default = _category(config.default_category, PlantCategory.FLOWER)
    mapped = config.categories.get(plant_type)
    if mapped is None:
        if strict:
            raise UnknownPlantType(plant_type)
        logger.warning("No category for plant type %r, using %s", plant_type, default.value)
        return default
    return _category(mapped, default)


def resolve_growth_stage(
    category: PlantCategory,
    planted_at: datetime,
    now: datetime,
    config: Optional[GrowthConfig] = None,
) -> GrowthStage:
    """Sapling until the category's maturation time has elapsed.

    Negative elapsed time (clock skew between devices) stays a sapling.
    Naive datetimes are read as UTC.
    """

    config = config or _DEFAULT.growth
    elapsed = as_utc(now) - as_utc(planted_at)
    if elapsed < timedelta(0):
        return GrowthStage.SAPLING
    if elapsed < config.maturation(category.value):
        return GrowthStage.SAPLING
    return GrowthStage.MATURE


def time_until_mature(
    category: PlantCategory,
    planted_at: datetime,
    now: datetime,
    config: Optional[GrowthConfig] = None,
) -> timedelta:
    config = config or _DEFAULT.growth
    duration = config.maturation(category.value)
    remaining = duration - max(as_utc(now) - as_utc(planted_at), timedelta(0))
    return max(remaining, timedelta(0))


def flower_stage(
    flower: PlantedFlower,
    now: datetime,
    config: Optional[GardenConfig] = None,
) -> GrowthStage:
    config = config or _DEFAULT
    category = category_for(flower.type, config.growth, strict=config.strict)
    return resolve_growth_stage(category, flower.planted_at, now, config.growth)


def decor_stage(decor: Optional[PlantedDecor] = None) -> GrowthStage:
    """Decor is always mature; it has no sapling phase at all."""

    return GrowthStage.MATURE


def growth_scale(stage: GrowthStage, config: Optional[GrowthConfig] = None) -> float:
    config = config or _DEFAULT.growth
    if stage is GrowthStage.SAPLING:
        return config.sapling_scale
    return config.mature_scale
