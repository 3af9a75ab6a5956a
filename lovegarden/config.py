"""Injectable configuration for the garden engine.

Each resolver takes the config section it needs. The defaults are copied out
of `constants` when a config is built, so tuning one engine instance never
leaks into another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import timedelta, timezone, tzinfo
from typing import Any, Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import constants as C

logger = logging.getLogger(__name__)

_UTC = timezone.utc


@dataclass(frozen=True)
class GrowthConfig:
    categories: Dict[str, str] = field(default_factory=lambda: dict(C.PLANT_CATEGORIES))
    maturation_minutes: Dict[str, float] = field(
        default_factory=lambda: dict(C.MATURATION_MINUTES)
    )
    sapling_scale: float = C.SAPLING_GROWTH_SCALE
    mature_scale: float = C.MATURE_GROWTH_SCALE
    default_category: str = C.CATEGORY_FLOWER

    def maturation(self, category: str) -> timedelta:
        minutes = self.maturation_minutes.get(category)
        if minutes is None:
            minutes = self.maturation_minutes.get(self.default_category, 0)
        return timedelta(minutes=float(minutes))


@dataclass(frozen=True)
class HealthConfig:
    wilting_after_hours: float = C.WILTING_AFTER_HOURS
    wilted_after_hours: float = C.WILTED_AFTER_HOURS


@dataclass(frozen=True)
class DepthConfig:
    max_depth: float = C.MAX_DEPTH
    front_scale: float = C.FRONT_SCALE
    back_scale: float = C.BACK_SCALE
    z_order_factor: float = C.Z_ORDER_FACTOR
    display_scales: Dict[str, float] = field(
        default_factory=lambda: dict(C.FLOWER_DISPLAY_SCALES)
    )


@dataclass(frozen=True)
class CollisionConfig:
    flower_radius: Dict[str, float] = field(
        default_factory=lambda: dict(C.FLOWER_COLLISION_RADIUS)
    )
    default_flower_radius: float = C.DEFAULT_FLOWER_RADIUS
    category_multipliers: Dict[str, float] = field(
        default_factory=lambda: dict(C.CATEGORY_RADIUS_MULTIPLIERS)
    )
    overrides: Dict[str, float] = field(default_factory=lambda: dict(C.RADIUS_OVERRIDES))
    sapling_factor: float = C.SAPLING_RADIUS_FACTOR
    decor_radius: Dict[str, float] = field(
        default_factory=lambda: dict(C.DECOR_COLLISION_RADIUS)
    )
    default_decor_radius: float = C.DEFAULT_DECOR_RADIUS
    screen_width: float = C.SCREEN_WIDTH
    horizon_y: float = C.HORIZON_Y
    default_depth: float = C.DEFAULT_DEPTH
    sapling_base_width: float = C.SAPLING_BASE_WIDTH
    sapling_size_factors: Dict[str, float] = field(
        default_factory=lambda: dict(C.SAPLING_SIZE_FACTORS)
    )


@dataclass(frozen=True)
class WateringConfig:
    cooldown_hours: float = C.WATER_COOLDOWN_HOURS
    water_cost: int = C.WATER_COST
    revive_cost: int = C.REVIVE_COST_COINS
    streak_every: int = C.STREAK_REWARD_EVERY_DAYS
    streak_coins: int = C.STREAK_REWARD_COINS
    streak_water: int = C.STREAK_REWARD_WATER
    harmony_coins: int = C.HARMONY_BONUS_COINS
    max_water: int = C.MAX_WATER
    daily_water: int = C.DAILY_WATER_EARNED
    timezone: str = C.DAY_TIMEZONE

    @property
    def cooldown(self) -> timedelta:
        return timedelta(hours=self.cooldown_hours)

    def tz(self) -> tzinfo:
        """Timezone used to decide calendar days; falls back to UTC."""

        if self.timezone.upper() == "UTC":
            return _UTC
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r, using UTC", self.timezone)
            return _UTC


@dataclass(frozen=True)
class ShopConfig:
    plant_costs: Dict[str, int] = field(default_factory=lambda: dict(C.PLANT_COSTS))
    decor_costs: Dict[str, int] = field(default_factory=lambda: dict(C.DECOR_COSTS))
    landmark_costs: Dict[str, int] = field(default_factory=lambda: dict(C.LANDMARK_COSTS))
    refund_rate: float = C.REFUND_RATE
    variants: Tuple[str, ...] = C.FLOWER_VARIANTS


_SECTIONS = {
    "growth": GrowthConfig,
    "health": HealthConfig,
    "depth": DepthConfig,
    "collision": CollisionConfig,
    "watering": WateringConfig,
    "shop": ShopConfig,
}


@dataclass(frozen=True)
class GardenConfig:
    """All engine tuning in one immutable object.

    `strict` plays the role of a development build: programming defects such
    as an unmapped plant type raise instead of falling back to a default.
    """

    growth: GrowthConfig = field(default_factory=GrowthConfig)
    health: HealthConfig = field(default_factory=HealthConfig)
    depth: DepthConfig = field(default_factory=DepthConfig)
    collision: CollisionConfig = field(default_factory=CollisionConfig)
    watering: WateringConfig = field(default_factory=WateringConfig)
    shop: ShopConfig = field(default_factory=ShopConfig)
    strict: bool = False

    @classmethod
    def default(cls) -> "GardenConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GardenConfig":
        """Build a config from a plain dict, overlaying known keys on defaults.

        Unknown sections/keys are ignored (with a warning). A value whose type
        does not match the default's is dropped and the default kept.
        """

        config = cls()
        if not isinstance(data, dict):
            return config

        for key, value in data.items():
            if key == "strict":
                config = replace(config, strict=bool(value))
                continue
            section_cls = _SECTIONS.get(key)
            if section_cls is None or not isinstance(value, dict):
                logger.warning("Ignoring unknown config section: %s", key)
                continue
            section = _overlay(getattr(config, key), value, key)
            config = replace(config, **{key: section})
        return config

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"strict": self.strict}
        for name in _SECTIONS:
            section = getattr(self, name)
            out[name] = {
                f.name: _plain(getattr(section, f.name)) for f in fields(section)
            }
        return out


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def _overlay(section: Any, values: Dict[str, Any], section_name: str) -> Any:
    """Return a copy of `section` with matching keys from `values` applied."""

    known = {f.name for f in fields(section)}
    changes: Dict[str, Any] = {}
    for name, value in values.items():
        if name not in known:
            logger.warning("Ignoring unknown config key: %s.%s", section_name, name)
            continue
        current = getattr(section, name)
        coerced = _coerce(current, value)
        if coerced is None:
            logger.warning(
                "Bad value for %s.%s (%r), keeping default", section_name, name, value
            )
            continue
        changes[name] = coerced
    return replace(section, **changes) if changes else section


def _coerce(current: Any, value: Any) -> Any:
    if isinstance(current, bool):
        return value if isinstance(value, bool) else None
    if isinstance(current, dict):
        if not isinstance(value, dict):
            return None
        # Partial table updates merge into the default table.
        merged = dict(current)
        merged.update(value)
        return merged
    if isinstance(current, tuple):
        return tuple(value) if isinstance(value, (list, tuple)) else None
    if isinstance(current, int):
        return int(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else None
    if isinstance(current, float):
        return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else None
    if isinstance(current, str):
        return value if isinstance(value, str) else None
    return value
