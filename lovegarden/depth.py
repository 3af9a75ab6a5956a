"""Depth / stacking transform.

The drag preview and the committed plant both go through `transform`, so the
size a sapling shows while being dragged is exactly the size it lands at.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import DepthConfig, GardenConfig
from .growth import growth_scale
from .state import GrowthStage

_DEFAULT = GardenConfig.default()


@dataclass(frozen=True)
class Transform:
    x: float
    y: float
    scale: float
    z_order: int


def clamp_depth(y: float, max_depth: float) -> float:
    return max(0.0, min(max_depth, y))


def depth_scale(y: float, max_depth: Optional[float] = None, config: Optional[DepthConfig] = None) -> float:
    """Linear interpolation from the front scale (y=0) to the back scale (y=max)."""

    config = config or _DEFAULT.depth
    if max_depth is None:
        max_depth = config.max_depth
    if max_depth <= 0:
        return config.front_scale
    t = clamp_depth(y, max_depth) / max_depth
    return config.front_scale + t * (config.back_scale - config.front_scale)


def z_order(y: float, max_depth: Optional[float] = None, config: Optional[DepthConfig] = None) -> int:
    """Stacking priority: closer to the viewer (lower y) draws on top."""

    config = config or _DEFAULT.depth
    if max_depth is None:
        max_depth = config.max_depth
    return int(round((max_depth - clamp_depth(y, max_depth)) * config.z_order_factor))


def transform(x: float, y: float, config: Optional[DepthConfig] = None) -> Transform:
    config = config or _DEFAULT.depth
    return Transform(
        x=x,
        y=y,
        scale=depth_scale(y, config.max_depth, config),
        z_order=z_order(y, config.max_depth, config),
    )


def entity_transform(
    plant_type: str,
    x: float,
    y: float,
    stage: GrowthStage = GrowthStage.MATURE,
    config: Optional[GardenConfig] = None,
) -> Transform:
    """Depth transform with growth and per-type display scale folded in."""

    config = config or _DEFAULT
    base = transform(x, y, config.depth)
    type_scale = config.depth.display_scales.get(plant_type, 1.0)
    scale = base.scale * growth_scale(stage, config.growth) * type_scale
    return Transform(x=base.x, y=base.y, scale=scale, z_order=base.z_order)
