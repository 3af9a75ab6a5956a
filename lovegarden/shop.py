"""Item prices, removal refunds and flower variant cycling."""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional, Tuple

from .config import GardenConfig, ShopConfig
from .errors import REASON_NO_COINS, Problem
from .state import PlantedDecor, PlantedFlower, PlantedLandmark

logger = logging.getLogger(__name__)

_DEFAULT = GardenConfig.default()

KIND_FLOWER = "flower"
KIND_DECOR = "decor"
KIND_LANDMARK = "landmark"


def item_cost(kind: str, item_type: str, config: Optional[ShopConfig] = None) -> int:
    """Price in coins; 0 for anything the shop doesn't list."""

    config = config or _DEFAULT.shop
    table = {
        KIND_FLOWER: config.plant_costs,
        KIND_DECOR: config.decor_costs,
        KIND_LANDMARK: config.landmark_costs,
    }.get(kind, {})
    return int(table.get(item_type, 0))


def check_purchase(
    kind: str,
    item_type: str,
    coins: int,
    config: Optional[ShopConfig] = None,
) -> Tuple[int, Optional[Problem]]:
    """Return (price, problem). `problem` is set when `coins` can't cover it."""

    price = item_cost(kind, item_type, config)
    if coins < price:
        return price, Problem.insufficient(REASON_NO_COINS, price)
    return price, None


def refund_for(
    flowers: Iterable[PlantedFlower] = (),
    decor: Iterable[PlantedDecor] = (),
    landmarks: Iterable[PlantedLandmark] = (),
    config: Optional[ShopConfig] = None,
) -> int:
    """Coins returned (to each partner) when items are cleared out.

    The refund rate is applied per item and floored.
    """

    config = config or _DEFAULT.shop
    total = 0
    for flower in flowers:
        total += int(item_cost(KIND_FLOWER, flower.type, config) * config.refund_rate)
    for item in decor:
        total += int(item_cost(KIND_DECOR, item.type, config) * config.refund_rate)
    for landmark in landmarks:
        total += int(item_cost(KIND_LANDMARK, landmark.type, config) * config.refund_rate)
    return total


def next_variant(
    cycle_index: Optional[int],
    config: Optional[ShopConfig] = None,
    rng: Optional[random.Random] = None,
) -> Tuple[str, int]:
    """Pick the cosmetic variant for a new flower.

    A reset cycle (`None`) starts at a random variant; after that variants
    rotate v1 -> v2 -> v3 -> v1. Returns (variant, next cycle index).
    """

    config = config or _DEFAULT.shop
    variants = config.variants
    count = len(variants)
    if cycle_index is None or not 0 <= cycle_index < count:
        rng = rng or random.Random()
        index = rng.randrange(count)
    else:
        index = cycle_index
    return variants[index], (index + 1) % count
