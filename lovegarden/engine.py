"""`GardenEngine`: one config bound to every resolver.

The engine holds no garden state. Each call takes the caller's snapshot and
the current time and returns a decision; appending a new plant or saving an
updated watering record is the sync layer's job.
"""

from __future__ import annotations

import logging
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from . import depth, growth, health, placement, shop, tracker
from .config import GardenConfig
from .depth import Transform
from .errors import REASON_OUT_OF_BOUNDS, Problem
from .health import GardenStatus
from .placement import PlacementCheck
from .state import (
    GrowthStage,
    Health,
    PlantCategory,
    PlantedDecor,
    PlantedFlower,
    PlantedLandmark,
    WateringRecord,
    WateringState,
    as_utc,
)
from .tracker import ActionOutcome, RewardGrant

logger = logging.getLogger(__name__)

KIND_FLOWER = shop.KIND_FLOWER
KIND_DECOR = shop.KIND_DECOR
KIND_LANDMARK = shop.KIND_LANDMARK


@dataclass(frozen=True)
class EntityView:
    """Everything the renderer needs for one planted entity."""

    id: str
    kind: str
    type: str
    stage: GrowthStage
    health: Health
    transform: Transform
    flipped: bool = False

    @property
    def scale(self) -> float:
        return self.transform.scale

    @property
    def z_order(self) -> int:
        return self.transform.z_order


@dataclass(frozen=True)
class PlacementOutcome:
    """Result of a place action.

    On success `item` is the new record for the caller to append. For
    flowers, `next_variant_index` is the variant cycle position to persist
    and `first_of_category` is set when it's the garden's first plant of its
    category.
    """

    check: PlacementCheck
    item: Optional[object] = None
    next_variant_index: Optional[int] = None
    first_of_category: Optional[PlantCategory] = None

    @property
    def valid(self) -> bool:
        return self.check.valid

    @property
    def reason(self) -> Optional[str]:
        return self.check.reason

    @property
    def problem(self) -> Optional[Problem]:
        return self.check.problem


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class GardenEngine:
    def __init__(self, config: Optional[GardenConfig] = None) -> None:
        self.config = config or GardenConfig.default()

    # ------------------------------------------------------------------
    # Growth / health
    # ------------------------------------------------------------------
    def category_of(self, plant_type: str) -> PlantCategory:
        return growth.category_for(plant_type, self.config.growth, strict=self.config.strict)

    def stage_of(self, flower: PlantedFlower, now: datetime) -> GrowthStage:
        return growth.flower_stage(flower, now, self.config)

    def health(self, record: WateringRecord, now: datetime) -> Health:
        return health.resolve_health(record.last_successful_interaction, now, self.config.health)

    def status(self, record: WateringRecord, now: datetime) -> GardenStatus:
        return health.garden_status(record, now, self.config.health)

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------
    def transform(self, x: float, y: float) -> Transform:
        return depth.transform(x, y, self.config.depth)

    def preview(self, item_type: str, x: float, y: float, is_decor: bool = False) -> Transform:
        """Transform for the item being dragged; a new plant is a sapling."""

        stage = GrowthStage.MATURE if is_decor else GrowthStage.SAPLING
        return depth.entity_transform(item_type, x, y, stage, self.config)

    def display(
        self,
        flowers: Sequence[PlantedFlower],
        decor: Sequence[PlantedDecor],
        landmarks: Sequence[PlantedLandmark],
        record: WateringRecord,
        now: datetime,
    ) -> List[EntityView]:
        """Views for every entity, in back-to-front drawing order.

        Landmarks sit behind the planting area, stacked by `order`.
        """

        garden_health = self.health(record, now)
        views: List[EntityView] = []

        stacked = placement.stack_landmarks(landmarks)
        for idx, landmark in enumerate(stacked):
            views.append(
                EntityView(
                    id=landmark.id,
                    kind=KIND_LANDMARK,
                    type=landmark.type,
                    stage=GrowthStage.MATURE,
                    health=garden_health,
                    transform=Transform(landmark.x, landmark.y, 1.0, idx - len(stacked)),
                    flipped=landmark.flipped,
                )
            )

        planted: List[EntityView] = []
        for flower in flowers:
            if not flower.has_position:
                continue
            stage = self.stage_of(flower, now)
            planted.append(
                EntityView(
                    id=flower.id,
                    kind=KIND_FLOWER,
                    type=flower.type,
                    stage=stage,
                    health=garden_health,
                    transform=depth.entity_transform(flower.type, flower.x, flower.y, stage, self.config),
                    flipped=flower.flipped,
                )
            )
        for item in decor:
            if not item.has_position:
                continue
            planted.append(
                EntityView(
                    id=item.id,
                    kind=KIND_DECOR,
                    type=item.type,
                    stage=growth.decor_stage(item),
                    health=garden_health,
                    transform=depth.entity_transform(
                        item.type, item.x, item.y, GrowthStage.MATURE, self.config
                    ),
                    flipped=item.flipped,
                )
            )
        planted.sort(key=lambda v: (v.z_order, v.id))
        return views + planted

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def validate_placement(
        self,
        flowers: Sequence[PlantedFlower],
        decor: Sequence[PlantedDecor],
        item_type: str,
        x: float,
        y: float,
        *,
        is_decor: bool = False,
        now: Optional[datetime] = None,
        ignore_id: Optional[str] = None,
        stage: Optional[GrowthStage] = None,
    ) -> PlacementCheck:
        """Check a position for a new or moved item.

        With `now`, a new flower (no `ignore_id`) is checked at its sapling
        radius unless `stage` says otherwise.
        """

        return placement.can_place(
            flowers,
            decor,
            item_type,
            x,
            y,
            self.config,
            candidate_is_decor=is_decor,
            now=now,
            ignore_id=ignore_id,
            candidate_stage=self._candidate_stage(is_decor, now, ignore_id, stage),
        )

    @staticmethod
    def _candidate_stage(
        is_decor: bool,
        now: Optional[datetime],
        ignore_id: Optional[str],
        stage: Optional[GrowthStage],
    ) -> Optional[GrowthStage]:
        if stage is not None or is_decor or now is None or ignore_id is not None:
            return stage
        return GrowthStage.SAPLING

    def auto_position(
        self,
        flowers: Sequence[PlantedFlower],
        decor: Sequence[PlantedDecor],
        item_type: str,
        *,
        is_decor: bool = False,
        now: Optional[datetime] = None,
    ) -> Tuple[float, float]:
        return placement.find_initial_position(
            flowers,
            decor,
            item_type,
            self.config,
            candidate_is_decor=is_decor,
            now=now,
            candidate_stage=self._candidate_stage(is_decor, now, None, None),
        )

    def place_flower(
        self,
        flowers: Sequence[PlantedFlower],
        decor: Sequence[PlantedDecor],
        flower_type: str,
        now: datetime,
        x: Optional[float] = None,
        y: Optional[float] = None,
        *,
        flipped: bool = False,
        variant_cycle_index: Optional[int] = None,
        rng: Optional[random.Random] = None,
        new_id: Optional[str] = None,
    ) -> PlacementOutcome:
        """Validate and build a new flower. Position defaults to `auto_position`."""

        now = as_utc(now)
        if x is None or y is None:
            x, y = self.auto_position(flowers, decor, flower_type, now=now)
        check = self.validate_placement(flowers, decor, flower_type, x, y, now=now)
        if not check.valid:
            return PlacementOutcome(check=check)

        variant, next_index = shop.next_variant(variant_cycle_index, self.config.shop, rng)
        flower = PlantedFlower(
            id=new_id or _new_id("flower"),
            type=flower_type,
            planted_at=now,
            x=x,
            y=y,
            variant=variant,
            flipped=flipped,
        )
        category = self.category_of(flower_type)
        first = None
        if not any(self.category_of(f.type) is category for f in flowers):
            first = category
        logger.info("Planted %s (%s) at (%s, %s)", flower_type, variant, x, y)
        return PlacementOutcome(
            check=check, item=flower, next_variant_index=next_index, first_of_category=first
        )

    def place_decor(
        self,
        flowers: Sequence[PlantedFlower],
        decor: Sequence[PlantedDecor],
        decor_type: str,
        now: datetime,
        x: Optional[float] = None,
        y: Optional[float] = None,
        *,
        flipped: bool = False,
        new_id: Optional[str] = None,
    ) -> PlacementOutcome:
        now = as_utc(now)
        if x is None or y is None:
            x, y = self.auto_position(flowers, decor, decor_type, is_decor=True, now=now)
        check = self.validate_placement(flowers, decor, decor_type, x, y, is_decor=True, now=now)
        if not check.valid:
            return PlacementOutcome(check=check)
        item = PlantedDecor(
            id=new_id or _new_id("decor"),
            type=decor_type,
            x=x,
            y=y,
            planted_at=now,
            flipped=flipped,
        )
        logger.info("Placed decor %s at (%s, %s)", decor_type, x, y)
        return PlacementOutcome(check=check, item=item)

    def place_landmark(
        self,
        landmarks: Sequence[PlantedLandmark],
        landmark_type: str,
        x: float,
        now: datetime,
        *,
        flipped: bool = False,
        new_id: Optional[str] = None,
    ) -> PlacementOutcome:
        """Landmarks skip collision; only the horizontal bounds are checked."""

        y = placement.landmark_y(self.config)
        if not placement.in_bounds(x, 0.0, self.config):
            return PlacementOutcome(check=PlacementCheck(valid=False, reason=REASON_OUT_OF_BOUNDS))
        item = PlantedLandmark(
            id=new_id or _new_id("landmark"),
            type=landmark_type,
            x=x,
            y=y,
            order=None,
            flipped=flipped,
            planted_at=as_utc(now),
        )
        return PlacementOutcome(check=PlacementCheck(valid=True), item=item)

    # ------------------------------------------------------------------
    # Watering
    # ------------------------------------------------------------------
    def watering_state(self, record: WateringRecord, user_id: str, now: datetime) -> WateringState:
        return tracker.watering_state(record, user_id, now, self.config)

    def water(
        self,
        record: WateringRecord,
        user_id: str,
        now: datetime,
        *,
        partner_id: Optional[str] = None,
        available_water: Optional[int] = None,
    ) -> ActionOutcome:
        return tracker.water(
            record,
            user_id,
            now,
            self.config,
            partner_id=partner_id,
            available_water=available_water,
        )

    def revive(
        self,
        record: WateringRecord,
        now: datetime,
        *,
        user_id: Optional[str] = None,
        available_coins: Optional[int] = None,
    ) -> ActionOutcome:
        return tracker.revive(
            record, now, self.config, user_id=user_id, available_coins=available_coins
        )

    def current_streak(self, record: WateringRecord, now: datetime) -> int:
        return tracker.current_streak(record, now, self.config.watering)

    def earn_water(
        self, record: WateringRecord, current_water: int, now: datetime
    ) -> Tuple[RewardGrant, WateringRecord]:
        return tracker.earn_water(record, current_water, now, self.config.watering)
