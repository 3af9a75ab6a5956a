"""Data model for the shared garden.

The engine receives these records as snapshots from the sync layer and hands
back new records; it never mutates the ones it was given. Each record can be
built from the plain dicts the storage layer delivers, with timestamps in
ISO 8601 or epoch milliseconds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

UTC = timezone.utc


def as_utc(moment: datetime) -> datetime:
    """Return `moment` as an aware UTC datetime. Naive values are taken as UTC."""

    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def to_iso(dt: datetime) -> str:
    """Convert a datetime to an ISO 8601 string."""

    return as_utc(dt).isoformat()


def from_iso(s: str) -> Optional[datetime]:
    """Parse an ISO 8601 string to datetime.

    Returns None on failure.
    """

    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except (TypeError, ValueError):
        return None
    return as_utc(dt)


def to_datetime(value: Any) -> Optional[datetime]:
    """Normalise a datetime, ISO string or epoch-ms number to aware UTC."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        return from_iso(value)
    return None


def to_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None
    return None


def _float_or_none(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class PlantCategory(Enum):
    FLOWER = "flower"
    LARGE_PLANT = "largePlant"
    TREE = "tree"


class GrowthStage(Enum):
    SAPLING = "sapling"
    MATURE = "mature"


class Health(Enum):
    FRESH = "fresh"
    WILTING = "wilting"
    WILTED = "wilted"


class WateringState(Enum):
    CAN_WATER = "can-water"
    COOLING_DOWN = "cooling-down"
    WILTED_BLOCKED = "wilted-blocked"


# ----------------------------------------------------------------------
# Planted entities
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class PlantedFlower:
    """A flower, large plant or tree.

    `x`/`y` are the bottom-middle point of the plant (where the stem meets
    the ground). Legacy slot-based records have no coordinates.
    """

    id: str
    type: str
    planted_at: datetime
    x: Optional[float] = None
    y: Optional[float] = None
    variant: str = "v1"
    flipped: bool = False
    slot: Optional[int] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def with_flipped(self, flipped: bool) -> "PlantedFlower":
        return replace(self, flipped=bool(flipped))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantedFlower":
        planted_at = to_datetime(data.get("plantedAt", data.get("planted_at")))
        if planted_at is None:
            # Unknown planting time: keep it a sapling.
            logger.warning("Flower %s has no valid plantedAt", data.get("id"))
            planted_at = datetime.max.replace(tzinfo=UTC)
        slot = data.get("slot")
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            planted_at=planted_at,
            x=_float_or_none(data.get("x")),
            y=_float_or_none(data.get("y")),
            variant=str(data.get("variant") or "v1"),
            flipped=bool(data.get("flipped", False)),
            slot=int(slot) if isinstance(slot, int) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "variant": self.variant,
            "plantedAt": to_iso(self.planted_at),
            "flipped": self.flipped,
        }
        if self.has_position:
            out["x"] = self.x
            out["y"] = self.y
        if self.slot is not None:
            out["slot"] = self.slot
        return out


@dataclass(frozen=True)
class PlantedDecor:
    """A decorative object. No sapling stage, no variants.

    Records with missing or unreadable coordinates keep `x`/`y` as None and
    take no space.
    """

    id: str
    type: str
    x: Optional[float]
    y: Optional[float]
    planted_at: Optional[datetime] = None
    flipped: bool = False

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def with_flipped(self, flipped: bool) -> "PlantedDecor":
        return replace(self, flipped=bool(flipped))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantedDecor":
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            x=_float_or_none(data.get("x")),
            y=_float_or_none(data.get("y")),
            planted_at=to_datetime(data.get("plantedAt", data.get("planted_at"))),
            flipped=bool(data.get("flipped", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "flipped": self.flipped,
        }
        if self.has_position:
            out["x"] = self.x
            out["y"] = self.y
        if self.planted_at is not None:
            out["plantedAt"] = to_iso(self.planted_at)
        return out


@dataclass(frozen=True)
class PlantedLandmark:
    """A horizon landmark. `y` is pinned to the horizon; `order` stacks them."""

    id: str
    type: str
    x: float
    y: float
    order: Optional[int] = None
    flipped: bool = False
    planted_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantedLandmark":
        order = data.get("order")
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            x=_float_or_none(data.get("x")) or 0.0,
            y=_float_or_none(data.get("y")) or 0.0,
            order=int(order) if isinstance(order, (int, float)) and not isinstance(order, bool) else None,
            flipped=bool(data.get("flipped", False)),
            planted_at=to_datetime(data.get("plantedAt", data.get("planted_at"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "flipped": self.flipped,
        }
        if self.order is not None:
            out["order"] = self.order
        if self.planted_at is not None:
            out["plantedAt"] = to_iso(self.planted_at)
        return out


# ----------------------------------------------------------------------
# Watering record
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class WateringRecord:
    """Watering history for one pair.

    `watered_by_today` lists the users who watered on `watered_day`; it is
    stale (and ignored) once the calendar day moves on.
    """

    last_successful_interaction: Optional[datetime] = None
    last_watered_by_user: Dict[str, datetime] = field(default_factory=dict)
    last_watered_by: Optional[str] = None
    streak_count: int = 0
    last_streak_date: Optional[date] = None
    watered_by_today: Tuple[str, ...] = ()
    watered_day: Optional[date] = None
    harmony_bonus_date: Optional[date] = None
    pending_harmony_bonus_for: Tuple[str, ...] = ()
    last_water_earned: Optional[datetime] = None

    def with_changes(self, **changes: Any) -> "WateringRecord":
        return replace(self, **changes)

    def last_watered(self, user_id: str) -> Optional[datetime]:
        return self.last_watered_by_user.get(user_id)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "WateringRecord":
        if not isinstance(data, dict):
            return cls()

        by_user: Dict[str, datetime] = {}
        raw_by_user = data.get("lastWateredByUser") or {}
        if isinstance(raw_by_user, dict):
            for user_id, value in raw_by_user.items():
                ts = to_datetime(value)
                if ts is not None:
                    by_user[str(user_id)] = ts

        streak = data.get("streakCount", 0)
        if not isinstance(streak, int) or isinstance(streak, bool) or streak < 0:
            streak = 0

        return cls(
            last_successful_interaction=to_datetime(data.get("lastSuccessfulInteraction")),
            last_watered_by_user=by_user,
            last_watered_by=data.get("lastWateredBy") or None,
            streak_count=streak,
            last_streak_date=to_date(data.get("lastStreakDate")),
            watered_by_today=tuple(str(u) for u in data.get("wateredByToday") or ()),
            watered_day=to_date(data.get("wateredDay")),
            harmony_bonus_date=to_date(data.get("harmonyBonusDate")),
            pending_harmony_bonus_for=tuple(
                str(u) for u in data.get("pendingHarmonyBonusFor") or ()
            ),
            last_water_earned=to_datetime(data.get("lastWaterEarned")),
        )

    def to_dict(self) -> Dict[str, Any]:
        def _d(value: Optional[date]) -> Optional[str]:
            return value.isoformat() if value is not None else None

        def _t(value: Optional[datetime]) -> Optional[str]:
            return to_iso(value) if value is not None else None

        return {
            "lastSuccessfulInteraction": _t(self.last_successful_interaction),
            "lastWateredByUser": {u: to_iso(t) for u, t in self.last_watered_by_user.items()},
            "lastWateredBy": self.last_watered_by,
            "streakCount": self.streak_count,
            "lastStreakDate": _d(self.last_streak_date),
            "wateredByToday": list(self.watered_by_today),
            "wateredDay": _d(self.watered_day),
            "harmonyBonusDate": _d(self.harmony_bonus_date),
            "pendingHarmonyBonusFor": list(self.pending_harmony_bonus_for),
            "lastWaterEarned": _t(self.last_water_earned),
        }
