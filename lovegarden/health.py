"""Garden-wide health / decay.

Health belongs to the whole shared plot, not to individual plants: one
`last_successful_interaction` drives every flower and decor item at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .config import GardenConfig, HealthConfig
from .state import Health, WateringRecord, as_utc

_DEFAULT = GardenConfig.default()

_HOUR = timedelta(hours=1)


def hours_since(last: Optional[datetime], now: datetime) -> float:
    """Hours elapsed since `last`, never negative; 0 when never set."""

    if last is None:
        return 0.0
    return max((as_utc(now) - as_utc(last)) / _HOUR, 0.0)


def resolve_health(
    last_successful_interaction: Optional[datetime],
    now: datetime,
    config: Optional[HealthConfig] = None,
) -> Health:
    """Fresh -> wilting -> wilted as time since the last watering grows.

    A garden that was never watered, or whose timestamp is in the future,
    counts as fresh.
    """

    config = config or _DEFAULT.health
    hours = hours_since(last_successful_interaction, now)
    if hours < config.wilting_after_hours:
        return Health.FRESH
    if hours < config.wilted_after_hours:
        return Health.WILTING
    return Health.WILTED


@dataclass(frozen=True)
class GardenStatus:
    """Computed status for the whole garden."""

    health: Health
    hours_since_interaction: float
    # None once the garden has wilted.
    hours_until_wilt: Optional[float]

    @property
    def needs_revive(self) -> bool:
        return self.health is Health.WILTED


def garden_status(
    record: WateringRecord,
    now: datetime,
    config: Optional[HealthConfig] = None,
) -> GardenStatus:
    config = config or _DEFAULT.health
    last = record.last_successful_interaction
    health = resolve_health(last, now, config)
    hours = hours_since(last, now)
    until: Optional[float] = None
    if health is not Health.WILTED:
        until = max(config.wilted_after_hours - hours, 0.0)
    return GardenStatus(health=health, hours_since_interaction=hours, hours_until_wilt=until)
