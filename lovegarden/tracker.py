"""Watering ritual: cooldowns, daily streaks, harmony bonus and revival.

Every function here is a pure decision over a `WateringRecord` snapshot. The
caller persists the returned record (in a single transaction) and applies
the reported reward/cost to the users' wallets. Running the same decision
twice over the same snapshot gives the same answer, and running it over a
record that already reflects an event grants nothing new.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from .config import GardenConfig, WateringConfig
from .errors import (
    REASON_COOLDOWN,
    REASON_NO_COINS,
    REASON_NO_WATER,
    REASON_NOT_WILTED,
    REASON_WILTED,
    Problem,
)
from .health import resolve_health
from .state import Health, WateringRecord, WateringState, as_utc

logger = logging.getLogger(__name__)

_DEFAULT = GardenConfig.default()


@dataclass(frozen=True)
class RewardGrant:
    """Currency granted by an action.

    Coins from the streak and harmony rewards go to BOTH partners.
    """

    coins: int = 0
    water: int = 0

    def __add__(self, other: "RewardGrant") -> "RewardGrant":
        return RewardGrant(self.coins + other.coins, self.water + other.water)

    @property
    def is_empty(self) -> bool:
        return self.coins == 0 and self.water == 0


@dataclass(frozen=True)
class ActionCost:
    """Currency the acting user must pay."""

    coins: int = 0
    water: int = 0


@dataclass(frozen=True)
class ActionOutcome:
    """Decision for a water()/revive() action, to be persisted by the caller."""

    ok: bool
    state: WateringState
    record: WateringRecord
    reward: RewardGrant = field(default_factory=RewardGrant)
    cost: ActionCost = field(default_factory=ActionCost)
    streak_updated: bool = False
    streak_reward: bool = False
    harmony_bonus: bool = False
    problem: Optional[Problem] = None


@dataclass(frozen=True)
class WateringEvent:
    user_id: str
    at: datetime
    partner_id: Optional[str] = None


# ----------------------------------------------------------------------
# Calendar helpers
# ----------------------------------------------------------------------
def calendar_day(moment: datetime, config: Optional[WateringConfig] = None) -> date:
    """Calendar day of `moment` in the configured timezone."""

    config = config or _DEFAULT.watering
    return as_utc(moment).astimezone(config.tz()).date()


def current_streak(
    record: WateringRecord,
    now: datetime,
    config: Optional[WateringConfig] = None,
) -> int:
    """Streak as it stands now: 0 once a qualifying day has been skipped."""

    if record.last_streak_date is None:
        return 0
    today = calendar_day(now, config)
    if (today - record.last_streak_date).days > 1:
        return 0
    return record.streak_count


def watered_today(
    record: WateringRecord,
    now: datetime,
    config: Optional[WateringConfig] = None,
) -> Tuple[str, ...]:
    if record.watered_day != calendar_day(now, config):
        return ()
    return record.watered_by_today


# ----------------------------------------------------------------------
# State
# ----------------------------------------------------------------------
def cooldown_remaining(
    record: WateringRecord,
    user_id: str,
    now: datetime,
    config: Optional[WateringConfig] = None,
) -> timedelta:
    """Time left on this user's cooldown. Each partner has their own."""

    config = config or _DEFAULT.watering
    last = record.last_watered(user_id)
    if last is None:
        return timedelta(0)
    elapsed = as_utc(now) - as_utc(last)
    if elapsed < timedelta(0):
        # Clock skew: the last watering is "in the future", keep blocking.
        return config.cooldown
    return max(config.cooldown - elapsed, timedelta(0))


def watering_state(
    record: WateringRecord,
    user_id: str,
    now: datetime,
    config: Optional[GardenConfig] = None,
) -> WateringState:
    config = config or _DEFAULT
    if resolve_health(record.last_successful_interaction, now, config.health) is Health.WILTED:
        return WateringState.WILTED_BLOCKED
    if cooldown_remaining(record, user_id, now, config.watering) > timedelta(0):
        return WateringState.COOLING_DOWN
    return WateringState.CAN_WATER


def _state_for(
    record: WateringRecord, user_id: Optional[str], now: datetime, config: GardenConfig
) -> WateringState:
    """Per-user state when a user is known, else the pair-wide health gate."""

    if user_id is not None:
        return watering_state(record, user_id, now, config)
    if resolve_health(record.last_successful_interaction, now, config.health) is Health.WILTED:
        return WateringState.WILTED_BLOCKED
    return WateringState.CAN_WATER


# ----------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------
def _advance_streak(
    record: WateringRecord, today: date, config: WateringConfig
) -> Tuple[int, Optional[date], bool]:
    """Return (streak, last_streak_date, changed) after a watering on `today`."""

    last = record.last_streak_date
    if last is not None and last >= today:
        return record.streak_count, last, False
    if last is not None and (today - last).days == 1:
        return record.streak_count + 1, today, True
    # First qualifying day ever, or a day was skipped.
    return 1, today, True


def water(
    record: WateringRecord,
    user_id: str,
    now: datetime,
    config: Optional[GardenConfig] = None,
    *,
    partner_id: Optional[str] = None,
    available_water: Optional[int] = None,
) -> ActionOutcome:
    """Decide a watering action by `user_id`.

    Blocked while the garden is wilted or this user's cooldown runs. When
    `available_water` is given it is checked against the water cost. The
    first watering of a calendar day advances the streak; every
    `streak_every`-th day pays the streak reward. The first time both
    partners have watered on the same day pays the harmony bonus.
    """

    config = config or _DEFAULT
    wcfg = config.watering
    now = as_utc(now)
    state = watering_state(record, user_id, now, config)

    if state is WateringState.WILTED_BLOCKED:
        logger.debug("Watering by %s blocked: garden wilted", user_id)
        return ActionOutcome(
            ok=False, state=state, record=record, problem=Problem.blocked(REASON_WILTED)
        )
    if state is WateringState.COOLING_DOWN:
        remaining = cooldown_remaining(record, user_id, now, wcfg)
        logger.debug("Watering by %s blocked: %s left on cooldown", user_id, remaining)
        return ActionOutcome(
            ok=False,
            state=state,
            record=record,
            problem=Problem.blocked(REASON_COOLDOWN, retry_after=remaining),
        )
    if available_water is not None and available_water < wcfg.water_cost:
        return ActionOutcome(
            ok=False,
            state=state,
            record=record,
            problem=Problem.insufficient(REASON_NO_WATER, wcfg.water_cost),
        )

    today = calendar_day(now, wcfg)
    already = watered_today(record, now, wcfg)
    reward = RewardGrant()

    streak, streak_date, streak_updated = _advance_streak(record, today, wcfg)
    streak_reward = False
    if streak_updated and wcfg.streak_every > 0 and streak % wcfg.streak_every == 0:
        streak_reward = True
        reward = reward + RewardGrant(coins=wcfg.streak_coins, water=wcfg.streak_water)
        logger.info("Streak reward at %d days: %d coins", streak, wcfg.streak_coins)

    others = [u for u in already if u != user_id]
    if partner_id is not None:
        others = [u for u in others if u == partner_id]
    harmony = (
        bool(others)
        and user_id not in already
        and record.harmony_bonus_date != today
    )
    pending = record.pending_harmony_bonus_for
    if harmony:
        reward = reward + RewardGrant(coins=wcfg.harmony_coins)
        for other in others:
            if other not in pending:
                pending = pending + (other,)
        logger.info("Harmony bonus: %s and %s both watered on %s", user_id, others[0], today)

    by_user = dict(record.last_watered_by_user)
    by_user[user_id] = now
    last_interaction = record.last_successful_interaction
    if last_interaction is None or now > last_interaction:
        last_interaction = now

    new_record = record.with_changes(
        last_successful_interaction=last_interaction,
        last_watered_by_user=by_user,
        last_watered_by=user_id,
        streak_count=streak,
        last_streak_date=streak_date,
        watered_by_today=already if user_id in already else already + (user_id,),
        watered_day=today,
        harmony_bonus_date=today if harmony else record.harmony_bonus_date,
        pending_harmony_bonus_for=pending,
    )
    return ActionOutcome(
        ok=True,
        state=WateringState.COOLING_DOWN if wcfg.cooldown > timedelta(0) else WateringState.CAN_WATER,
        record=new_record,
        reward=reward,
        cost=ActionCost(water=wcfg.water_cost),
        streak_updated=streak_updated,
        streak_reward=streak_reward,
        harmony_bonus=harmony,
    )


def revive(
    record: WateringRecord,
    now: datetime,
    config: Optional[GardenConfig] = None,
    *,
    user_id: Optional[str] = None,
    available_coins: Optional[int] = None,
) -> ActionOutcome:
    """Pay to bring a wilted garden back to fresh.

    Only valid while wilted. Resets the decay clock to `now`; the streak is
    left alone (it is already broken if days were skipped).
    """

    config = config or _DEFAULT
    wcfg = config.watering
    now = as_utc(now)
    health = resolve_health(record.last_successful_interaction, now, config.health)
    current = _state_for(record, user_id, now, config)

    if health is not Health.WILTED:
        return ActionOutcome(
            ok=False, state=current, record=record, problem=Problem.blocked(REASON_NOT_WILTED)
        )
    if available_coins is not None and available_coins < wcfg.revive_cost:
        return ActionOutcome(
            ok=False,
            state=current,
            record=record,
            problem=Problem.insufficient(REASON_NO_COINS, wcfg.revive_cost),
        )

    last = record.last_successful_interaction
    new_record = record.with_changes(
        last_successful_interaction=now if last is None or now > last else last
    )
    logger.info("Garden revived for %d coins", wcfg.revive_cost)
    return ActionOutcome(
        ok=True,
        state=_state_for(new_record, user_id, now, config),
        record=new_record,
        cost=ActionCost(coins=wcfg.revive_cost),
    )


def clear_harmony_notice(record: WateringRecord, user_id: str) -> WateringRecord:
    """Drop `user_id` from the pending harmony-bonus notifications."""

    if user_id not in record.pending_harmony_bonus_for:
        return record
    return record.with_changes(
        pending_harmony_bonus_for=tuple(
            u for u in record.pending_harmony_bonus_for if u != user_id
        )
    )


def replay(
    record: WateringRecord,
    events: Iterable[WateringEvent],
    config: Optional[GardenConfig] = None,
) -> Tuple[WateringRecord, RewardGrant, List[ActionOutcome]]:
    """Fold a watering history through `water`.

    Returns the final record, the summed reward and each event's outcome.
    Events the record already reflects are blocked by the cooldown.
    """

    config = config or _DEFAULT
    total = RewardGrant()
    outcomes: List[ActionOutcome] = []
    for event in sorted(events, key=lambda e: as_utc(e.at)):
        outcome = water(record, event.user_id, event.at, config, partner_id=event.partner_id)
        outcomes.append(outcome)
        if outcome.ok:
            record = outcome.record
            total = total + outcome.reward
    return record, total, outcomes


# ----------------------------------------------------------------------
# Daily water earning
# ----------------------------------------------------------------------
def earn_water(
    record: WateringRecord,
    current_water: int,
    now: datetime,
    config: Optional[WateringConfig] = None,
) -> Tuple[RewardGrant, WateringRecord]:
    """+1 water drop the first time the garden is tended on a new calendar day.

    Reads `record.last_water_earned` and returns the grant with the record
    stamped at `now`. Nothing is granted, and the record comes back as is,
    on the same day or once the wallet is at the cap.
    """

    config = config or _DEFAULT.watering
    now = as_utc(now)
    if current_water >= config.max_water:
        return RewardGrant(), record
    last = record.last_water_earned
    if last is not None and calendar_day(last, config) >= calendar_day(now, config):
        return RewardGrant(), record
    amount = min(config.daily_water, config.max_water - current_water)
    return RewardGrant(water=amount), record.with_changes(last_water_earned=now)
