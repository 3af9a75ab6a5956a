"""
Tests for garden-wide health.
"""
from datetime import timedelta

import pytest

from lovegarden import GardenConfig, Health, WateringRecord
from lovegarden.health import garden_status, hours_since, resolve_health


class TestResolveHealth:
    """Tests for resolve_health."""

    @pytest.mark.parametrize(
        "hours, expected",
        [
            (0, Health.FRESH),
            (11.9, Health.FRESH),
            (12, Health.WILTING),
            (23.9, Health.WILTING),
            (24, Health.WILTED),
            (25, Health.WILTED),
            (24 * 30, Health.WILTED),
        ],
    )
    def test_thresholds(self, t0, hours, expected):
        """Fresh below 12h, wilting until 24h, wilted from 24h on."""
        assert resolve_health(t0 - timedelta(hours=hours), t0) is expected

    def test_never_watered_is_fresh(self, t0):
        """A garden with no interaction yet is fresh."""
        assert resolve_health(None, t0) is Health.FRESH

    def test_future_timestamp_is_fresh(self, t0):
        """Clock skew degrades to the safe state."""
        assert resolve_health(t0 + timedelta(hours=3), t0) is Health.FRESH

    def test_never_improves_without_watering(self, t0):
        """With a fixed interaction time, health only gets worse."""
        order = [Health.FRESH, Health.WILTING, Health.WILTED]
        previous = 0
        for hours in range(0, 72):
            current = order.index(resolve_health(t0, t0 + timedelta(hours=hours)))
            assert current >= previous
            previous = current

    def test_naive_now(self, t0):
        """Naive and aware times mix without raising."""
        naive = t0.replace(tzinfo=None)
        assert resolve_health(t0 - timedelta(hours=25), naive) is Health.WILTED
        assert resolve_health(naive - timedelta(hours=13), t0) is Health.WILTING

    def test_custom_thresholds(self, t0):
        """Thresholds come from config."""
        config = GardenConfig.from_dict({"health": {"wilting_after_hours": 1, "wilted_after_hours": 2}})
        assert resolve_health(t0 - timedelta(minutes=90), t0, config.health) is Health.WILTING


class TestGardenStatus:
    """Tests for garden_status."""

    def test_status_fields(self, t0):
        """Status reports elapsed hours and time left before wilting."""
        record = WateringRecord(last_successful_interaction=t0 - timedelta(hours=15))
        status = garden_status(record, t0)
        assert status.health is Health.WILTING
        assert status.hours_since_interaction == pytest.approx(15)
        assert status.hours_until_wilt == pytest.approx(9)
        assert not status.needs_revive

    def test_wilted_status(self, t0):
        """A wilted garden needs a revive and has no time left."""
        record = WateringRecord(last_successful_interaction=t0 - timedelta(hours=25))
        status = garden_status(record, t0)
        assert status.health is Health.WILTED
        assert status.hours_until_wilt is None
        assert status.needs_revive

    def test_hours_since(self, t0):
        """hours_since is never negative."""
        assert hours_since(None, t0) == 0.0
        assert hours_since(t0 + timedelta(hours=1), t0) == 0.0
        assert hours_since(t0 - timedelta(minutes=30), t0) == pytest.approx(0.5)
