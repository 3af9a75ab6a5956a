"""
Tests for the depth scale and stacking order.
"""
from datetime import timedelta

import pytest

from lovegarden import GrowthStage, WateringRecord
from lovegarden.depth import depth_scale, entity_transform, transform, z_order


class TestDepthScale:
    """Tests for depth_scale."""

    def test_endpoints(self):
        """Front of the garden is 0.9, back is 0.7."""
        assert depth_scale(0) == pytest.approx(0.9)
        assert depth_scale(50) == pytest.approx(0.7)
        assert depth_scale(25) == pytest.approx(0.8)

    def test_clamped(self):
        """Depths beyond the plane clamp to the endpoints."""
        assert depth_scale(-10) == pytest.approx(0.9)
        assert depth_scale(80) == pytest.approx(0.7)

    def test_continuous_and_decreasing(self):
        """Small moves give small changes, and farther back is never larger."""
        previous = depth_scale(0)
        y = 0.0
        while y < 50:
            y += 0.5
            current = depth_scale(y)
            assert current <= previous
            assert abs(current - previous) < 0.003
            previous = current

    def test_custom_max_depth(self):
        """max_depth can be passed explicitly."""
        assert depth_scale(100, max_depth=100) == pytest.approx(0.7)


class TestZOrder:
    """Tests for z_order."""

    def test_endpoints(self):
        """Front draws on top, the back row at zero."""
        assert z_order(0) == 200
        assert z_order(50) == 0

    def test_closer_is_higher(self):
        """A lower y always stacks above a higher y."""
        orders = [z_order(y) for y in range(0, 51)]
        assert all(a > b for a, b in zip(orders, orders[1:]))

    def test_transform_combines_both(self):
        """transform() carries position, scale and z-order together."""
        t = transform(120, 25)
        assert (t.x, t.y) == (120, 25)
        assert t.scale == pytest.approx(0.8)
        assert t.z_order == 100


class TestEntityTransform:
    """Tests for growth and display scale on top of depth."""

    def test_sapling_is_smaller(self):
        """Saplings render at 70% of their mature size."""
        mature = entity_transform("rose", 100, 10, GrowthStage.MATURE)
        sapling = entity_transform("rose", 100, 10, GrowthStage.SAPLING)
        assert sapling.scale == pytest.approx(mature.scale * 0.7)
        assert sapling.z_order == mature.z_order

    def test_display_scale(self):
        """Morning glories are drawn larger than the depth scale alone."""
        t = entity_transform("morning_glory", 100, 0)
        assert t.scale == pytest.approx(0.9 * 1.2)

    def test_preview_matches_committed(self, engine, t0):
        """What the drag preview shows is what the planted sapling displays."""
        preview = engine.preview("tulip", 210, 33)
        outcome = engine.place_flower([], [], "tulip", t0, 210, 33, new_id="f1")
        assert outcome.valid

        views = engine.display(
            [outcome.item], [], [], WateringRecord(last_successful_interaction=t0), t0 + timedelta(seconds=5)
        )
        assert views[0].stage is GrowthStage.SAPLING
        assert views[0].transform == preview
