"""
Tests for collision checks, automatic positioning and landmark ordering.
"""
import math
from datetime import timedelta

import pytest

from lovegarden import GardenConfig, GrowthStage, PlantedDecor, PlantedFlower, PlantedLandmark, ProblemKind
from lovegarden.errors import REASON_OUT_OF_BOUNDS, REASON_TOO_CLOSE
from lovegarden.placement import (
    can_place,
    candidate_positions,
    decor_radius,
    find_initial_position,
    flower_radius,
    move_landmark,
    move_landmark_to_back,
    move_landmark_to_front,
    stack_landmarks,
)


class TestRadii:
    """Tests for effective collision radii."""

    def test_base_radii(self):
        """Mature radii per type, with the tree multiplier applied."""
        assert flower_radius("rose") == pytest.approx(22.5)
        assert flower_radius("morning_glory") == pytest.approx(25.0)
        assert flower_radius("pumpkin") == pytest.approx(35.0)
        assert flower_radius("apple_tree") == pytest.approx(36.0)
        assert decor_radius("pond") == pytest.approx(40.0)
        assert decor_radius("unlisted_statue") == pytest.approx(50.0)

    def test_override_beats_category(self):
        """A per-type override replaces the category multiplier."""
        config = GardenConfig.from_dict({"collision": {"overrides": {"apple_tree": 0.5}}})
        assert flower_radius("apple_tree", config) == pytest.approx(30.0)


class TestCanPlace:
    """Tests for can_place."""

    def test_between_two_roses(self, make_flower):
        """A rose squeezed between two roses is rejected; open ground is fine."""
        flowers = [make_flower("a", 100, 20), make_flower("b", 140, 20)]

        check = can_place(flowers, [], "rose", 120, 20)
        assert not check.valid
        assert check.reason == "too close to existing object"
        assert check.problem.kind is ProblemKind.INVALID_PLACEMENT

        assert can_place(flowers, [], "rose", 250, 20).valid

    def test_exact_touch_is_allowed(self, make_flower):
        """Distance equal to the sum of radii does not collide."""
        flowers = [make_flower("a", 100, 20)]
        assert can_place(flowers, [], "rose", 145, 20).valid
        assert not can_place(flowers, [], "rose", 144.9, 20).valid

    def test_symmetric(self, make_flower):
        """If A blocks B, then B blocks A."""
        pumpkin = make_flower("p", 100, 20, type="pumpkin")
        rose = make_flower("r", 150, 20, type="rose")
        assert not can_place([pumpkin], [], "rose", rose.x, rose.y).valid
        assert not can_place([rose], [], "pumpkin", pumpkin.x, pumpkin.y).valid

        rose = make_flower("r", 160, 20, type="rose")
        assert can_place([pumpkin], [], "rose", rose.x, rose.y).valid
        assert can_place([rose], [], "pumpkin", pumpkin.x, pumpkin.y).valid

    def test_order_independent(self, make_flower, make_decor):
        """Shuffling the existing items never changes the answer or the blocker."""
        flowers = [make_flower("b", 140, 20), make_flower("a", 100, 20), make_flower("c", 300, 30)]
        decor = [make_decor("d", 125, 40)]
        forward = can_place(flowers, decor, "rose", 120, 20)
        backward = can_place(list(reversed(flowers)), list(reversed(decor)), "rose", 120, 20)
        assert forward == backward
        assert forward.blocker_id == "a"

    def test_decor_and_flowers_share_space(self, make_flower, make_decor):
        """Decor blocks flowers and flowers block decor."""
        pond = make_decor("pond1", 200, 25, type="pond")
        assert not can_place([], [pond], "rose", 250, 25).valid

        rose = make_flower("r", 150, 25)
        check = can_place([rose], [], "pond", 100, 25, candidate_is_decor=True)
        assert not check.valid
        assert check.blocker_id == "r"

    @pytest.mark.parametrize(
        "x, y",
        [(-1, 20), (391, 20), (100, -0.5), (100, 51), (math.nan, 20), (100, math.inf)],
    )
    def test_out_of_bounds(self, x, y):
        """Positions off the garden plane are rejected."""
        check = can_place([], [], "rose", x, y)
        assert not check.valid
        assert check.reason == REASON_OUT_OF_BOUNDS

    def test_sapling_radius_with_now(self, t0, make_flower):
        """Existing saplings take less room once the current time is known."""
        sapling = make_flower("s", 100, 20, planted_at=t0 - timedelta(minutes=1))
        assert not can_place([sapling], [], "rose", 140, 20).valid
        assert can_place([sapling], [], "rose", 140, 20, now=t0).valid

    def test_sapling_candidate(self, make_flower):
        """A candidate checked as a sapling takes less room."""
        flowers = [make_flower("a", 100, 20)]
        assert not can_place(flowers, [], "rose", 140, 20).valid
        assert can_place(flowers, [], "rose", 140, 20, candidate_stage=GrowthStage.SAPLING).valid

    def test_sapling_check_is_symmetric(self, t0, make_flower):
        """Two saplings block each other the same way round."""
        a = make_flower("a", 100, 20, planted_at=t0 - timedelta(minutes=1))
        b = make_flower("b", 130, 20, planted_at=t0 - timedelta(minutes=1))
        sapling = GrowthStage.SAPLING
        assert not can_place([a], [], "rose", b.x, b.y, now=t0, candidate_stage=sapling).valid
        assert not can_place([b], [], "rose", a.x, a.y, now=t0, candidate_stage=sapling).valid

    def test_ignore_id(self, make_flower):
        """The item being moved doesn't block itself."""
        flowers = [make_flower("a", 100, 20)]
        assert not can_place(flowers, [], "rose", 105, 20).valid
        assert can_place(flowers, [], "rose", 105, 20, ignore_id="a").valid

    def test_legacy_flowers_without_position(self, t0):
        """Slot-based flowers with no coordinates take no space."""
        legacy = PlantedFlower(id="old", type="rose", planted_at=t0, slot=2)
        assert can_place([legacy], [], "rose", 100, 20).valid

    def test_decor_without_position(self):
        """Decor with unreadable coordinates takes no space."""
        broken = PlantedDecor.from_dict({"id": "d", "type": "pond"})
        assert can_place([], [broken], "rose", 0, 0).valid
        assert can_place([], [broken], "rose", 20, 10).valid


class TestAutoPosition:
    """Tests for find_initial_position."""

    def test_empty_garden_uses_centre(self):
        """With nothing planted the centre spot wins."""
        assert find_initial_position([], [], "rose") == (195.0, 25.0)

    def test_next_spot_in_order(self, make_flower):
        """With the centre taken, the first fan-out spot is used."""
        x, y = find_initial_position([make_flower("a", 195, 25)], [], "rose")
        assert x == pytest.approx(117.0)
        assert y == pytest.approx(15.0)

    def test_deterministic(self, make_flower, make_decor):
        """The same garden always gives the same spot."""
        flowers = [make_flower("a", 195, 25), make_flower("b", 117, 15)]
        decor = [make_decor("d", 273, 15)]
        first = find_initial_position(flowers, decor, "pumpkin")
        assert first == find_initial_position(flowers, decor, "pumpkin")
        assert can_place(flowers, decor, "pumpkin", *first).valid

    def test_full_garden_falls_back_to_centre(self, make_decor):
        """When nothing fits, the centre is returned anyway."""
        config = GardenConfig.from_dict({"collision": {"decor_radius": {"dome": 1000}}})
        dome = make_decor("d", 195, 25, type="dome")
        assert find_initial_position([], [dome], "rose", config) == (195.0, 25.0)

    def test_attempt_order(self):
        """Centre, eight fan-out spots, then a 50px by 10px scan."""
        positions = candidate_positions("rose")
        assert positions[0] == (195.0, 25.0)
        assert len(positions) == 1 + 8 + 5 * 7
        assert positions[9] == (24.0, 5.0)
        xs = [x for x, _ in positions]
        assert min(xs) >= 24.0 and max(xs) <= 366.0

    def test_wider_footprint_keeps_clear_of_edges(self):
        """Trees have a wider sapling footprint, so edge spots move inwards."""
        positions = candidate_positions("apple_tree")
        half = 48 * 1.7 / 2
        assert positions[7][0] == pytest.approx(half)
        assert positions[8][0] == pytest.approx(390 - half)


class TestLandmarks:
    """Tests for landmark moves and stacking."""

    @pytest.fixture
    def landmarks(self):
        return [
            PlantedLandmark(id="m", type="mountain", x=80, y=50),
            PlantedLandmark(id="w", type="windmill", x=200, y=50),
            PlantedLandmark(id="t", type="cooling_tower", x=300, y=50),
        ]

    def test_unordered_keep_list_order(self, landmarks):
        """Landmarks without an order stack in list order."""
        assert [l.id for l in stack_landmarks(landmarks)] == ["m", "w", "t"]

    def test_move_to_front(self, landmarks):
        """Bringing one forward puts it last in the drawing order."""
        updated = move_landmark_to_front(landmarks, "m")
        assert updated[0].order == 4
        assert [l.id for l in stack_landmarks(updated)] == ["w", "t", "m"]

    def test_move_to_back(self, landmarks):
        """Sending one back puts it first in the drawing order."""
        updated = move_landmark_to_back(landmarks, "t")
        assert updated[2].order == -1
        assert [l.id for l in stack_landmarks(updated)] == ["t", "m", "w"]

    def test_move_pins_to_horizon(self, landmarks):
        """Landmarks slide horizontally only and stay on screen."""
        updated = move_landmark(landmarks, "w", 500)
        assert updated[1].x == 390
        assert updated[1].y == 50
        assert landmarks[1].x == 200

    def test_unknown_id(self, landmarks):
        """Moving a landmark that isn't there returns None."""
        assert move_landmark(landmarks, "nope", 10) is None
        assert move_landmark_to_front(landmarks, "nope") is None
        assert move_landmark_to_back(landmarks, "nope") is None

    def test_reason_constants(self):
        """The user-facing reason for an overlap."""
        assert REASON_TOO_CLOSE == "too close to existing object"
