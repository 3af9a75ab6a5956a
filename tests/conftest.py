"""Shared fixtures. Every test runs on fixed datetimes, never the wall clock."""

from datetime import datetime, timedelta, timezone

import pytest

from lovegarden import GardenConfig, GardenEngine, PlantedDecor, PlantedFlower, WateringRecord

T0 = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def config():
    return GardenConfig.default()


@pytest.fixture
def engine():
    return GardenEngine()


@pytest.fixture
def make_flower():
    """Factory for mature flowers (planted a day before T0) unless told otherwise."""

    def _make(fid, x, y, type="rose", planted_at=None):
        return PlantedFlower(
            id=fid,
            type=type,
            planted_at=planted_at or T0 - timedelta(days=1),
            x=x,
            y=y,
        )

    return _make


@pytest.fixture
def make_decor():
    def _make(did, x, y, type="birdbath"):
        return PlantedDecor(id=did, type=type, x=x, y=y, planted_at=T0 - timedelta(days=1))

    return _make


@pytest.fixture
def fresh_record():
    """Garden watered two hours before T0 by nobody in particular."""

    return WateringRecord(last_successful_interaction=T0 - timedelta(hours=2))
