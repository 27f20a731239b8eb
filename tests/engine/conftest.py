"""Shared test fixtures for the wattcast engine test suite."""

import random
import time
from datetime import datetime, timedelta

import pytest

# Tuesday 09:00 local; day_of_week 2 (0 = Sunday)
TUESDAY_9AM = datetime(2026, 2, 10, 9, 0)


def _make_reading(ts, wattage, **extra):
    """Raw reading dict in the dashboard's database column style."""
    return {"Timestamp": ts.isoformat(), "WattageReading": wattage, **extra}


@pytest.fixture
def now():
    return TUESDAY_9AM


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def make_reading():
    return _make_reading


@pytest.fixture
def weekly_readings():
    """Factory: one reading per week at ``hour`` on the anchor's weekday, oldest first."""

    def _build(anchor, hour, wattages):
        weeks = len(wattages)
        return [
            _make_reading((anchor - timedelta(weeks=weeks - i)).replace(hour=hour), watts)
            for i, watts in enumerate(wattages)
        ]

    return _build


@pytest.fixture
def new_york_tz(monkeypatch):
    """Run the test with the process local zone set to America/New_York."""
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
