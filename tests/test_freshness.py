from datetime import datetime, timedelta, timezone

import pytest

from dataflow_ui.models import DataFreshness, FreshnessLevel

NOW = datetime(2024, 3, 5, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("age,level", [
    (0, FreshnessLevel.FRESH),
    (9.9, FreshnessLevel.FRESH),
    (10, FreshnessLevel.STALE),
    (29.9, FreshnessLevel.STALE),
    (30, FreshnessLevel.OLD),
    (600, FreshnessLevel.OLD),
])
def test_levels(age, level):
    freshness = DataFreshness.from_timestamp(NOW - timedelta(seconds=age), now=NOW)
    assert freshness.level == level
    assert freshness.age_seconds == pytest.approx(age)


def test_no_snapshot_is_disconnected():
    freshness = DataFreshness.from_timestamp(None, now=NOW)
    assert freshness.level == FreshnessLevel.DISCONNECTED
    assert freshness.display == "Disconnected"
    assert freshness.level.label == "OFFLINE"


def test_naive_timestamp_treated_as_utc():
    naive = (NOW - timedelta(seconds=5)).replace(tzinfo=None)
    assert DataFreshness.from_timestamp(naive, now=NOW).level == FreshnessLevel.FRESH


def test_future_timestamp_clamps_to_zero():
    freshness = DataFreshness.from_timestamp(NOW + timedelta(seconds=3), now=NOW)
    assert freshness.age_seconds == 0.0
    assert freshness.display == "0.0s ago"
