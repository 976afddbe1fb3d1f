from datetime import datetime, timedelta, timezone

import pytest

from app.services.analytics.exceptions import InvalidReferenceTime
from app.services.analytics.time_buckets import (
    BucketLabel,
    activity_volume,
    bucket_of,
    ensure_reference_time,
    monthly_volume,
    shift_months,
    trailing_months,
    weekly_windows,
)
from conftest import NOW, days_ago


@pytest.mark.parametrize(
    "timestamp, expected",
    [
        (None, BucketLabel.unbucketed),
        (days_ago(-1), BucketLabel.upcoming),
        (days_ago(1), BucketLabel.last_30_days),
        (days_ago(30), BucketLabel.last_30_days),
        (days_ago(31), BucketLabel.last_31_to_90_days),
        (days_ago(90), BucketLabel.last_31_to_90_days),
        (days_ago(91), BucketLabel.older),
    ],
)
def test_bucket_of(timestamp, expected):
    assert bucket_of(timestamp, NOW) is expected


def test_activity_volume_counts_recent_windows():
    volume = activity_volume([days_ago(1), days_ago(50), days_ago(70)], NOW)

    assert volume.last_30_days == 1
    assert volume.last_90_days == 3


def test_activity_volume_ignores_missing_and_future_timestamps():
    volume = activity_volume([None, days_ago(-3), days_ago(2)], NOW, types=["Call", "Call", "Email"])

    assert volume.last_30_days == 1
    assert volume.by_type == {"Email": 1}


def test_monthly_volume_is_zero_filled_and_oldest_first():
    volume = monthly_volume([days_ago(1), days_ago(50), None, days_ago(400)], NOW)

    assert len(volume) == 12
    assert volume[0].month == "Jul 2024"
    assert volume[-1].month == "Jun 2025"
    assert [entry.timestamp for entry in volume] == sorted(entry.timestamp for entry in volume)
    assert sum(entry.count for entry in volume) == 2
    assert {entry.month: entry.count for entry in volume}["Apr 2025"] == 1


def test_monthly_volume_ignores_future_dates():
    volume = monthly_volume([days_ago(2), days_ago(-10), days_ago(-40)], NOW)

    assert volume[-1].month == "Jun 2025"
    assert volume[-1].count == 1
    assert sum(entry.count for entry in volume) == 1


def test_trailing_months_cross_year_boundary():
    months = trailing_months(datetime(2025, 2, 10, tzinfo=timezone.utc), 3)

    assert [(m.year, m.month) for m in months] == [(2024, 12), (2025, 1), (2025, 2)]


def test_shift_months():
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)

    assert shift_months(start, -1) == datetime(2024, 12, 1, tzinfo=timezone.utc)
    assert shift_months(start, 13) == datetime(2026, 2, 1, tzinfo=timezone.utc)


def test_weekly_windows_end_at_reference_time():
    windows = weekly_windows(NOW)

    assert len(windows) == 4
    assert windows[-1][1] == NOW
    assert windows[0][0] == NOW - timedelta(days=28)


def test_reference_time_must_be_a_datetime():
    with pytest.raises(InvalidReferenceTime):
        ensure_reference_time("2025-06-15")


def test_naive_reference_time_is_taken_as_utc():
    assert ensure_reference_time(datetime(2025, 6, 15, 12)) == NOW
