"""
Time bucketing helpers.

Every function takes the reference time explicitly; nothing here reads the clock.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from app.schemas.analytics import ActivityVolume, MonthlyVolume
from app.schemas.records import as_utc
from app.services.analytics.exceptions import InvalidReferenceTime
from app.services.analytics.rates import round_half_up

DAY = timedelta(days=1)
RECENT_WINDOW = timedelta(days=30)
QUARTER_WINDOW = timedelta(days=90)
DAYS_PER_WEEK = 7
TRAILING_MONTHS = 12


class BucketLabel(str, Enum):
    last_30_days = "last_30_days"
    last_31_to_90_days = "last_31_to_90_days"
    older = "older"
    upcoming = "upcoming"
    unbucketed = "unbucketed"


def ensure_reference_time(now) -> datetime:
    """Validate the caller-supplied reference time and normalize it to UTC."""
    if not isinstance(now, datetime):
        raise InvalidReferenceTime(f"Reference time must be a datetime, got {type(now).__name__}")
    return as_utc(now)


def bucket_of(timestamp: Optional[datetime], now: datetime) -> BucketLabel:
    if timestamp is None:
        return BucketLabel.unbucketed
    if timestamp > now:
        return BucketLabel.upcoming
    age = now - timestamp
    if age <= RECENT_WINDOW:
        return BucketLabel.last_30_days
    if age <= QUARTER_WINDOW:
        return BucketLabel.last_31_to_90_days
    return BucketLabel.older


def days_between(start: datetime, end: datetime) -> float:
    return (end - start) / DAY


def month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def shift_months(moment: datetime, months: int) -> datetime:
    """Shift a month start by a signed number of calendar months."""
    index = moment.year * 12 + (moment.month - 1) + months
    return moment.replace(year=index // 12, month=index % 12 + 1)


def trailing_months(now: datetime, count: int = TRAILING_MONTHS) -> List[datetime]:
    """Month starts for the ``count`` months ending with the month of ``now``, oldest first."""
    anchor = month_start(now)
    return [shift_months(anchor, -offset) for offset in range(count - 1, -1, -1)]


def monthly_volume(
    timestamps: Iterable[Optional[datetime]], now: datetime, count: int = TRAILING_MONTHS
) -> List[MonthlyVolume]:
    months = trailing_months(now, count)
    tally = Counter((ts.year, ts.month) for ts in timestamps if ts is not None and ts <= now)
    return [
        MonthlyVolume(month=start.strftime("%b %Y"), count=tally.get((start.year, start.month), 0), timestamp=start)
        for start in months
    ]


def activity_volume(
    timestamps: Iterable[Optional[datetime]],
    now: datetime,
    types: Optional[Iterable[Optional[str]]] = None,
) -> ActivityVolume:
    """
    Counts of past timestamps in the last 30 and last 90 days.

    ``types`` runs parallel to ``timestamps`` and feeds the 30-day breakdown by type.
    """
    stamps = list(timestamps)
    labels = list(types) if types is not None else [None] * len(stamps)
    buckets = Counter()
    by_type = Counter()
    for ts, label in zip(stamps, labels):
        bucket = bucket_of(ts, now)
        buckets[bucket] += 1
        if bucket is BucketLabel.last_30_days and label:
            by_type[label] += 1

    last_30 = buckets[BucketLabel.last_30_days]
    last_90 = last_30 + buckets[BucketLabel.last_31_to_90_days]
    weeks = RECENT_WINDOW / timedelta(days=DAYS_PER_WEEK)
    return ActivityVolume(
        last_30_days=last_30,
        last_90_days=last_90,
        average_per_week=round_half_up(last_30 / weeks),
        by_type=dict(sorted(by_type.items())),
    )


def weekly_windows(now: datetime, weeks: int = 4) -> List[Tuple[datetime, datetime]]:
    """Consecutive 7-day windows ``(start, end]`` ending at ``now``, oldest first."""
    span = timedelta(days=DAYS_PER_WEEK)
    return [(now - span * (i + 1), now - span * i) for i in range(weeks - 1, -1, -1)]


def in_window(timestamp: Optional[datetime], start: datetime, end: datetime) -> bool:
    return timestamp is not None and start < timestamp <= end
