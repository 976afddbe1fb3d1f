"""
Trend comparator.

Compares the success rate of the last three months against the three months
before that. A window with no records never produces a direction.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from app.schemas.analytics import TrendDirection, TrendReport, TrendWindow
from app.schemas.records import TrackedRecord
from app.services.analytics.cohorts import RatingFn, average_rating
from app.services.analytics.rates import count_where, rate, round_half_up
from app.services.analytics.stages import Predicate

WINDOW = timedelta(days=90)
RECENT_LABEL = "Last 3 months"
PRIOR_LABEL = "3-6 months ago"

TimestampFn = Callable[[TrackedRecord], Optional[datetime]]


def created_at(record: TrackedRecord) -> Optional[datetime]:
    return record.created_at


def key_date(record: TrackedRecord) -> Optional[datetime]:
    return record.key_date


def classify(score: float, threshold: float) -> TrendDirection:
    """Symmetric bands: strictly above +threshold improves, strictly below -threshold declines."""
    if score > threshold:
        return TrendDirection.improving
    if score < -threshold:
        return TrendDirection.declining
    return TrendDirection.stable


def compare_trend(
    records: Iterable[TrackedRecord],
    now: datetime,
    success_fn: Predicate,
    timestamp_fn: TimestampFn = created_at,
    threshold: float = 5.0,
    rating_fn: Optional[RatingFn] = None,
) -> TrendReport:
    recent_start = now - WINDOW
    prior_start = now - 2 * WINDOW
    recent, prior = [], []
    for record in records:
        ts = timestamp_fn(record)
        if ts is None or ts > now:
            continue
        if ts >= recent_start:
            recent.append(record)
        elif ts >= prior_start:
            prior.append(record)

    recent_rate = rate(count_where(recent, success_fn), len(recent))
    prior_rate = rate(count_where(prior, success_fn), len(prior))
    score = round_half_up(recent_rate - prior_rate)
    direction = classify(score, threshold) if recent and prior else TrendDirection.stable

    return TrendReport(
        recent_window=TrendWindow(
            label=RECENT_LABEL,
            count=len(recent),
            success_rate=recent_rate,
            avg_rating=average_rating(recent, rating_fn) if rating_fn else None,
        ),
        prior_window=TrendWindow(
            label=PRIOR_LABEL,
            count=len(prior),
            success_rate=prior_rate,
            avg_rating=average_rating(prior, rating_fn) if rating_fn else None,
        ),
        improvement_score=score,
        direction=direction,
    )
