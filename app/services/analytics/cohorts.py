"""
Cohort aggregator.

Groups records by one categorical dimension in a single pass and computes the
per-group counts and rates. Records without a value for the dimension fall into
the ``Unknown`` cohort instead of being dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Collection, Dict, Iterable, List, Optional

from app.schemas.analytics import CohortEntry
from app.schemas.records import TrackedRecord
from app.services.analytics.rates import count_where, rate, round_half_up
from app.services.analytics.stage_durations import average_days_to_first
from app.services.analytics.stages import Predicate

UNKNOWN_COHORT = "Unknown"

DimensionFn = Callable[[TrackedRecord], Optional[str]]
RatingFn = Callable[[TrackedRecord], Optional[float]]


@dataclass(frozen=True)
class ResponseWindow:
    """States a response is measured from and the states that count as a response."""

    from_states: Collection[str]
    response_states: Collection[str]


def attribute(name: str) -> DimensionFn:
    def _dimension(record: TrackedRecord) -> Optional[str]:
        return getattr(record, name, None)

    _dimension.__name__ = f"by_{name}"
    return _dimension


def cohort_key(value) -> str:
    if value is None:
        return UNKNOWN_COHORT
    key = str(value).strip()
    return key or UNKNOWN_COHORT


def average_rating(records: Iterable[TrackedRecord], rating_fn: RatingFn) -> Optional[float]:
    ratings = [value for value in (rating_fn(r) for r in records) if value is not None]
    if not ratings:
        return None
    return round_half_up(sum(ratings) / len(ratings))


def sort_cohorts(entries: Iterable[CohortEntry]) -> List[CohortEntry]:
    """Largest cohorts first; equal sizes ordered by key."""
    return sorted(entries, key=lambda entry: (-entry.total, entry.key))


def group_by(
    records: Iterable[TrackedRecord],
    dimension_fn: DimensionFn,
    success_fn: Predicate,
    offer_fn: Optional[Predicate] = None,
    response_window: Optional[ResponseWindow] = None,
    rating_fn: Optional[RatingFn] = None,
) -> List[CohortEntry]:
    groups: Dict[str, List[TrackedRecord]] = {}
    for record in records:
        groups.setdefault(cohort_key(dimension_fn(record)), []).append(record)

    entries = []
    for key, members in groups.items():
        total = len(members)
        avg_response_days = None
        if response_window is not None:
            avg_response_days, _ = average_days_to_first(
                members, response_window.response_states, response_window.from_states
            )
        entries.append(
            CohortEntry(
                key=key,
                total=total,
                success_rate=rate(count_where(members, success_fn), total),
                offer_rate=rate(count_where(members, offer_fn), total) if offer_fn else None,
                avg_response_days=avg_response_days,
                avg_rating=average_rating(members, rating_fn) if rating_fn else None,
            )
        )
    return sort_cohorts(entries)
