"""
Rate calculators.

Every rate is a percentage rounded half-up to one decimal and returned as a float.
A zero denominator yields 0.0, never NaN or infinity.
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional, Sequence

from app.schemas.analytics import DeadlineTracking
from app.schemas.records import TrackedRecord
from app.services.analytics.stages import (
    has_applied,
    has_interviewed,
    has_offer,
    has_response,
    is_completed_interview,
)


def round_half_up(value: float, digits: int = 1) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percent(numerator: float, denominator: float) -> int:
    """Whole-number percentage used by funnels and goal progress."""
    if not denominator:
        return 0
    return int(round_half_up(numerator / denominator * 100, 0))


def rate(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return round_half_up(numerator / denominator * 100)


def count_where(records: Iterable[TrackedRecord], predicate: Callable[[TrackedRecord], bool]) -> int:
    return sum(1 for record in records if predicate(record))


def ratio_rate(
    records: Sequence[TrackedRecord],
    numerator: Callable[[TrackedRecord], bool],
    denominator: Optional[Callable[[TrackedRecord], bool]] = None,
) -> float:
    """
    Share of the denominator population that also satisfies ``numerator``.
    Without a denominator predicate the whole collection is the population.
    """
    population = [r for r in records if denominator(r)] if denominator else records
    return rate(count_where(population, numerator), len(population))


def response_rate(records: Sequence[TrackedRecord]) -> float:
    return ratio_rate(records, has_response, has_applied)


def interview_rate(records: Sequence[TrackedRecord]) -> float:
    return ratio_rate(records, has_interviewed, has_applied)


def offer_rate(records: Sequence[TrackedRecord]) -> float:
    return ratio_rate(records, has_offer, has_applied)


def completion_rate(records: Sequence[TrackedRecord]) -> float:
    return ratio_rate(records, is_completed_interview)


def deadline_tracking(records: Iterable[TrackedRecord], now: datetime) -> DeadlineTracking:
    """
    Deadline adherence over records that carry a deadline.

    A deadline is met when the key date (application date) is on or before it. The
    adherence rate only considers deadlines that have already passed, so a pending
    deadline never counts against the user.
    """
    total = met = missed = upcoming = 0
    past_deadlines = met_past = 0
    for record in records:
        if record.deadline is None:
            continue
        total += 1
        applied_on = record.key_date
        passed = record.deadline < now
        on_time = applied_on is not None and applied_on <= record.deadline
        if on_time:
            met += 1
        elif applied_on is not None or passed:
            missed += 1
        else:
            upcoming += 1
        if passed:
            past_deadlines += 1
            met_past += on_time
    return DeadlineTracking(
        total=total,
        met=met,
        missed=missed,
        upcoming=upcoming,
        past_due=past_deadlines,
        adherence_rate=rate(met_past, past_deadlines),
    )
