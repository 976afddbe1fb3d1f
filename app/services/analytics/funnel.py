"""
Funnel builder.

A record passes stage k only if it satisfies the predicates of every stage up to
and including k, which keeps funnel counts non-increasing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from app.schemas.analytics import FunnelStageResult
from app.schemas.records import TrackedRecord
from app.services.analytics.rates import percent
from app.services.analytics.stages import (
    Predicate,
    has_applied,
    has_interviewed,
    has_offer,
    has_phone_screen,
    is_completed_interview,
    is_offer_interview,
    is_successful_interview,
)


@dataclass(frozen=True)
class FunnelStage:
    name: str
    predicate: Predicate


def _always(record: TrackedRecord) -> bool:
    return True


JOB_FUNNEL = (
    FunnelStage("Applied", has_applied),
    FunnelStage("Phone Screen", has_phone_screen),
    FunnelStage("Interview", has_interviewed),
    FunnelStage("Offer", has_offer),
)

INTERVIEW_FUNNEL = (
    FunnelStage("Scheduled", _always),
    FunnelStage("Completed", is_completed_interview),
    FunnelStage("Successful", is_successful_interview),
    FunnelStage("Offer", is_offer_interview),
)


def depth_reached(record: TrackedRecord, stages: Sequence[FunnelStage]) -> int:
    """Number of leading stages the record passes."""
    depth = 0
    for stage in stages:
        if not stage.predicate(record):
            break
        depth += 1
    return depth


def build_funnel(records: Iterable[TrackedRecord], stages: Sequence[FunnelStage]) -> List[FunnelStageResult]:
    reached_exactly = [0] * (len(stages) + 1)
    for record in records:
        reached_exactly[depth_reached(record, stages)] += 1

    counts: List[int] = []
    running = 0
    for depth in range(len(stages), 0, -1):
        running += reached_exactly[depth]
        counts.append(running)
    counts.reverse()

    top = counts[0] if counts else 0
    return [
        FunnelStageResult(stage=stage.name, count=count, percentage_of_first=percent(count, top))
        for stage, count in zip(stages, counts)
    ]
