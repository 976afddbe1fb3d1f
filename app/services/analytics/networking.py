"""
Networking metrics.

Relationship activities and networking events arrive in one collection. Activities
drive engagement, value exchange and the outreach funnel; attended events drive
the event return-on-investment figures.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence, Tuple

from app.schemas.analytics import EventRoi, NetworkingOverview, TopEvent, ValueExchange
from app.schemas.records import NetworkingEventRecord, RelationshipActivityRecord, TrackedRecord
from app.services.analytics.funnel import FunnelStage
from app.services.analytics.rates import count_where, rate, round_half_up
from app.services.analytics.stages import ATTENDED_STATE

OUTBOUND = "Outbound"
POSITIVE = "Positive"
VALUE_GIVEN = frozenset({"Given", "Mutual"})
VALUE_RECEIVED = frozenset({"Received", "Mutual"})
TOP_EVENT_LIMIT = 5


def split_networking(
    records: Iterable[TrackedRecord],
) -> Tuple[List[RelationshipActivityRecord], List[NetworkingEventRecord]]:
    activities, events = [], []
    for record in records:
        if isinstance(record, NetworkingEventRecord):
            events.append(record)
        elif isinstance(record, RelationshipActivityRecord):
            activities.append(record)
    return activities, events


def is_outbound(record: TrackedRecord) -> bool:
    return getattr(record, "direction", None) == OUTBOUND


def got_response(record: TrackedRecord) -> bool:
    return is_outbound(record) and bool(getattr(record, "response_received", False))


def generated_opportunity(record: TrackedRecord) -> bool:
    return bool(getattr(record, "opportunity_generated", False))


def is_positive(record: TrackedRecord) -> bool:
    return getattr(record, "sentiment", None) == POSITIVE


def is_attended(record: TrackedRecord) -> bool:
    return record.current_state == ATTENDED_STATE


NETWORKING_FUNNEL = (
    FunnelStage("Outreach", is_outbound),
    FunnelStage("Responded", got_response),
    FunnelStage("Opportunity", generated_opportunity),
)


def engagement_overview(
    activities: Sequence[RelationshipActivityRecord], events: Sequence[NetworkingEventRecord]
) -> NetworkingOverview:
    """Response rate is measured on outbound activities only so it never exceeds 100."""
    outbound = count_where(activities, is_outbound)
    response_times = [a.response_time for a in activities if a.response_time is not None]
    return NetworkingOverview(
        total_activities=len(activities),
        total_events=len(events),
        response_rate=rate(count_where(activities, got_response), outbound),
        opportunity_conversion_rate=rate(count_where(activities, generated_opportunity), len(activities)),
        positive_sentiment_rate=rate(count_where(activities, is_positive), len(activities)),
        average_response_time=round_half_up(sum(response_times) / len(response_times)) if response_times else 0.0,
    )


def event_roi(events: Iterable[NetworkingEventRecord]) -> EventRoi:
    attended = [e for e in events if is_attended(e)]
    if not attended:
        return EventRoi()

    total_cost = sum(e.cost for e in attended)
    connections = sum(e.connections_gained for e in attended)
    leads = sum(e.job_leads_generated for e in attended)
    rated = [e for e in attended if e.roi_rating is not None]
    linked = sum(1 for e in attended if e.linked_job_applications)

    top = sorted(rated, key=lambda e: (-e.roi_rating, e.name or ""))[:TOP_EVENT_LIMIT]
    return EventRoi(
        total_events_attended=len(attended),
        total_connections_gained=connections,
        total_job_leads_generated=leads,
        average_cost_per_connection=round_half_up(total_cost / connections, 2) if connections else 0.0,
        average_cost_per_job_lead=round_half_up(total_cost / leads, 2) if leads else 0.0,
        average_roi_rating=round_half_up(sum(e.roi_rating for e in rated) / len(rated)) if rated else 0.0,
        conversion_rate=rate(linked, len(attended)),
        top_events=[
            TopEvent(
                name=e.name,
                date=e.key_date,
                roi_rating=e.roi_rating,
                connections_gained=e.connections_gained,
                job_leads_generated=e.job_leads_generated,
            )
            for e in top
        ],
    )


def reciprocity_balance(given: int, received: int) -> float:
    """How evenly value flows both ways: 100 is perfectly balanced, 0 is one-sided or no exchange."""
    if not given or not received:
        return 0.0
    return rate(min(given, received), max(given, received))


def value_exchange(activities: Iterable[RelationshipActivityRecord]) -> ValueExchange:
    given = received = 0
    by_type = Counter()
    for activity in activities:
        if activity.value_exchange in VALUE_GIVEN:
            given += 1
        if activity.value_exchange in VALUE_RECEIVED:
            received += 1
        if activity.value_type:
            by_type[activity.value_type] += 1
    return ValueExchange(
        total_value_given=given,
        total_value_received=received,
        reciprocity_score=reciprocity_balance(given, received),
        by_type=dict(sorted(by_type.items())),
    )
