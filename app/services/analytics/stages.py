"""
Lifecycle vocabularies and milestone predicates for each record kind.

Job milestones are judged on every state a record has been in, not only its
current state, so an application rejected after an interview still counts as
interviewed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from app.schemas.records import TrackedRecord

Predicate = Callable[[TrackedRecord], bool]

# Jobs
JOB_STATES = ("Interested", "Applied", "Phone Screen", "Interview", "Offer", "Rejected")

# Terminal states rank with Applied: leaving the pipeline implies having entered it.
JOB_STATE_RANK = {
    "Interested": 0,
    "Applied": 1,
    "Rejected": 1,
    "Withdrawn": 1,
    "Phone Screen": 2,
    "Interview": 3,
    "Offer": 4,
    "Accepted": 5,
}
JOB_RESPONSE_STATES = frozenset({"Phone Screen", "Interview", "Offer", "Accepted", "Rejected"})
JOB_PRE_RESPONSE_STATES = frozenset({"Interested", "Applied"})

# Interviews
INTERVIEW_STATES = ("Scheduled", "Confirmed", "Rescheduled", "Cancelled", "Completed", "No-Show")
UPCOMING_INTERVIEW_STATES = frozenset({"Scheduled", "Confirmed"})
SUCCESSFUL_OUTCOMES = frozenset({"Passed", "Moved to Next Round", "Offer Extended"})
OFFER_OUTCOME = "Offer Extended"
NEXT_ROUND_OUTCOME = "Moved to Next Round"
PENDING_OUTCOME = "Pending"

# Networking
EVENT_STATES = ("Planning to Attend", "Registered", "Attended", "Missed", "Cancelled")
ATTENDED_STATE = "Attended"


def highest_job_rank(record: TrackedRecord) -> int:
    return max((JOB_STATE_RANK.get(state, -1) for state in record.states_seen()), default=-1)


def reached(stage: str) -> Predicate:
    """Predicate: the record has been in ``stage`` or a more advanced job state."""
    threshold = JOB_STATE_RANK[stage]

    def _reached(record: TrackedRecord) -> bool:
        return highest_job_rank(record) >= threshold

    _reached.__name__ = f"reached_{stage.lower().replace(' ', '_')}"
    return _reached


has_applied = reached("Applied")
has_phone_screen = reached("Phone Screen")
has_interviewed = reached("Interview")
has_offer = reached("Offer")


def has_response(record: TrackedRecord) -> bool:
    return not JOB_RESPONSE_STATES.isdisjoint(record.states_seen())


def _result(record: TrackedRecord):
    return getattr(record, "result", None)


def is_completed_interview(record: TrackedRecord) -> bool:
    result = _result(record)
    return record.current_state == "Completed" and bool(result) and result != PENDING_OUTCOME


def is_successful_interview(record: TrackedRecord) -> bool:
    return is_completed_interview(record) and _result(record) in SUCCESSFUL_OUTCOMES


def is_offer_interview(record: TrackedRecord) -> bool:
    return is_completed_interview(record) and _result(record) == OFFER_OUTCOME


def is_next_round_interview(record: TrackedRecord) -> bool:
    return is_completed_interview(record) and _result(record) == NEXT_ROUND_OUTCOME


def is_upcoming_interview(record: TrackedRecord, now: datetime) -> bool:
    return (
        record.key_date is not None
        and record.key_date > now
        and record.current_state in UPCOMING_INTERVIEW_STATES
    )
