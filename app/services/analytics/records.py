"""
Raw record intake for the analytics engine.

Turns the documents handed over by the persistence layer into typed records.
A document that cannot be read is logged and skipped so one bad record never
blanks out a whole report.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, List, Tuple, Type

from pydantic import TypeAdapter, ValidationError

from app.schemas.records import (
    InterviewRecord,
    JobRecord,
    NetworkingEventRecord,
    NetworkingRecord,
    RecordKind,
    RelationshipActivityRecord,
    TrackedRecord,
)
from app.services.analytics.exceptions import InvalidRecordCollection

logger = logging.getLogger("app_logger")

JOB_ADAPTER = TypeAdapter(JobRecord)
INTERVIEW_ADAPTER = TypeAdapter(InterviewRecord)
NETWORKING_ADAPTER = TypeAdapter(NetworkingRecord)

_EVENT_HINTS = ("attendanceStatus", "attendance_status", "eventDate", "event_date", "connectionsGained")
NETWORKING_ACCEPTED = (RelationshipActivityRecord, NetworkingEventRecord)


def _with_networking_kind(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    """Networking documents from older clients may not carry a kind tag."""
    if "kind" in raw:
        return raw
    if any(hint in raw for hint in _EVENT_HINTS):
        return {**raw, "kind": RecordKind.networking_event.value}
    return {**raw, "kind": RecordKind.relationship_activity.value}


def _parse(raw_records: Any, adapter: TypeAdapter, accepted: Tuple[Type[TrackedRecord], ...], prepare=None):
    if raw_records is None or isinstance(raw_records, (str, bytes, Mapping)) or not isinstance(raw_records, Iterable):
        raise InvalidRecordCollection(
            f"Expected an iterable of records, got {type(raw_records).__name__}"
        )

    records: List[TrackedRecord] = []
    skipped = 0
    for position, raw in enumerate(raw_records):
        if isinstance(raw, accepted):
            records.append(raw)
            continue
        if not isinstance(raw, Mapping):
            logger.warning(f"[RECORDS] Skipping record #{position}: not a document ({type(raw).__name__})")
            skipped += 1
            continue
        try:
            records.append(adapter.validate_python(prepare(raw) if prepare else raw))
        except ValidationError as exc:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
            logger.warning(f"[RECORDS] Skipping record {raw.get('id', raw.get('_id', f'#{position}'))}: invalid {fields}")
            skipped += 1
    return records, skipped


def parse_job_records(raw_records: Any) -> Tuple[List[JobRecord], int]:
    return _parse(raw_records, JOB_ADAPTER, (JobRecord,))


def parse_interview_records(raw_records: Any) -> Tuple[List[InterviewRecord], int]:
    return _parse(raw_records, INTERVIEW_ADAPTER, (InterviewRecord,))


def parse_networking_records(raw_records: Any) -> Tuple[List[TrackedRecord], int]:
    return _parse(raw_records, NETWORKING_ADAPTER, NETWORKING_ACCEPTED, prepare=_with_networking_kind)
