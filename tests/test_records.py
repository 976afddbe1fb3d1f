from datetime import datetime, timezone

from app.schemas.records import JobRecord, NetworkingEventRecord, RelationshipActivityRecord
from app.services.analytics.records import parse_interview_records, parse_job_records, parse_networking_records


def test_job_documents_accept_camel_and_snake_case():
    records, skipped = parse_job_records(
        [
            {"_id": 7, "status": "Applied", "applicationDate": "2025-06-01T00:00:00"},
            {"id": "8", "current_state": "Offer", "work_mode": "Remote", "created_at": "2025-05-01T00:00:00Z"},
        ]
    )

    assert skipped == 0
    assert records[0].id == "7"
    assert records[0].key_date == datetime(2025, 6, 1, tzinfo=timezone.utc)
    assert records[1].work_mode == "Remote"


def test_history_accepts_status_key():
    (record,), _ = parse_job_records(
        [{"id": "1", "currentState": "Interview", "statusHistory": [{"status": "Applied", "timestamp": "2025-06-01T08:00:00Z"}]}]
    )

    assert record.history[0].state == "Applied"
    assert record.states_seen() == frozenset({"Applied", "Interview"})


def test_unreadable_history_keeps_the_record():
    (record,), skipped = parse_job_records([{"id": "1", "currentState": "Applied", "statusHistory": 5}])

    assert skipped == 0
    assert record.has_history is False
    assert record.history == ()


def test_typed_records_pass_through():
    existing = JobRecord(id="1", current_state="Applied")

    records, skipped = parse_job_records([existing, "not a record"])

    assert records == [existing]
    assert skipped == 1


def test_networking_kind_is_inferred():
    records, skipped = parse_networking_records(
        [
            {"id": "a", "activityType": "Phone Call"},
            {"id": "b", "attendanceStatus": "Missed"},
            {"id": "c", "kind": "relationship_activity"},
        ]
    )

    assert skipped == 0
    assert isinstance(records[0], RelationshipActivityRecord)
    assert records[0].current_state == "Phone Call"
    assert isinstance(records[1], NetworkingEventRecord)
    assert records[1].current_state == "Missed"
    assert records[2].current_state == "Other"


def test_invalid_interview_rating_keeps_the_interview():
    records, skipped = parse_interview_records(
        [{"id": "1", "currentState": "Completed", "outcome": {"result": "Passed", "rating": 9}}]
    )

    assert skipped == 0
    assert records[0].result == "Passed"
    assert records[0].rating is None


def test_unreadable_networking_details_fall_back():
    records, skipped = parse_networking_records(
        [
            {"id": "a", "activityType": None, "direction": None, "responseTime": -3},
            {"id": "e", "attendanceStatus": "Attended", "roiRating": 0, "cost": -10, "connectionsGained": "many"},
        ]
    )

    assert skipped == 0
    activity, event = records
    assert (activity.activity_type, activity.current_state, activity.direction) == ("Other", "Other", "Outbound")
    assert activity.response_time is None
    assert (event.roi_rating, event.cost, event.connections_gained) == (None, 0.0, 0)
