from datetime import datetime, timedelta, timezone

import pytest

from app.schemas.analytics import Benchmarks

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def steps(*entries):
    """``steps(("Applied", 10), ("Interview", 3))`` -> status history with entries N days before NOW."""
    return [{"state": state, "timestamp": days_ago(age)} for state, age in entries]


def job(record_id, state, created=None, history=None, **fields):
    document = {"id": record_id, "currentState": state}
    if created is not None:
        document["createdAt"] = days_ago(created)
    if history is not None:
        document["statusHistory"] = history
    document.update(fields)
    return document


def interview(record_id, state, scheduled, result=None, rating=None, **fields):
    document = {"id": record_id, "currentState": state, "scheduledDate": days_ago(scheduled)}
    if result is not None or rating is not None:
        document["outcome"] = {"result": result, "rating": rating}
    document.update(fields)
    return document


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def benchmarks():
    return Benchmarks()


@pytest.fixture
def scenario_b_jobs():
    """Four applied records: one offer, one more interview, one rejected after applying, one still applied."""
    return [
        job("b1", "Offer", created=30, history=steps(("Applied", 30), ("Interview", 20), ("Offer", 10))),
        job("b2", "Interview", created=30, history=steps(("Applied", 30), ("Interview", 15))),
        job("b3", "Rejected", created=30, history=steps(("Applied", 30), ("Rejected", 25))),
        job("b4", "Applied", created=30, history=steps(("Applied", 30))),
    ]


@pytest.fixture
def mixed_jobs():
    return [
        job(
            "j1",
            "Offer",
            created=60,
            history=steps(("Interested", 60), ("Applied", 55), ("Interview", 40), ("Offer", 30)),
            company="Acme",
            industry="Tech",
            workMode="Remote",
            applicationDate=days_ago(55),
            deadline=days_ago(50),
        ),
        job(
            "j2",
            "Rejected",
            created=20,
            history=steps(("Applied", 20), ("Interview", 10), ("Rejected", 5)),
            company="Acme",
            industry="Tech",
        ),
        job("j3", "Applied", created=3, history=steps(("Applied", 3)), archived=True, company="Globex"),
        job("j4", "Interested", created=1, history=steps(("Interested", 1))),
        job("j5", "Withdrawn", created=100, history=steps(("Applied", 100), ("Withdrawn", 95))),
    ]


@pytest.fixture
def interview_documents():
    return [
        interview("i1", "Completed", 10, "Passed", 4, interviewType="Technical", company="Acme", industry="Tech"),
        interview("i2", "Completed", 20, "Offer Extended", 5, interviewType="Behavioral", company="Acme"),
        interview("i3", "Completed", 30, "Rejected", 2, interviewType="Technical", company="Globex"),
        interview("i4", "Completed", 12, "Pending", interviewType="Technical"),
        interview("i5", "Scheduled", -3, interviewType="Phone"),
        interview("i6", "Cancelled", 5, interviewType="Phone"),
    ]


@pytest.fixture
def networking_documents():
    return [
        {
            "id": "a1",
            "activityType": "Coffee Chat",
            "direction": "Outbound",
            "responseReceived": True,
            "responseTime": 2,
            "opportunityGenerated": True,
            "sentiment": "Positive",
            "valueExchange": "Given",
            "valueType": "Advice",
            "activityDate": days_ago(2),
        },
        {
            "id": "a2",
            "activityType": "Coffee Chat",
            "direction": "Outbound",
            "responseReceived": True,
            "responseTime": 4,
            "valueExchange": "Received",
            "activityDate": days_ago(5),
        },
        {
            "id": "a3",
            "activityType": "Email Sent",
            "direction": "Outbound",
            "activityDate": days_ago(40),
        },
        {
            "id": "a4",
            "activityType": "Email Received",
            "direction": "Inbound",
            "valueExchange": "Mutual",
            "valueType": "Referral",
            "activityDate": days_ago(3),
        },
        {
            "id": "e1",
            "name": "Meetup",
            "attendanceStatus": "Attended",
            "eventDate": days_ago(20),
            "cost": 50,
            "connectionsGained": 5,
            "jobLeadsGenerated": 1,
            "roiRating": 4,
            "linkedJobApplications": ["j1"],
        },
        {
            "id": "e2",
            "name": "Summit",
            "attendanceStatus": "Registered",
            "eventDate": days_ago(-5),
        },
    ]
