import pytest
from fastapi.testclient import TestClient

from app.main import app

HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)


def _payload(records):
    return {"records": records, "now": "2025-06-15T12:00:00Z"}


def test_health(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_missing_identity_is_rejected_with_envelope(client):
    response = client.post("/analytics/jobs", json=_payload([]))

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required", "data": None}


def test_job_analytics_envelope(client):
    records = [
        {"id": "1", "currentState": "Applied", "createdAt": "2025-06-10T09:00:00Z"},
        {"id": "2", "currentState": "Interview", "createdAt": "2025-06-01T09:00:00Z"},
        {"id": "bad"},
    ]

    response = client.post("/analytics/jobs", json=_payload(records), headers=HEADERS)

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["message"] == "Job analytics retrieved successfully"
    assert body["data"]["reportType"] == "job_search"
    assert body["data"]["overview"]["totalApplications"] == 2
    assert body["data"]["skippedRecords"] == 1
    assert body["data"]["generatedAt"].startswith("2025-06-15T12:00:00")
    assert "percentageOfFirst" in body["data"]["funnel"][0]


def test_benchmark_overrides_are_applied(client):
    records = [{"id": "1", "currentState": "Applied", "createdAt": "2025-06-10T09:00:00Z"}]
    payload = _payload(records)
    payload["benchmarks"] = {"lowResponseRate": 0, "offerRate": 0, "weeklyApplicationGoal": 1}

    response = client.post("/analytics/jobs", json=payload, headers=HEADERS)

    assert response.json()["data"]["recommendations"] == []


def test_bearer_token_identifies_caller(client):
    response = client.post(
        "/analytics/interviews",
        json=_payload([]),
        headers={"Authorization": "Bearer caller-token"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["reportType"] == "interview_performance"


def test_networking_analytics(client):
    records = [
        {"id": "a1", "activityType": "Meeting", "direction": "Outbound", "responseReceived": True,
         "activityDate": "2025-06-12T09:00:00Z"},
        {"id": "e1", "attendanceStatus": "Attended", "eventDate": "2025-06-01T18:00:00Z", "roiRating": 5},
    ]

    response = client.post("/analytics/networking", json=_payload(records), headers=HEADERS)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["overview"]["totalActivities"] == 1
    assert data["overview"]["totalEvents"] == 1
    assert data["eventRoi"]["averageRoiRating"] == 5.0


def test_request_shape_errors_are_422(client):
    response = client.post("/analytics/jobs", json={"records": "nope"}, headers=HEADERS)

    assert response.status_code == 422


def test_unexpected_errors_become_generic_500(client, monkeypatch):
    def _boom(*args, **kwargs):
        raise RuntimeError("database exploded")

    monkeypatch.setattr("app.api.analytics.jobs.assemble_report", _boom)

    response = client.post("/analytics/jobs", json=_payload([]), headers=HEADERS)

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error", "data": None}


def test_non_object_record_is_skipped_not_rejected(client):
    records = [{"id": "1", "currentState": "Applied", "createdAt": "2025-06-10T09:00:00Z"}, None, 42]

    response = client.post("/analytics/jobs", json=_payload(records), headers=HEADERS)

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["overview"]["totalApplications"] == 1
    assert data["skippedRecords"] == 2
