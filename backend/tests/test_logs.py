"""Tests for the admin request log."""
from stayback.models.user import UserRole
from tests.conftest import auth_headers, decide, make_user, submit_request


def test_log_filters_and_stats(client, db, campus):
    first = submit_request(client, campus.student).json()["request_id"]
    submit_request(client, campus.student, date="2026-12-05").json()
    decide(client, campus.staff, first, "REJECTED")

    other = make_user(db, UserRole.student, "Bee Block", club_name="Chess",
                      hostel_name="B Block", room_no="7", phone_number="9123456780")
    submit_request(client, other, club_name="Chess")

    headers = auth_headers(campus.admin)
    resp = client.get("/api/logs/", headers=headers)
    assert resp.status_code == 200
    data = resp.json()
    assert len(data["requests"]) == 3
    assert data["stats"] == {"PENDING": 2, "REJECTED": 1}

    resp = client.get("/api/logs/", params={"status": "REJECTED"}, headers=headers)
    assert [r["request_id"] for r in resp.json()["requests"]] == [first]

    resp = client.get("/api/logs/", params={"start_date": "2026-12-01"}, headers=headers)
    assert len(resp.json()["requests"]) == 1

    resp = client.get("/api/logs/", params={"hostel_name": "B Block"}, headers=headers)
    assert [r["club_name"] for r in resp.json()["requests"]] == ["Chess"]


def test_log_admin_only(client, campus):
    assert client.get("/api/logs/", headers=auth_headers(campus.warden)).status_code == 403
