"""Tests for stayback submission and approver resolution."""
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from stayback.models.approval import Approval, ApproverKind
from stayback.models.approver_route import ApproverRoute
from stayback.models.profile import Student
from stayback.models.stayback_request import StaybackRequest
from stayback.models.user import UserRole
from stayback.services import retry
from tests.conftest import auth_headers, make_user, profile_id, submit_request


class TestSubmission:

    def test_auto_resolves_all_three_approvers(self, client, db, campus):
        """Club matched case-insensitively, warden by hostel, staff by fallback."""
        resp = submit_request(client, campus.student)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["approvals_created"] == 3
        assert data["approvers"] == {"TEAM_LEAD": True, "STAFF": True, "HOSTEL": True}

        approvals = db.query(Approval).filter(Approval.request_id == data["request_id"]).all()
        by_kind = {a.approver_kind: a for a in approvals}
        assert by_kind[ApproverKind.team_lead].approver_id == profile_id(db, campus.team_lead)
        assert by_kind[ApproverKind.staff].approver_id == profile_id(db, campus.staff)
        assert by_kind[ApproverKind.hostel].approver_id == profile_id(db, campus.warden)
        assert all(a.status.value == "PENDING" for a in approvals)

    def test_request_starts_pending(self, client, campus):
        request_id = submit_request(client, campus.student).json()["request_id"]
        resp = client.get(f"/api/stayback/{request_id}", headers=auth_headers(campus.student))
        assert resp.status_code == 200
        assert resp.json()["status"] == "PENDING"
        assert resp.json()["student"]["name"] == "Stu Dent"

    def test_unknown_club_omits_team_lead(self, client, campus):
        resp = submit_request(client, campus.student, club_name="Chess")
        assert resp.status_code == 201
        assert resp.json()["approvers"] == {"TEAM_LEAD": False, "STAFF": True, "HOSTEL": True}
        assert resp.json()["approvals_created"] == 2

    def test_explicit_approver_selection(self, client, db, campus):
        other_staff = make_user(db, UserRole.staff, "Other Staff")
        resp = submit_request(client, campus.student, staff_id=profile_id(db, other_staff))
        assert resp.status_code == 201
        approval = (
            db.query(Approval)
            .filter(Approval.request_id == resp.json()["request_id"], Approval.approver_kind == ApproverKind.staff)
            .one()
        )
        assert approval.approver_id == profile_id(db, other_staff)

    def test_explicit_unknown_approver(self, client, campus):
        resp = submit_request(client, campus.student, hostel_id="does-not-exist")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Selected hostel not found"

    def test_no_resolvable_approver_persists_nothing(self, client, db):
        """Unknown club, unknown hostel, no staff on record → 400, no request row."""
        student = make_user(db, UserRole.student, "Lone Student", club_name="Nowhere",
                            hostel_name="Tent", room_no="1", phone_number="9000000000")
        resp = submit_request(client, student, club_name="Nowhere")
        assert resp.status_code == 400
        assert db.query(StaybackRequest).count() == 0
        assert db.query(Approval).count() == 0

    def test_time_window_must_be_ordered(self, client, db, campus):
        resp = submit_request(client, campus.student, from_time="22:00", to_time="21:00")
        assert resp.status_code == 422
        assert any(err["loc"][-1] == "to_time" for err in resp.json()["detail"])
        assert db.query(StaybackRequest).count() == 0

    def test_bad_time_format(self, client, campus):
        assert submit_request(client, campus.student, from_time="7pm").status_code == 422

    def test_single_digit_hour_is_normalized(self, client, db, campus):
        resp = submit_request(client, campus.student, from_time="9:15", to_time="11:00")
        assert resp.status_code == 201
        request = db.query(StaybackRequest).one()
        assert request.from_time == "09:15"

    def test_short_remarks(self, client, campus):
        resp = submit_request(client, campus.student, remarks="late")
        assert resp.status_code == 422

    def test_missing_student_profile(self, client, db):
        lead = make_user(db, UserRole.team_lead, "Pure Lead", club_name="Drama")
        assert submit_request(client, lead).status_code == 404

    def test_only_students_submit(self, client, campus):
        assert submit_request(client, campus.staff).status_code == 403


class TestRouting:

    def test_route_beats_fallback(self, client, db, campus):
        """A configured route wins over the case-insensitive club match."""
        other_lead = make_user(db, UserRole.team_lead, "Other Lead", club_name="Aero")
        resp = client.post("/api/routes/", json={
            "kind": "TEAM_LEAD",
            "match_key": "  ROBOTICS ",
            "approver_id": profile_id(db, other_lead),
        }, headers=auth_headers(campus.admin))
        assert resp.status_code == 201, resp.text
        assert resp.json()["match_key"] == "robotics"

        request_id = submit_request(client, campus.student).json()["request_id"]
        approval = (
            db.query(Approval)
            .filter(Approval.request_id == request_id, Approval.approver_kind == ApproverKind.team_lead)
            .one()
        )
        assert approval.approver_id == profile_id(db, other_lead)

    def test_duplicate_route(self, client, db, campus):
        body = {"kind": "HOSTEL", "match_key": "A Block", "approver_id": profile_id(db, campus.warden)}
        headers = auth_headers(campus.admin)
        assert client.post("/api/routes/", json=body, headers=headers).status_code == 201
        assert client.post("/api/routes/", json=body, headers=headers).status_code == 409

    def test_staff_route_needs_wildcard(self, client, db, campus):
        resp = client.post("/api/routes/", json={
            "kind": "STAFF", "match_key": "CSE", "approver_id": profile_id(db, campus.staff),
        }, headers=auth_headers(campus.admin))
        assert resp.status_code == 400

    def test_route_to_unknown_approver(self, client, campus):
        resp = client.post("/api/routes/", json={
            "kind": "HOSTEL", "match_key": "A Block", "approver_id": "missing",
        }, headers=auth_headers(campus.admin))
        assert resp.status_code == 404

    def test_list_and_delete_route(self, client, db, campus):
        headers = auth_headers(campus.admin)
        created = client.post("/api/routes/", json={
            "kind": "STAFF", "match_key": "*", "approver_id": profile_id(db, campus.staff),
        }, headers=headers).json()
        assert len(client.get("/api/routes/", headers=headers).json()) == 1
        assert client.delete(f"/api/routes/{created['route_id']}", headers=headers).status_code == 204
        assert db.query(ApproverRoute).count() == 0

    def test_fallback_can_be_disabled(self, client, campus, monkeypatch):
        from stayback.config import settings
        monkeypatch.setattr(settings, "ALLOW_FALLBACK_APPROVER_RESOLUTION", False)
        assert submit_request(client, campus.student).status_code == 400

    def test_route_to_missing_approver_falls_back(self, client, db, campus):
        """A route whose staff profile is gone is ignored, not bound to the request."""
        db.add(ApproverRoute(kind=ApproverKind.staff, match_key="*", approver_id="gone-staff-id"))
        db.commit()

        resp = submit_request(client, campus.student)
        assert resp.status_code == 201, resp.text
        approval = (
            db.query(Approval)
            .filter(Approval.request_id == resp.json()["request_id"], Approval.approver_kind == ApproverKind.staff)
            .one()
        )
        assert approval.approver_id == profile_id(db, campus.staff)


class TestStoreFailures:

    def test_failed_approval_write_rolls_back_request(self, client, db, campus, monkeypatch):
        def _failing_commit(self):
            raise SQLAlchemyError("approvals insert failed")

        monkeypatch.setattr(Session, "commit", _failing_commit)
        resp = submit_request(client, campus.student)
        monkeypatch.undo()

        assert resp.status_code == 500
        assert db.query(StaybackRequest).count() == 0
        assert db.query(Approval).count() == 0

    def test_unavailable_store_during_lookup_is_503(self, client, campus, monkeypatch):
        real_query = Session.query

        def _dropping_query(self, *entities, **kwargs):
            if entities and entities[0] is Student:
                raise OperationalError("SELECT", {}, Exception("server closed the connection"))
            return real_query(self, *entities, **kwargs)

        monkeypatch.setattr(retry.time, "sleep", lambda _: None)
        monkeypatch.setattr(Session, "query", _dropping_query)
        resp = submit_request(client, campus.student)
        assert resp.status_code == 503


class TestReading:

    def test_student_lists_own_requests_newest_first(self, client, campus):
        first = submit_request(client, campus.student, remarks="First request remarks").json()["request_id"]
        second = submit_request(client, campus.student, remarks="Second request remarks").json()["request_id"]
        resp = client.get("/api/stayback/", headers=auth_headers(campus.student))
        assert resp.status_code == 200
        assert [r["request_id"] for r in resp.json()] == [second, first]
        assert len(resp.json()[0]["approvals"]) == 3

    def test_approver_can_view(self, client, campus):
        request_id = submit_request(client, campus.student).json()["request_id"]
        resp = client.get(f"/api/stayback/{request_id}", headers=auth_headers(campus.warden))
        assert resp.status_code == 200

    def test_other_student_cannot_view(self, client, db, campus):
        request_id = submit_request(client, campus.student).json()["request_id"]
        other = make_user(db, UserRole.student, "Nosy Student", club_name="Robotics",
                          hostel_name="A Block", room_no="102", phone_number="9000000002")
        resp = client.get(f"/api/stayback/{request_id}", headers=auth_headers(other))
        assert resp.status_code == 403

    def test_unknown_request(self, client, campus):
        resp = client.get("/api/stayback/nope", headers=auth_headers(campus.admin))
        assert resp.status_code == 404
