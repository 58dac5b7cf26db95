# This project was developed with assistance from AI tools.
"""Functional tests: route-level role gates, data scope, and error bodies.

Runs the real app with a mock session. Role gates reject before the
session is touched; lifecycle errors come back as RFC 7807 bodies with a
machine-readable ``kind``.
"""

import pytest
from db import get_db_service
from db.enums import ApplicationStatus

from .data_factory import make_app_alice
from .mock_db import make_mock_session
from .personas import admin, agent, applicant_alice, landlord, property_manager

pytestmark = pytest.mark.functional


# ---------------------------------------------------------------------------
# Role gates
# ---------------------------------------------------------------------------


class TestRouteRoleGates:
    """Each route rejects roles outside its allow-list with 403."""

    def test_landlord_cannot_start_application(self, make_client):
        client = make_client(landlord(), make_mock_session())
        resp = client.post("/api/applications/", json={"listing_id": 11})
        assert resp.status_code == 403
        body = resp.json()
        assert body["title"] == "Forbidden"
        assert body["detail"] == "Insufficient permissions"

    def test_applicant_cannot_score(self, make_client):
        client = make_client(applicant_alice(), make_mock_session())
        assert client.post("/api/applications/101/score").status_code == 403

    def test_applicant_cannot_verify_payment(self, make_client):
        client = make_client(applicant_alice(), make_mock_session())
        resp = client.post("/api/applications/101/payments/verify", json={"confirmed": True})
        assert resp.status_code == 403

    def test_agent_cannot_sign_lease(self, make_client):
        client = make_client(agent(), make_mock_session())
        resp = client.post("/api/applications/101/lease/sign", json={})
        assert resp.status_code == 403

    def test_agent_cannot_record_payment_attempt(self, make_client):
        client = make_client(agent(), make_mock_session())
        resp = client.post(
            "/api/applications/101/payments/attempts",
            json={"reference_id": "pi_1", "status": "failed", "amount": "45.00"},
        )
        assert resp.status_code == 403

    def test_audit_is_admin_only(self, make_client):
        client = make_client(property_manager(), make_mock_session())
        assert client.get("/api/audit/application/101/verify").status_code == 403


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


class TestApplicantVisibility:
    def test_list_returns_scoped_rows(self, make_client):
        client = make_client(applicant_alice(), make_mock_session(items=[make_app_alice()]))
        resp = client.get("/api/applications/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["total"] == 1
        assert body["pagination"]["has_more"] is False
        assert body["data"][0]["id"] == 101

    def test_get_own_application(self, make_client):
        client = make_client(applicant_alice(), make_mock_session(single=make_app_alice()))
        resp = client.get("/api/applications/101")
        assert resp.status_code == 200
        assert resp.json()["status"] == "draft"

    def test_out_of_scope_is_404_with_kind(self, make_client):
        client = make_client(applicant_alice(), make_mock_session(single=None))
        resp = client.get("/api/applications/999")
        assert resp.status_code == 404
        assert resp.json()["kind"] == "not_found"

    def test_invalid_sort_is_422(self, make_client):
        client = make_client(admin(), make_mock_session(items=[]))
        resp = client.get("/api/applications/?sort_by=rent")
        assert resp.status_code == 422
        assert resp.json()["kind"] == "validation_error"


# ---------------------------------------------------------------------------
# Lifecycle error mapping
# ---------------------------------------------------------------------------


class TestLifecycleErrors:
    def test_unlisted_transition_is_409(self, make_client):
        session = make_mock_session(single=make_app_alice())
        client = make_client(landlord(), session)
        resp = client.post("/api/applications/101/transitions", json={"target_status": "approved"})
        assert resp.status_code == 409
        body = resp.json()
        assert body["kind"] == "invalid_transition"
        assert body["status"] == 409
        session.commit.assert_not_awaited()

    def test_forbidden_edge_is_403_unauthorized(self, make_client):
        app = make_app_alice(ApplicationStatus.UNDER_REVIEW)
        client = make_client(applicant_alice(), make_mock_session(single=app))
        resp = client.post("/api/applications/101/transitions", json={"target_status": "approved"})
        assert resp.status_code == 403
        assert resp.json()["kind"] == "unauthorized"

    def test_missing_reject_reason_is_422(self, make_client):
        app = make_app_alice(ApplicationStatus.UNDER_REVIEW)
        client = make_client(landlord(), make_mock_session(single=app))
        resp = client.post("/api/applications/101/transitions", json={"target_status": "rejected"})
        assert resp.status_code == 422
        assert resp.json()["kind"] == "validation_error"

    def test_scoring_a_draft_is_422(self, make_client):
        client = make_client(agent(), make_mock_session(single=make_app_alice()))
        resp = client.post("/api/applications/101/score")
        assert resp.status_code == 422
        assert resp.json()["kind"] == "validation_error"

    def test_signing_before_approval_is_409(self, make_client):
        app = make_app_alice(ApplicationStatus.SUBMITTED)
        client = make_client(applicant_alice(), make_mock_session(single=app))
        resp = client.post("/api/applications/101/lease/sign", json={"signer_name": "Alice"})
        assert resp.status_code == 409
        assert resp.json()["kind"] == "invalid_transition"


# ---------------------------------------------------------------------------
# Status summary and health
# ---------------------------------------------------------------------------


class TestStatusEndpoint:
    def test_pending_payment_summary(self, make_client):
        app = make_app_alice(ApplicationStatus.PENDING_PAYMENT)
        client = make_client(applicant_alice(), make_mock_session(single=app, count=0))
        resp = client.get("/api/applications/101/status")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status_info"]["label"]
        assert body["allowed_next_statuses"] == ["payment_verified", "withdrawn"]
        assert [a["action_type"] for a in body["pending_actions"]] == ["pay_fee"]


class _HealthyDb:
    async def health_check(self):
        return {"healthy": True, "message": "PostgreSQL connection OK"}


def test_health_reports_api_and_database(app, make_client):
    client = make_client(admin(), make_mock_session())
    app.dependency_overrides[get_db_service] = lambda: _HealthyDb()
    resp = client.get("/health/")
    assert resp.status_code == 200
    names = [item["name"] for item in resp.json()]
    assert names == ["API", "Database"]


class _DownDb:
    async def health_check(self):
        return {"healthy": False, "message": "PostgreSQL connection failed: timeout"}


def test_health_is_503_when_database_down(app, make_client):
    client = make_client(admin(), make_mock_session())
    app.dependency_overrides[get_db_service] = lambda: _DownDb()
    resp = client.get("/health/")
    assert resp.status_code == 503
    db_item = next(item for item in resp.json() if item["name"] == "Database")
    assert db_item["status"] == "unhealthy"
