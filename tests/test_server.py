"""HTTP layer tests: routes, auth headers and error mapping.

The app is built with an in-memory repository (``MockRepository`` from
test_service) and ``get_db`` overridden with an AsyncMock, so no database
is involved.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

import intake_server.app as app_module
from intake_core.service import IntakeService
from intake_server.app import create_app
from intake_server.config import ServerSettings
from intake_server.dependencies import get_db
from test_service import MockIntakeRow, MockRepository, MockUser

OWNER = {"X-User-ID": "alice"}
STAFF = {"X-Admin-Key": "secret"}


def build_client(settings=None, repo=None, **client_kwargs):
    if settings is None:
        settings = ServerSettings(admin_api_key="secret")
    if repo is None:
        repo = MockRepository(users={"alice": MockUser(id="alice", name="Alice")})
    app = create_app(settings=settings, service=IntakeService(repo=repo))

    async def override_db():
        yield AsyncMock()

    app.dependency_overrides[get_db] = override_db
    return TestClient(app, **client_kwargs)


@pytest.fixture
def client():
    return build_client()


def create(client, form, headers=OWNER):
    resp = client.post("/api/v1/intakes", json=form, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# =====================================================================
# Owner endpoints
# =====================================================================


class TestOwnerEndpoints:

    def test_identity_header_required(self, client, full_form):
        resp = client.post("/api/v1/intakes", json=full_form)
        assert resp.status_code == 401

    def test_submit(self, client, full_form):
        body = create(client, full_form)

        assert body["owner_id"] == "alice"
        assert body["status"] == "submitted"
        assert body["short_title"] == "Budget Tracker"
        assert body["answers"]["v"] == 2
        assert body["audience"] == ["freelancers"]

    def test_incomplete_submission_is_422(self, client, full_form):
        full_form["q2_target"] = ""
        full_form["q13_return_items"] = []

        resp = client.post("/api/v1/intakes", json=full_form, headers=OWNER)

        assert resp.status_code == 422
        body = resp.json()
        assert body["first_invalid_question"] == "Q2"
        assert [e["question"] for e in body["errors"]] == ["Q2", "Q13"]

    def test_list_mine(self, client, form_states):
        create(client, form_states["full_submission"])
        create(client, form_states["ai_generator"], headers={"X-User-ID": "bob"})

        resp = client.get("/api/v1/intakes", headers=OWNER)

        assert resp.status_code == 200
        page = resp.json()
        assert page["total"] == 1
        assert page["items"][0]["project_name"] == "Budget Tracker"

    def test_page_limit_is_bounded(self, client):
        resp = client.get("/api/v1/intakes?limit=0", headers=OWNER)
        assert resp.status_code == 422

    def test_get_mine_and_not_theirs(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        assert client.get(f"/api/v1/intakes/{intake_id}", headers=OWNER).status_code == 200

        resp = client.get(f"/api/v1/intakes/{intake_id}", headers={"X-User-ID": "bob"})
        assert resp.status_code == 404
        assert resp.json() == {"detail": "Resource not found"}

    def test_form_round_trip(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        resp = client.get(f"/api/v1/intakes/{intake_id}/form", headers=OWNER)

        assert resp.status_code == 200
        form = resp.json()
        assert form["projectName"] == "Budget Tracker"
        assert form["q7_revenue_model"] == "Abonnement mensuel"
        assert form["q15_store_what"] == ["Comptes utilisateurs", "Historique"]

    def test_form_of_legacy_record_is_409(self, legacy_records):
        repo = MockRepository()
        client = build_client(repo=repo)
        row = MockIntakeRow(owner_id="alice", answers=dict(legacy_records["brochure"]))
        repo.rows[row.id] = row

        resp = client.get(f"/api/v1/intakes/{row.id}/form", headers=OWNER)
        assert resp.status_code == 409

    def test_edit_of_legacy_record_is_409(self, legacy_records, full_form):
        repo = MockRepository()
        client = build_client(repo=repo)
        row = MockIntakeRow(owner_id="alice", answers=dict(legacy_records["marketplace"]))
        repo.rows[row.id] = row

        resp = client.put(f"/api/v1/intakes/{row.id}", json=full_form, headers=OWNER)

        assert resp.status_code == 409
        assert "v" not in repo.rows[row.id].answers

    def test_malformed_stored_record_is_500(self):
        repo = MockRepository()
        client = build_client(repo=repo, raise_server_exceptions=False)
        row = MockIntakeRow(owner_id="alice", answers={"v": 2, "tech": "broken"})
        repo.rows[row.id] = row

        resp = client.get(f"/api/v1/intakes/{row.id}/form", headers=OWNER)

        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}

    def test_edit(self, client, full_form, form_states):
        intake_id = create(client, full_form)["id"]

        resp = client.put(
            f"/api/v1/intakes/{intake_id}",
            json=form_states["nothing_selected"],
            headers=OWNER,
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["project_name"] == "Carte de visite"
        assert body["needs_db"] is False
        assert body["usage_type"] == "one_time"

    def test_incomplete_edit_is_422(self, client, full_form):
        intake_id = create(client, full_form)["id"]
        full_form["projectName"] = "  "

        resp = client.put(f"/api/v1/intakes/{intake_id}", json=full_form, headers=OWNER)

        assert resp.status_code == 422
        assert resp.json()["first_invalid_question"] == "Q0"

    def test_edit_after_pickup_is_409(self, client, full_form):
        intake_id = create(client, full_form)["id"]
        client.patch(
            f"/api/v1/admin/intakes/{intake_id}/status",
            json={"status": "under_analysis"},
            headers=STAFF,
        )

        resp = client.put(f"/api/v1/intakes/{intake_id}", json=full_form, headers=OWNER)

        assert resp.status_code == 409
        assert resp.json() == {"detail": "Operation not allowed in the current state"}

    def test_bad_uuid_is_422(self, client):
        assert client.get("/api/v1/intakes/not-a-uuid", headers=OWNER).status_code == 422

    def test_proxy_secret(self):
        client = build_client(
            settings=ServerSettings(admin_api_key="secret", trusted_proxy_secret="s3"),
        )

        missing = client.get("/api/v1/intakes", headers=OWNER)
        wrong = client.get("/api/v1/intakes", headers={**OWNER, "X-Proxy-Secret": "nope"})
        right = client.get("/api/v1/intakes", headers={**OWNER, "X-Proxy-Secret": "s3"})

        assert missing.status_code == 403
        assert wrong.status_code == 403
        assert right.status_code == 200

    def test_integrity_failure_is_500(self, monkeypatch, full_form):
        monkeypatch.setenv("INTAKE_ENV", "development")
        client = build_client(raise_server_exceptions=False)
        full_form["q20_style"] = "Néon"

        resp = client.post("/api/v1/intakes", json=full_form, headers=OWNER)

        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}


# =====================================================================
# Staff endpoints
# =====================================================================


class TestStaffEndpoints:

    def test_key_required(self, client):
        assert client.get("/api/v1/admin/intakes").status_code == 401

    def test_wrong_key(self, client):
        resp = client.get("/api/v1/admin/intakes", headers={"X-Admin-Key": "guess"})
        assert resp.status_code == 403

    def test_disabled_without_configured_key(self):
        client = build_client(settings=ServerSettings())
        resp = client.get("/api/v1/admin/intakes", headers=STAFF)
        assert resp.status_code == 403

    def test_list_with_owner_and_filter(self, client, form_states):
        first = create(client, form_states["full_submission"])
        create(client, form_states["ai_generator"], headers={"X-User-ID": "bob"})
        client.patch(
            f"/api/v1/admin/intakes/{first['id']}/status",
            json={"status": "under_analysis"},
            headers=STAFF,
        )

        everything = client.get("/api/v1/admin/intakes", headers=STAFF).json()
        filtered = client.get(
            "/api/v1/admin/intakes?status=under_analysis", headers=STAFF,
        ).json()

        assert everything["total"] == 2
        assert filtered["total"] == 1
        assert filtered["items"][0]["owner"]["name"] == "Alice"

    def test_unknown_status_filter_is_422(self, client):
        resp = client.get("/api/v1/admin/intakes?status=archived", headers=STAFF)
        assert resp.status_code == 422

    def test_stats(self, client, form_states):
        create(client, form_states["full_submission"])
        create(client, form_states["ai_generator"])

        resp = client.get("/api/v1/admin/intakes/stats", headers=STAFF)

        assert resp.status_code == 200
        assert resp.json() == {
            "total": 2,
            "submitted": 2,
            "under_analysis": 0,
            "analysis_sent": 0,
            "waiting_validation": 0,
            "approved_for_dev": 0,
        }

    def test_get_expands_owner(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        body = client.get(f"/api/v1/admin/intakes/{intake_id}", headers=STAFF).json()

        assert body["owner"] == {"id": "alice", "email": None, "name": "Alice"}

    def test_get_missing_is_404(self, client):
        resp = client.get(f"/api/v1/admin/intakes/{uuid.uuid4()}", headers=STAFF)
        assert resp.status_code == 404

    def test_change_status(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        resp = client.patch(
            f"/api/v1/admin/intakes/{intake_id}/status",
            json={"status": "approved_for_dev"},
            headers=STAFF,
        )

        assert resp.status_code == 200
        assert resp.json()["status"] == "approved_for_dev"

    def test_change_status_rejects_unknown_value(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        resp = client.patch(
            f"/api/v1/admin/intakes/{intake_id}/status",
            json={"status": "done"},
            headers=STAFF,
        )

        assert resp.status_code == 422

    def test_send_analysis_and_owner_view(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        resp = client.post(
            f"/api/v1/admin/intakes/{intake_id}/analysis",
            json={"analysis": "Looks viable", "recommendation": ""},
            headers=STAFF,
        )

        assert resp.status_code == 200
        assert resp.json()["status"] == "analysis_sent"

        mine = client.get(f"/api/v1/intakes/{intake_id}", headers=OWNER).json()
        assert mine["analysis"] == "Looks viable"
        assert mine["recommendation"] is None
        assert mine["analysis_sent_at"] is not None

    def test_send_blank_analysis_is_400(self, client, full_form):
        intake_id = create(client, full_form)["id"]

        resp = client.post(
            f"/api/v1/admin/intakes/{intake_id}/analysis",
            json={"analysis": "  "},
            headers=STAFF,
        )

        assert resp.status_code == 400
        assert resp.json() == {"detail": "Invalid request"}


# =====================================================================
# Reference data
# =====================================================================


class TestReferenceEndpoints:

    def test_mappings(self, client):
        body = client.get("/api/v1/reference/mappings").json()
        assert {"label": "Freelances", "slug": "freelancers"} in body["target"]

    def test_single_mapping(self, client):
        resp = client.get("/api/v1/reference/mappings/site_type")
        assert resp.status_code == 200
        assert [o["slug"] for o in resp.json()] == ["static", "interactive", "intelligent"]

    def test_unknown_mapping_is_404(self, client):
        assert client.get("/api/v1/reference/mappings/nope").status_code == 404

    def test_legacy_mappings(self, client):
        resp = client.get("/api/v1/reference/mappings/legacy")
        assert resp.status_code == 200
        assert resp.json()

    def test_statuses_in_order(self, client):
        body = client.get("/api/v1/reference/statuses").json()
        assert [s["value"] for s in body] == [
            "submitted",
            "under_analysis",
            "analysis_sent",
            "waiting_validation",
            "approved_for_dev",
        ]
        assert body[0]["label"] == "Soumis"

    def test_required_questions(self, client):
        body = client.get("/api/v1/reference/required-questions").json()
        assert body[0]["question"] == "Q0"
        assert len(body) == 19


# =====================================================================
# Database wiring
# =====================================================================


class FakeSessionFactory:
    """Callable returning an async context manager around one AsyncMock session."""

    def __init__(self):
        self.session = AsyncMock()

    def __call__(self):
        return self

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, *exc_info):
        return False


class TestDatabaseWiring:

    def test_sessions_come_from_app_state(self, full_form):
        app = create_app(
            settings=ServerSettings(),
            service=IntakeService(repo=MockRepository()),
        )
        factory = FakeSessionFactory()
        app.state.session_factory = factory
        client = TestClient(app)

        resp = client.post("/api/v1/intakes", json=full_form, headers=OWNER)

        assert resp.status_code == 201
        factory.session.commit.assert_awaited_once()
        factory.session.rollback.assert_not_awaited()

    def test_failed_request_rolls_back(self):
        app = create_app(
            settings=ServerSettings(),
            service=IntakeService(repo=MockRepository()),
        )
        factory = FakeSessionFactory()
        app.state.session_factory = factory
        client = TestClient(app)

        resp = client.get(f"/api/v1/intakes/{uuid.uuid4()}", headers=OWNER)

        assert resp.status_code == 404
        factory.session.commit.assert_not_awaited()
        factory.session.rollback.assert_awaited_once()

    def test_lifespan_owns_the_engine(self, monkeypatch):
        engine = MagicMock()
        engine.dispose = AsyncMock()
        factory = FakeSessionFactory()
        monkeypatch.setattr(app_module, "create_engine", lambda: engine)
        monkeypatch.setattr(app_module, "create_session_factory", lambda e: factory)
        app = create_app(settings=ServerSettings())

        with TestClient(app):
            assert app.state.engine is engine
            assert app.state.session_factory is factory
            engine.dispose.assert_not_awaited()

        engine.dispose.assert_awaited_once()
