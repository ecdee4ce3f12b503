"""
ConstructFlow API: Unit Tests
=============================
Run:  pytest test_main.py -v --cov=main --cov=constructflow --cov-report=term-missing
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from main import app
from constructflow.controllers import team_controller
from constructflow.core.database import ensure_schema
from constructflow.core.dependencies import (
    get_engine, get_project_service, get_snapshot_service, get_team_service,
)
from constructflow.middleware import MutationPolicyMiddleware
from constructflow.repositories.project_repository import ProjectRepository
from constructflow.repositories.snapshot_repository import SnapshotRepository
from constructflow.repositories.team_repository import TeamRepository
from constructflow.services.project_service import ProjectService
from constructflow.services.snapshot_service import SnapshotService
from constructflow.services.team_service import TeamService

client = TestClient(app)


# ── Helpers ──────────────────────────────────────────────────────────────
def _broken_engine():
    """Engine whose every connection attempt fails like an unreachable DB."""
    broken = MagicMock()
    err = OperationalError("SELECT 1", {}, Exception("connection refused"))
    broken.connect.side_effect = err
    broken.begin.side_effect = err
    return broken


def _ticking_clock(start=datetime(2026, 1, 1, tzinfo=timezone.utc)):
    state = {"now": start}

    def clock():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    return clock


def _count(engine, table):
    with engine.connect() as conn:
        return conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar()


ALICE = {"name": "Rahim Momin", "role": "President", "email": "rahim@example.com",
         "phone": "2814554700", "avatarUrl": "https://picsum.photos/seed/rahim/128/128",
         "fallback": "RM"}


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["service"] == "constructflow-api"

    def test_readiness_ok(self):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["database"] == "connected"

    def test_readiness_fails_when_db_down(self):
        app.dependency_overrides[get_engine] = _broken_engine
        r = client.get("/health/ready")
        assert r.status_code == 503

    def test_metrics_endpoint(self):
        client.get("/api/team")
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "http_requests_total" in r.text

    def test_metrics_labelled_by_route_template(self):
        client.delete("/api/team/11111111-aaaa-4bbb-8ccc-000000000001")
        client.delete("/api/team/22222222-aaaa-4bbb-8ccc-000000000002")
        text_out = client.get("/metrics").text
        assert 'endpoint="/api/team/{member_id}"' in text_out
        assert "11111111-aaaa" not in text_out
        assert "22222222-aaaa" not in text_out
        series = [line for line in text_out.splitlines()
                  if line.startswith("http_requests_total{")
                  and 'method="DELETE"' in line and 'status="200"' in line
                  and "/api/team/" in line]
        assert len(series) == 1

    def test_unmatched_paths_share_one_label(self):
        client.get("/api/nowhere/abc-123")
        client.get("/api/nowhere/def-456")
        text_out = client.get("/metrics").text
        assert 'endpoint="unmatched"' in text_out
        assert "abc-123" not in text_out
        assert "def-456" not in text_out

    def test_request_id_propagated(self):
        r = client.get("/api/team", headers={"X-Request-ID": "my-req-42"})
        assert r.headers["X-Request-ID"] == "my-req-42"

    def test_request_id_generated(self):
        r = client.get("/api/team")
        assert r.headers["X-Request-ID"]


# ═══════════════════════════════════════════════════════════════════════════
# /api/team
# ═══════════════════════════════════════════════════════════════════════════
class TestListTeam:
    def test_empty(self):
        r = client.get("/api/team")
        assert r.status_code == 200
        assert r.json() == {"team": []}

    def test_ordered_by_creation(self, engine):
        service = TeamService(TeamRepository(engine), clock=_ticking_clock())
        app.dependency_overrides[get_team_service] = lambda: service
        for name in ("First", "Second", "Third"):
            client.post("/api/team", json={"name": name, "role": "VP"})
        names = [m["name"] for m in client.get("/api/team").json()["team"]]
        assert names == ["First", "Second", "Third"]

    def test_camel_cased_shape(self):
        client.post("/api/team", json=ALICE)
        member = client.get("/api/team").json()["team"][0]
        assert set(member) == {"id", "name", "role", "email", "phone", "avatarUrl", "fallback"}
        assert member["avatarUrl"] == ALICE["avatarUrl"]

    def test_backend_error_returns_500(self):
        app.dependency_overrides[get_team_service] = lambda: TeamService(TeamRepository(_broken_engine()))
        r = client.get("/api/team")
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to load team members"


class TestCreateTeamMember:
    def test_create_then_list_contains_one_new_record(self):
        r = client.post("/api/team", json={"name": "Asif Momin", "role": "VP"})
        assert r.status_code == 200
        member = r.json()["member"]
        assert member["id"]
        team = client.get("/api/team").json()["team"]
        matching = [m for m in team if m["id"] == member["id"]]
        assert len(matching) == 1
        assert matching[0]["name"] == "Asif Momin"
        assert matching[0]["role"] == "VP"

    def test_optional_fields_default_to_null(self):
        member = client.post("/api/team", json={"name": "Karim", "role": "Field Manager"}).json()["member"]
        assert member["email"] is None
        assert member["phone"] is None
        assert member["avatarUrl"] is None
        assert member["fallback"] is None

    def test_all_fields_round_trip(self):
        member = client.post("/api/team", json=ALICE).json()["member"]
        for key, value in ALICE.items():
            assert member[key] == value

    @pytest.mark.parametrize("body", [
        {"role": "VP"},
        {"name": "", "role": "VP"},
        {"name": "   ", "role": "VP"},
        {"name": "Asif"},
        {"name": "Asif", "role": ""},
        {},
    ])
    def test_missing_name_or_role_rejected(self, body, engine):
        r = client.post("/api/team", json=body)
        assert r.status_code == 400
        assert r.json()["error"] == "Name and role are required"
        assert _count(engine, "team_members") == 0

    def test_non_object_body_rejected(self):
        r = client.post("/api/team", json=["not", "an", "object"])
        assert r.status_code == 400
        assert "error" in r.json()

    def test_backend_error_returns_500(self):
        app.dependency_overrides[get_team_service] = lambda: TeamService(TeamRepository(_broken_engine()))
        r = client.post("/api/team", json={"name": "A", "role": "B"})
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to create team member"


class TestUpdateTeamMember:
    def test_full_replacement(self):
        member = client.post("/api/team", json=ALICE).json()["member"]
        r = client.put(f"/api/team/{member['id']}", json={"name": "Rahim M.", "role": "CEO"})
        assert r.status_code == 200
        updated = r.json()["member"]
        assert updated["id"] == member["id"]
        assert updated["name"] == "Rahim M."
        assert updated["role"] == "CEO"
        # omitted optionals are cleared, not kept
        assert updated["email"] is None
        assert updated["phone"] is None
        assert updated["avatarUrl"] is None
        assert updated["fallback"] is None

    def test_update_persists(self):
        member = client.post("/api/team", json={"name": "A", "role": "B"}).json()["member"]
        client.put(f"/api/team/{member['id']}", json={"name": "A2", "role": "B2", "email": "a@x.com"})
        stored = client.get("/api/team").json()["team"][0]
        assert stored["name"] == "A2"
        assert stored["email"] == "a@x.com"

    def test_unknown_id_never_creates(self, engine):
        r = client.put("/api/team/does-not-exist", json={"name": "Ghost", "role": "None"})
        assert r.status_code == 404
        assert r.json()["error"] == "Team member not found"
        assert _count(engine, "team_members") == 0

    def test_missing_role_rejected(self):
        member = client.post("/api/team", json={"name": "A", "role": "B"}).json()["member"]
        r = client.put(f"/api/team/{member['id']}", json={"name": "A"})
        assert r.status_code == 400
        assert client.get("/api/team").json()["team"][0]["role"] == "B"

    def test_backend_error_returns_500(self):
        app.dependency_overrides[get_team_service] = lambda: TeamService(TeamRepository(_broken_engine()))
        r = client.put("/api/team/abc", json={"name": "A", "role": "B"})
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to update team member"


class TestDeleteTeamMember:
    def test_delete_removes_row(self):
        member = client.post("/api/team", json={"name": "A", "role": "B"}).json()["member"]
        r = client.delete(f"/api/team/{member['id']}")
        assert r.status_code == 200
        assert r.json() == {"ok": True}
        assert client.get("/api/team").json()["team"] == []

    def test_delete_twice_is_idempotent(self):
        member = client.post("/api/team", json={"name": "A", "role": "B"}).json()["member"]
        first = client.delete(f"/api/team/{member['id']}")
        second = client.delete(f"/api/team/{member['id']}")
        assert first.json() == {"ok": True}
        assert second.status_code == 200
        assert second.json() == {"ok": True}

    def test_backend_error_returns_500(self):
        app.dependency_overrides[get_team_service] = lambda: TeamService(TeamRepository(_broken_engine()))
        r = client.delete("/api/team/abc")
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to delete team member"


# ═══════════════════════════════════════════════════════════════════════════
# /api/snapshot
# ═══════════════════════════════════════════════════════════════════════════
class TestSnapshots:
    def _use_clock(self, engine):
        service = SnapshotService(SnapshotRepository(engine), clock=_ticking_clock())
        app.dependency_overrides[get_snapshot_service] = lambda: service

    def test_create_returns_id_and_timestamp(self):
        r = client.post("/api/snapshot", json={"payload": {"a": 1}})
        assert r.status_code == 200
        body = r.json()
        assert body["ok"] is True
        assert body["snapshotId"]
        assert body["created_at"]

    def test_created_snapshot_listed_first(self, engine):
        self._use_clock(engine)
        client.post("/api/snapshot", json={"payload": {"older": True}})
        created = client.post("/api/snapshot", json={"payload": {"a": 1}}).json()
        r = client.get("/api/snapshot")
        assert r.status_code == 200
        body = r.json()
        assert body["ok"] is True
        assert body["count"] == 2
        assert body["data"][0]["id"] == created["snapshotId"]
        assert body["data"][0]["payload"] == {"a": 1}
        assert body["data"][0]["schemaVersion"] == 1

    def test_list_capped_at_twenty_newest_first(self, engine):
        self._use_clock(engine)
        ids = [client.post("/api/snapshot", json={"payload": {"n": n}}).json()["snapshotId"]
               for n in range(25)]
        body = client.get("/api/snapshot").json()
        assert body["count"] == 20
        assert len(body["data"]) == 20
        assert [s["id"] for s in body["data"]] == list(reversed(ids))[:20]
        stamps = [s["created_at"] for s in body["data"]]
        assert all(a > b for a, b in zip(stamps, stamps[1:]))

    @pytest.mark.parametrize("payload", [[1, 2, 3], "text", 0, False, {}])
    def test_payload_is_opaque(self, payload):
        assert client.post("/api/snapshot", json={"payload": payload}).status_code == 200
        assert client.get("/api/snapshot").json()["data"][0]["payload"] == payload

    def test_schema_version_recorded(self):
        client.post("/api/snapshot", json={"payload": {"x": 1}, "schemaVersion": 3})
        assert client.get("/api/snapshot").json()["data"][0]["schemaVersion"] == 3

    def test_invalid_schema_version_rejected(self):
        r = client.post("/api/snapshot", json={"payload": {"x": 1}, "schemaVersion": 0})
        assert r.status_code == 400
        assert r.json()["ok"] is False

    @pytest.mark.parametrize("body", [{}, {"payload": None}, {"other": 1}])
    def test_missing_payload_rejected(self, body, engine):
        r = client.post("/api/snapshot", json=body)
        assert r.status_code == 400
        assert r.json() == {"ok": False, "error": "Missing payload"}
        assert _count(engine, "snapshots") == 0

    def test_invalid_json_rejected(self):
        r = client.post("/api/snapshot", content=b"{not json",
                        headers={"Content-Type": "application/json"})
        assert r.status_code == 400
        assert r.json()["ok"] is False

    def test_backend_error_on_create(self):
        app.dependency_overrides[get_snapshot_service] = \
            lambda: SnapshotService(SnapshotRepository(_broken_engine()))
        r = client.post("/api/snapshot", json={"payload": {"a": 1}})
        assert r.status_code == 500
        assert r.json() == {"ok": False, "error": "Failed to save snapshot"}

    def test_backend_error_on_list(self):
        app.dependency_overrides[get_snapshot_service] = \
            lambda: SnapshotService(SnapshotRepository(_broken_engine()))
        r = client.get("/api/snapshot")
        assert r.status_code == 500
        assert r.json()["ok"] is False

    def test_unexpected_error_on_list_keeps_envelope(self):
        service = MagicMock()
        service.list_recent.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_snapshot_service] = lambda: service
        r = client.get("/api/snapshot")
        assert r.status_code == 500
        assert r.json() == {"ok": False, "error": "Failed to load snapshots"}

    def test_unexpected_error_on_create_keeps_envelope(self):
        service = MagicMock()
        service.create_snapshot.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_snapshot_service] = lambda: service
        r = client.post("/api/snapshot", json={"payload": {"a": 1}})
        assert r.status_code == 500
        assert r.json() == {"ok": False, "error": "Failed to save snapshot"}


class TestSnapshotsOnExistingTable:
    """A snapshots table created before schema_version existed."""

    def _legacy_engine(self):
        legacy = create_engine(
            "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False},
        )
        with legacy.begin() as conn:
            conn.execute(text(
                "CREATE TABLE snapshots (id VARCHAR(36) PRIMARY KEY, "
                "payload TEXT NOT NULL, created_at VARCHAR(40) NOT NULL)"
            ))
            conn.execute(text(
                "INSERT INTO snapshots (id, payload, created_at) "
                "VALUES ('old-1', '{\"projects\": []}', '2025-01-01T00:00:00.000000+00:00')"
            ))
        return legacy

    def test_schema_bootstrap_adds_column(self):
        legacy = self._legacy_engine()
        ensure_schema(legacy)
        ensure_schema(legacy)
        service = SnapshotService(SnapshotRepository(legacy))
        app.dependency_overrides[get_snapshot_service] = lambda: service

        created = client.post("/api/snapshot", json={"payload": {"a": 1}, "schemaVersion": 2})
        assert created.status_code == 200
        body = client.get("/api/snapshot").json()
        assert body["ok"] is True
        assert body["count"] == 2
        assert body["data"][0]["id"] == created.json()["snapshotId"]
        assert body["data"][0]["schemaVersion"] == 2
        assert body["data"][1]["id"] == "old-1"
        assert body["data"][1]["schemaVersion"] == 1


# ═══════════════════════════════════════════════════════════════════════════
# /api/projects
# ═══════════════════════════════════════════════════════════════════════════
class TestProjects:
    def test_create_defaults(self):
        r = client.post("/api/projects", json={})
        assert r.status_code == 201
        project = r.json()
        assert project["name"] == "Untitled project"
        assert project["description"] == ""
        assert project["id"]

    def test_create_without_body(self):
        assert client.post("/api/projects").status_code == 201

    def test_list_and_get(self):
        created = client.post("/api/projects", json={"name": "Bellaire Retail", "description": "Shell"}).json()
        listed = client.get("/api/projects").json()
        assert [p["id"] for p in listed] == [created["id"]]
        r = client.get(f"/api/projects/{created['id']}")
        assert r.status_code == 200
        assert r.json()["description"] == "Shell"

    def test_get_unknown_404(self):
        r = client.get("/api/projects/nope")
        assert r.status_code == 404
        assert r.json()["error"] == "Project not found"

    def test_patch_merges(self):
        created = client.post("/api/projects", json={"name": "Old", "description": "Keep"}).json()
        r = client.patch(f"/api/projects/{created['id']}", json={"name": "New"})
        assert r.status_code == 200
        assert r.json()["name"] == "New"
        assert r.json()["description"] == "Keep"
        assert r.json()["id"] == created["id"]

    def test_patch_unknown_404(self):
        assert client.patch("/api/projects/nope", json={"name": "X"}).status_code == 404

    def test_delete(self):
        created = client.post("/api/projects", json={"name": "Gone"}).json()
        r = client.delete(f"/api/projects/{created['id']}")
        assert r.status_code == 204
        assert r.content == b""
        assert client.delete(f"/api/projects/{created['id']}").status_code == 404

    def test_backend_error_returns_500(self):
        app.dependency_overrides[get_project_service] = \
            lambda: ProjectService(ProjectRepository(_broken_engine()))
        r = client.get("/api/projects")
        assert r.status_code == 500
        assert r.json()["error"] == "Failed to load projects"


# ═══════════════════════════════════════════════════════════════════════════
# /api/reports
# ═══════════════════════════════════════════════════════════════════════════
PROJECTS = [
    {
        "id": "p1", "name": "Clinic Remodel", "client": "Dr. Lee", "status": "Active",
        "finalBid": 100000,
        "budgetData": [{"originalBudget": 70000}],
        "expensesData": [{"category": "Framing", "amount": 30000},
                         {"category": "Electrical", "amount": 20000}],
    },
    {
        "id": "p2", "name": "Warehouse", "client": "Acme", "status": "Planning",
        "finalBid": 50000,
        "budgetData": [{"originalBudget": 60000}],
        "expensesData": [],
    },
]


class TestReports:
    def test_no_snapshot_404(self):
        r = client.get("/api/reports/profit-loss")
        assert r.status_code == 404
        assert r.json()["error"] == "No snapshot with projects found"

    def test_snapshot_without_projects_404(self):
        client.post("/api/snapshot", json={"payload": {"vendors": []}})
        assert client.get("/api/reports/budget").status_code == 404

    def test_profit_loss_from_latest_snapshot(self):
        client.post("/api/snapshot", json={"payload": {"projects": PROJECTS}})
        r = client.get("/api/reports/profit-loss")
        assert r.status_code == 200
        body = r.json()
        rows = {row["id"]: row for row in body["rows"]}
        assert rows["p1"]["cost"] == 50000
        assert rows["p2"]["cost"] == 60000
        assert rows["p2"]["profit"] == -10000
        assert body["totals"]["totalRevenue"] == 150000
        assert [c["name"] for c in body["chart"]] == ["Clinic Remodel", "Warehouse"]

    def test_budget_distribution(self):
        client.post("/api/snapshot", json={"payload": {"projects": PROJECTS}})
        body = client.get("/api/reports/budget").json()
        assert body["totals"]["totalBudget"] == 130000
        assert body["totals"]["totalSpent"] == 50000
        assert [d["name"] for d in body["distribution"]] == ["Framing", "Electrical"]
        assert all(d["fill"].startswith("hsl(") for d in body["distribution"])

    def test_project_status(self):
        client.post("/api/snapshot", json={"payload": {"projects": PROJECTS}})
        data = client.get("/api/reports/project-status").json()["data"]
        assert {d["name"]: d["value"] for d in data} == {"Active": 1, "Planning": 1}


# ═══════════════════════════════════════════════════════════════════════════
# MUTATION POLICY
# ═══════════════════════════════════════════════════════════════════════════
def _policy_client(keys):
    guarded = FastAPI()
    guarded.add_middleware(MutationPolicyMiddleware, api_keys=keys)
    guarded.include_router(team_controller.router)
    return TestClient(guarded)


class TestMutationPolicy:
    def test_disabled_without_keys(self):
        policy_client = _policy_client(set())
        assert policy_client.post("/api/team", json={"name": "A", "role": "B"}).status_code == 200

    def test_missing_key_401(self, engine):
        policy_client = _policy_client({"secret"})
        r = policy_client.post("/api/team", json={"name": "A", "role": "B"})
        assert r.status_code == 401
        assert _count(engine, "team_members") == 0

    def test_invalid_key_403(self):
        policy_client = _policy_client({"secret"})
        r = policy_client.delete("/api/team/x", headers={"X-API-Key": "wrong"})
        assert r.status_code == 403

    def test_valid_key_allows_write(self):
        policy_client = _policy_client({"secret"})
        r = policy_client.post("/api/team", json={"name": "A", "role": "B"},
                               headers={"X-API-Key": "secret"})
        assert r.status_code == 200

    def test_reads_never_checked(self):
        policy_client = _policy_client({"secret"})
        assert policy_client.get("/api/team").status_code == 200
