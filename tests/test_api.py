import pytest
from fastapi.testclient import TestClient
from jose import jwt

from dsa_tracker.api.deps import AdminPolicy, get_admin_policy, get_current_user, get_db, get_service
from dsa_tracker.config import settings
from dsa_tracker.main import app
from dsa_tracker.schemas.user import UserContext


@pytest.fixture
def client(db_session, user_ctx, make_service, stats_factory):
    service = make_service(leetcode=stats_factory(), codeforces=None)

    def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = lambda: user_ctx
    app.dependency_overrides[get_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health():
    with TestClient(app) as c:
        assert c.get("/health").json()["status"] == "ok"


def test_missing_token_is_rejected(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        resp = TestClient(app).get("/api/v1/platforms")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 401


def test_bearer_token_identifies_caller(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    token = jwt.encode(
        {"sub": "user_jwt", "email": "jwt@example.com"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM
    )
    try:
        c = TestClient(app)
        ok = c.get("/api/v1/platforms/limits", headers={"Authorization": f"Bearer {token}"})
        bad = c.get("/api/v1/platforms/limits", headers={"Authorization": "Bearer not-a-jwt"})
    finally:
        app.dependency_overrides.clear()

    assert ok.status_code == 200
    assert ok.json()["maxPlatforms"] == 2
    assert bad.status_code == 401


def test_link_list_sync_unlink_flow(client):
    resp = client.post("/api/v1/platforms/link", json={"platform": "leetcode", "username": "alice"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["is_new_link"] is True
    assert body["data"]["platform"] == "LEETCODE"
    assert body["data"]["stats"]["totalSolved"] == 16

    listed = client.get("/api/v1/platforms").json()
    assert [p["username"] for p in listed] == ["alice"]

    limits = client.get("/api/v1/platforms/limits").json()
    assert limits["platformsLinked"] == 1
    assert limits["platformsRemaining"] == 1

    synced = client.post("/api/v1/platforms/sync", json={"platform": "LEETCODE"})
    assert synced.status_code == 200
    assert synced.json()["stats"]["syncType"] == "manual"

    unlinked = client.post("/api/v1/platforms/unlink", json={"platform": "LEETCODE"})
    assert unlinked.status_code == 200
    assert client.get("/api/v1/platforms").json() == []


def test_link_errors_map_to_status_codes(client):
    missing = client.post("/api/v1/platforms/link", json={"platform": "codeforces", "username": "ghost"})
    assert missing.status_code == 404
    assert missing.json()["detail"]["error"] == "username_not_found"

    blank = client.post("/api/v1/platforms/link", json={"platform": "leetcode", "username": ""})
    assert blank.status_code == 400

    not_linked = client.post("/api/v1/platforms/sync", json={"platform": "LEETCODE"})
    assert not_linked.status_code == 404
    assert not_linked.json()["detail"]["error"] == "not_linked"


def test_verify_does_not_persist(client):
    resp = client.post("/api/v1/platforms/verify", json={"platform": "leetcode", "username": "alice"})
    assert resp.status_code == 200
    assert resp.json()["data"]["totalSolved"] == 16
    assert client.get("/api/v1/platforms").json() == []


def test_sync_all_reports_each_platform(client):
    client.post("/api/v1/platforms/link", json={"platform": "leetcode", "username": "alice"})

    resp = client.post("/api/v1/platforms/sync-all")
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert [(r["platform"], r["success"]) for r in results] == [("LEETCODE", True)]


def test_sync_logs_require_admin(client):
    app.dependency_overrides[get_admin_policy] = lambda: AdminPolicy([])
    assert client.get("/api/v1/admin/sync-logs").status_code == 403

    app.dependency_overrides[get_admin_policy] = lambda: AdminPolicy(["coder@example.com"])
    client.post("/api/v1/platforms/link", json={"platform": "leetcode", "username": "alice"})
    resp = client.get("/api/v1/admin/sync-logs", params={"platform": "leetcode"})
    assert resp.status_code == 200
    assert [entry["data"]["action"] for entry in resp.json()] == ["link"]


def test_admin_policy_is_case_insensitive():
    policy = AdminPolicy([" Admin@Example.com ", ""])
    assert policy.is_admin(UserContext(external_id="a", email="admin@example.COM"))
    assert not policy.is_admin(UserContext(external_id="b", email=None))
