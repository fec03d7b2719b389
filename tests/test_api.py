"""End-to-end HTTP flows through the FastAPI app."""

import logging

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.exc import OperationalError

from daybook.core.config import settings
from daybook.middlewares import principal_ctx_var
from daybook.models.entry import Entry
from daybook.routers import api_auth

COOKIE = settings.SESSION_COOKIE_NAME


def signup(client, username, password="secret1", **extra):
    return client.post("/api/v1/auth/signup", json={"username": username, "password": password, **extra})


def entry_payload(activity="Test"):
    return {
        "start_time": "2024-05-01T09:00:00Z",
        "end_time": "2024-05-01T09:30:00Z",
        "activity_name": activity,
        "category": "work",
    }


@pytest.fixture()
def statements(engine):
    seen: list[str] = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    try:
        yield seen
    finally:
        event.remove(engine, "before_cursor_execute", record)


def test_entry_lifecycle(client):
    response = signup(client, "alice")
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alice"
    assert client.cookies.get(COOKIE)
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie
    assert "samesite=lax" in set_cookie
    assert f"max-age={30 * 24 * 60 * 60}" in set_cookie

    created = client.post("/api/v1/entries", json=entry_payload())
    assert created.status_code == 200
    entry = created.json()["entry"]
    assert entry["id"]
    assert entry["duration_minutes"] == 30

    updated = client.put(f"/api/v1/entries/{entry['id']}", json=entry_payload("Test 2"))
    assert updated.status_code == 200
    assert updated.json()["entry"]["activity_name"] == "Test 2"

    deleted = client.delete(f"/api/v1/entries/{entry['id']}")
    assert deleted.status_code == 200
    assert deleted.json() == {"ok": True}

    listed = client.get("/api/v1/entries")
    assert listed.status_code == 200
    assert listed.json() == {"entries": []}


def test_duplicate_signup_conflicts(client_factory):
    assert signup(client_factory(), "bob").status_code == 200

    again = signup(client_factory(), "bob")

    assert again.status_code == 409
    assert again.json()["code"] == "duplicate_identifier"


def test_cross_user_category_access_is_denied(client_factory, monkeypatch):
    alice = client_factory()
    bob = client_factory()
    signup(alice, "alice")
    signup(bob, "bob")
    category_id = alice.post("/api/v1/categories", json={"name": "work"}).json()["category"]["id"]

    attempt = bob.put(f"/api/v1/categories/{category_id}", json={"name": "stolen"})
    assert attempt.status_code == 403
    assert attempt.json()["code"] == "forbidden"
    assert bob.delete(f"/api/v1/categories/{category_id}").status_code == 403
    assert bob.get(f"/api/v1/categories/{category_id}").status_code == 403

    monkeypatch.setattr(settings, "OWNERSHIP_HIDE_EXISTENCE", True)
    assert bob.put(f"/api/v1/categories/{category_id}", json={"name": "stolen"}).status_code == 404

    assert [c["name"] for c in alice.get("/api/v1/categories").json()["categories"]] == ["work"]
    assert bob.get("/api/v1/categories").json() == {"categories": []}


def test_unknown_resource_is_not_found(client):
    signup(client, "alice")
    response = client.put("/api/v1/reflections/999", json={"date": "2024-05-01", "content": "x"})
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_duplicate_category_name_conflicts(client):
    signup(client, "alice")
    assert client.post("/api/v1/categories", json={"name": "work"}).status_code == 200

    response = client.post("/api/v1/categories", json={"name": "work"})

    assert response.status_code == 409
    assert response.json()["code"] == "duplicate_name"


def test_unauthenticated_request_never_reaches_the_store(client, statements):
    response = client.post("/api/v1/entries", json=entry_payload())

    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"
    assert statements == []

    for path in ("/api/v1/entries", "/api/v1/categories", "/api/v1/reflections", "/api/v1/entries/export/json"):
        assert client.get(path).status_code == 401
    assert client.delete("/api/v1/auth/account").status_code == 401
    assert statements == []


def test_bogus_token_only_touches_session_lookup(client, statements):
    client.cookies.set(COOKIE, "forged-token")

    response = client.delete("/api/v1/entries/1")

    assert response.status_code == 401
    assert statements
    assert all("sessions" in statement for statement in statements)
    assert not any("entries" in statement for statement in statements)


def test_bearer_header_is_accepted(client_factory):
    browser = client_factory()
    signup(browser, "alice")
    token = browser.cookies.get(COOKIE)

    headless = client_factory()
    response = headless.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["user"]["username"] == "alice"


def test_login_logout(client_factory):
    signup(client_factory(), "alice", email="alice@example.com")
    client = client_factory()

    wrong = client.post("/api/v1/auth/login", json={"username": "alice", "password": "wrong-pass"})
    unknown = client.post("/api/v1/auth/login", json={"username": "mallory", "password": "secret1"})
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()

    ok = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret1"})
    assert ok.status_code == 200
    assert client.get("/api/v1/auth/me").status_code == 200

    token = client.cookies.get(COOKIE)
    out = client.post("/api/v1/auth/logout")
    assert out.status_code == 200
    assert out.json() == {"ok": True}
    assert COOKIE in out.headers["set-cookie"]
    assert client.get("/api/v1/entries").status_code == 401

    # Replaying the old token after logout fails, and logging out again is harmless
    replay = client_factory()
    assert replay.get("/api/v1/entries", headers={"Authorization": f"Bearer {token}"}).status_code == 401
    assert replay.post("/api/v1/auth/logout").status_code == 200


def test_invalid_input_is_rejected(client):
    short = signup(client, "alice", password="123")
    assert short.status_code == 400
    assert short.json()["code"] == "invalid_input"

    signup(client, "alice")
    backwards = entry_payload()
    backwards["end_time"] = "2024-05-01T08:00:00Z"
    assert client.post("/api/v1/entries", json=backwards).status_code == 400
    assert client.post("/api/v1/entries", json={"activity_name": "no times"}).status_code == 400
    assert client.post("/api/v1/reflections", json={"date": "2024-05-01", "content": "   "}).status_code == 400


def test_delete_account_ends_every_session(client_factory, session_factory):
    laptop = client_factory()
    signup(laptop, "alice")
    phone = client_factory()
    phone.post("/api/v1/auth/login", json={"username": "alice", "password": "secret1"})
    laptop.post("/api/v1/entries", json=entry_payload())
    laptop.post("/api/v1/categories", json={"name": "work"})
    laptop.post("/api/v1/reflections", json={"date": "2024-05-01", "content": "done"})

    response = laptop.delete("/api/v1/auth/account")

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert laptop.get("/api/v1/auth/me").status_code == 401
    assert phone.get("/api/v1/entries").status_code == 401
    relogin = client_factory().post("/api/v1/auth/login", json={"username": "alice", "password": "secret1"})
    assert relogin.status_code == 401
    db = session_factory()
    try:
        assert db.execute(select(func.count()).select_from(Entry)).scalar_one() == 0
    finally:
        db.close()


def test_export_json(client_factory):
    alice = client_factory()
    bob = client_factory()
    signup(alice, "alice")
    signup(bob, "bob")
    alice.post("/api/v1/entries", json=entry_payload("mine"))
    bob.post("/api/v1/entries", json=entry_payload("theirs"))
    alice.post("/api/v1/reflections", json={"date": "2024-05-01", "content": "quiet"})

    response = alice.get("/api/v1/entries/export/json")

    assert response.status_code == 200
    body = response.json()
    assert [e["activity_name"] for e in body["entries"]] == ["mine"]
    assert [r["content"] for r in body["reflections"]] == ["quiet"]
    assert body["categories"] == []


def test_store_failure_is_reported_without_detail(client, monkeypatch):
    def broken_destroy(db, token):
        raise OperationalError("DELETE FROM sessions", {}, Exception("database is locked"))

    monkeypatch.setattr(api_auth, "destroy_session", broken_destroy)

    response = client.post("/api/v1/auth/logout")

    assert response.status_code == 500
    assert response.json()["code"] == "internal_failure"
    assert "locked" not in response.text


def test_health_and_request_id(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["X-Request-ID"] == "abc-123"


def test_signup_identifier_clashes_across_fields(client_factory):
    assert signup(client_factory(), "alice", email="alice@example.com").status_code == 200

    reused_email = signup(client_factory(), "bob", email="ALICE@example.com")
    assert reused_email.status_code == 409
    assert reused_email.json()["code"] == "duplicate_identifier"

    email_as_username = signup(client_factory(), "alice@example.com")
    assert email_as_username.status_code == 400
    assert email_as_username.json()["code"] == "invalid_input"

    login = client_factory().post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["user"]["username"] == "alice"


def test_oversized_id_is_not_found(client):
    signup(client, "alice")

    for collection in ("entries", "categories", "reflections"):
        response = client.get(f"/api/v1/{collection}/99999999999999999999")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


def test_wrapped_single_resources(client):
    signup(client, "alice")
    reflection = client.post("/api/v1/reflections", json={"date": "2024-05-01", "content": "calm"}).json()["reflection"]

    fetched = client.get(f"/api/v1/reflections/{reflection['id']}")

    assert fetched.json() == {"reflection": reflection}
    assert client.get("/api/v1/reflections").json() == {"reflections": [reflection]}


class _PrincipalRecorder(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.INFO)
        self.seen: list[tuple[str, str | None]] = []

    def emit(self, record):
        self.seen.append((record.getMessage(), principal_ctx_var.get()))


@pytest.fixture()
def principal_log(caplog):
    caplog.set_level(logging.INFO, logger="daybook")
    recorder = _PrincipalRecorder()
    logging.getLogger("daybook").addHandler(recorder)
    try:
        yield recorder.seen
    finally:
        logging.getLogger("daybook").removeHandler(recorder)


def test_auth_events_carry_the_principal(client, principal_log):
    user_id = signup(client, "alice").json()["user"]["id"]
    principal = f"user:{user_id}"

    client.post("/api/v1/auth/logout")
    client.post("/api/v1/auth/login", json={"username": "alice", "password": "secret1"})
    client.delete("/api/v1/auth/account")

    recorded = dict(principal_log)
    for event_name in ("auth.signup", "auth.logout", "auth.login", "account.deleted", "request.completed"):
        assert recorded[event_name] == principal
