from datetime import timedelta

from sqlalchemy.exc import OperationalError

from newsroom.config import settings
from newsroom.core.clock import as_utc, utcnow
from newsroom.core.security import hash_session_token
from newsroom.core.tokens import generate_session_token
from newsroom.models.session import UserSession
from newsroom.models.user import User
from newsroom.services.session_service import session_service


COOKIE = settings.SESSION_COOKIE_NAME

REGISTRATION = {
    "username": "reporter",
    "email": "Reporter@Example.com",
    "full_name": "Rina Reporter",
    "password": "secret123",
    "password_confirm": "secret123",
}


def _register(client, **overrides):
    payload = dict(REGISTRATION)
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


def test_register_starts_session(client, db):
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["username"] == "reporter"
    assert body["user"]["email"] == "reporter@example.com"
    assert "password_hash" not in body["user"]
    assert body["expires_at"]

    set_cookie = response.headers["set-cookie"]
    assert f"{COOKIE}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "Path=/" in set_cookie
    assert "samesite=lax" in set_cookie.lower()

    token = client.cookies.get(COOKIE)
    assert token
    assert db.get(UserSession, hash_session_token(token)) is not None


def test_me_requires_session(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "You must be logged in"
    assert body["path"] == "/api/v1/auth/me"


def test_me_after_register(client):
    _register(client)
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 200
    assert response.json()["username"] == "reporter"


def test_register_validation_errors(client, db):
    response = _register(client, password_confirm="different1")
    assert response.status_code == 422
    assert response.json()["error"] == "Validation failed"

    assert _register(client, username="a b").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422
    assert _register(client, password="123", password_confirm="123").status_code == 422
    assert db.query(User).count() == 0


def test_register_duplicates(client):
    assert _register(client).status_code == 201

    response = _register(client, email="other@example.com")
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "username"}

    response = _register(client, username="someone", email="REPORTER@example.com")
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "email"}


def test_login_with_email_or_username(client):
    _register(client)
    client.cookies.clear()

    for identifier in ("reporter", "reporter@example.com"):
        response = client.post(
            "/api/v1/auth/login",
            json={"identifier": identifier, "password": "secret123"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "reporter"
        assert client.cookies.get(COOKIE)


def test_login_wrong_password(client):
    _register(client)
    client.cookies.clear()

    response = client.post(
        "/api/v1/auth/login",
        json={"identifier": "reporter", "password": "wrong-pass"},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid username/email or password"
    assert client.cookies.get(COOKIE) is None


def test_login_is_throttled(client):
    _register(client)
    client.cookies.clear()
    attempt = {"identifier": "reporter", "password": "wrong-pass"}

    for _ in range(settings.LOGIN_RATE_LIMIT_PER_MINUTE):
        assert client.post("/api/v1/auth/login", json=attempt).status_code == 401

    response = client.post("/api/v1/auth/login", json=attempt)
    assert response.status_code == 429


def test_logout_deletes_session(client, db):
    _register(client)
    token = client.cookies.get(COOKIE)

    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    assert db.get(UserSession, hash_session_token(token)) is None
    assert client.cookies.get(COOKIE) is None

    assert client.get("/api/v1/auth/me").status_code == 401


def test_logout_without_session(client):
    response = client.post("/api/v1/auth/logout")
    assert response.status_code == 200


def test_stale_session_is_renewed(client, db, make_user):
    user = make_user()
    token = generate_session_token()
    session_service.create_session(db, token, user.id, now=utcnow() - timedelta(days=20))

    response = client.get("/api/v1/auth/me", headers={"Cookie": f"{COOKIE}={token}"})

    assert response.status_code == 200
    assert f"{COOKIE}={token}" in response.headers["set-cookie"]
    db.expire_all()
    session = session_service.get_session(db, hash_session_token(token))
    assert as_utc(session.expires_at) > utcnow() + timedelta(days=29)


def test_expired_session_rejected(client, db, make_user):
    user = make_user()
    token = generate_session_token()
    session_service.create_session(db, token, user.id, now=utcnow() - timedelta(days=31))

    response = client.get("/api/v1/auth/me", headers={"Cookie": f"{COOKIE}={token}"})

    assert response.status_code == 401
    assert "Max-Age=0" in response.headers["set-cookie"]
    db.expire_all()
    assert db.get(UserSession, hash_session_token(token)) is None


def test_update_profile(client):
    _register(client)
    response = client.put(
        "/api/v1/account/profile",
        json={
            "username": "rina",
            "email": "rina@example.com",
            "full_name": "Rina R.",
            "about_me": "Covers technology",
            "profile_picture": "",
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "rina"
    assert body["about_me"] == "Covers technology"
    assert body["profile_picture"] is None


def test_update_profile_conflict(client, make_user):
    make_user(username="taken", email="taken@example.com")
    _register(client)

    response = client.put(
        "/api/v1/account/profile",
        json={"username": "taken", "email": "reporter@example.com", "full_name": "Rina"},
    )
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "username"}


def test_change_password(client):
    _register(client)

    response = client.put(
        "/api/v1/account/password",
        json={"current_password": "wrong-one", "new_password": "newpass99", "confirm_password": "newpass99"},
    )
    assert response.status_code == 401

    response = client.put(
        "/api/v1/account/password",
        json={"current_password": "secret123", "new_password": "newpass99", "confirm_password": "newpass99"},
    )
    assert response.status_code == 200

    client.cookies.clear()
    response = client.post("/api/v1/auth/login", json={"identifier": "reporter", "password": "newpass99"})
    assert response.status_code == 200


def test_delete_account_requires_confirmation(client, db):
    _register(client)

    response = client.request("DELETE", "/api/v1/account", json={"confirm_text": "delete"})
    assert response.status_code == 400
    assert response.json()["details"] == {"expected": "DELETE"}
    assert db.query(User).count() == 1


def test_delete_account(client, db):
    _register(client)

    response = client.request("DELETE", "/api/v1/account", json={"confirm_text": "DELETE"})

    assert response.status_code == 200
    assert db.query(User).count() == 0
    assert db.query(UserSession).count() == 0
    assert client.get("/api/v1/auth/me").status_code == 401


def test_root_and_security_headers(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == settings.APP_NAME
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


def test_profile_rejects_blank_full_name(client, db):
    _register(client)

    response = client.put(
        "/api/v1/account/profile",
        json={"username": "reporter", "email": "reporter@example.com", "full_name": "   "},
    )

    assert response.status_code == 422
    db.expire_all()
    assert db.query(User).one().full_name == "Rina Reporter"


def test_timestamps_are_utc(client):
    body = _register(client).json()

    for value in (body["user"]["created_at"], body["expires_at"]):
        assert value.endswith(("Z", "+00:00"))


def test_error_keeps_renewed_cookie(client, db, make_user):
    user = make_user()
    token = generate_session_token()
    session_service.create_session(db, token, user.id, now=utcnow() - timedelta(days=20))

    response = client.put(
        "/api/v1/account/password",
        headers={"Cookie": f"{COOKIE}={token}"},
        json={"current_password": "wrong-one", "new_password": "newpass99", "confirm_password": "newpass99"},
    )

    assert response.status_code == 401
    set_cookie = response.headers["set-cookie"]
    assert f"{COOKIE}={token}" in set_cookie
    assert "Max-Age=0" not in set_cookie
    db.expire_all()
    session = session_service.get_session(db, hash_session_token(token))
    assert as_utc(session.expires_at) > utcnow() + timedelta(days=29)


def test_store_errors_become_500(client, db, monkeypatch):
    def _broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("server closed the connection unexpectedly"))

    monkeypatch.setattr(db, "query", _broken_query)

    response = client.post(
        "/api/v1/auth/login",
        json={"identifier": "reporter", "password": "secret123"},
    )

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "A database error occurred. Please try again later."
    assert body["path"] == "/api/v1/auth/login"
