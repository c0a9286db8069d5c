from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy import func, select, update

from newshub.infrastructure.db.models import SessionToken, User

from .fakes import STRONG_PASSWORD


def _db(app: Flask):
    return app.extensions["newshub"].database


def test_register_login_logout_flow(app: Flask, client: FlaskClient) -> None:
    register = client.post(
        "/api/auth/register",
        json={"name": "Alice", "email": "Alice@Example.com", "password": STRONG_PASSWORD},
    )
    assert register.status_code == 201
    assert register.get_json()["user"]["email"] == "alice@example.com"
    assert client.get_cookie("sid") is not None

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["name"] == "Alice"

    logout = client.post("/api/auth/logout")
    assert logout.status_code == 204
    assert client.get_cookie("sid") is None
    assert client.get("/api/auth/me").status_code == 401

    login = client.post(
        "/api/auth/login", json={"email": "alice@example.com", "password": STRONG_PASSWORD}
    )
    assert login.status_code == 200
    assert login.get_json()["success"] is True
    assert "sid=" in login.headers["Set-Cookie"]

    with _db(app).session_scope() as session:
        assert session.scalar(select(func.count(User.id))) == 1
        assert session.scalar(select(func.count(SessionToken.token))) == 1
        stored = session.scalars(select(User)).one()
        assert stored.password_hash != STRONG_PASSWORD
        assert stored.password_hash.startswith("$2")


def test_duplicate_registration_conflicts(client: FlaskClient, register: Callable[..., dict]) -> None:
    register(email="bob@example.com", name="Bob")

    response = client.post(
        "/api/auth/register",
        json={"name": "Bobby", "email": "BOB@example.com", "password": STRONG_PASSWORD},
    )

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "EmailInUse"


def test_login_does_not_reveal_which_part_was_wrong(
    client: FlaskClient, register: Callable[..., dict]
) -> None:
    register(email="carol@example.com", name="Carol")
    client.post("/api/auth/logout")

    wrong_password = client.post(
        "/api/auth/login", json={"email": "carol@example.com", "password": "Wrong!Pass97"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": STRONG_PASSWORD}
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()
    assert wrong_password.get_json()["error"]["code"] == "InvalidCredentials"


def test_me_without_session_is_unauthorized(client: FlaskClient) -> None:
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "Unauthorized"


def test_expired_session_is_rejected_and_removed(
    app: Flask, client: FlaskClient, register: Callable[..., dict]
) -> None:
    register()
    with _db(app).session_scope() as session:
        session.execute(
            update(SessionToken).values(expires_at=datetime.now(UTC) - timedelta(minutes=1))
        )

    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert client.get_cookie("sid") is None
    with _db(app).session_scope() as session:
        assert session.scalar(select(func.count(SessionToken.token))) == 0


def test_session_of_deleted_user_is_rejected(
    app: Flask, client: FlaskClient, register: Callable[..., dict]
) -> None:
    register()
    with _db(app).session_scope() as session:
        # bypass ORM cascades to leave the session row orphaned
        session.execute(User.__table__.delete())

    assert client.get("/api/auth/me").status_code == 401
    with _db(app).session_scope() as session:
        assert session.scalar(select(func.count(SessionToken.token))) == 0


def test_update_profile(client: FlaskClient, register: Callable[..., dict]) -> None:
    register(email="dave@example.com", name="Dave")

    renamed = client.put("/api/auth/profile", json={"name": "David", "email": "David@Example.com"})
    assert renamed.status_code == 200
    assert renamed.get_json()["user"]["name"] == "David"
    assert renamed.get_json()["user"]["email"] == "david@example.com"

    wrong_current = client.put(
        "/api/auth/profile",
        json={"currentPassword": "Wrong!Pass97", "newPassword": "Kiwi#Storm84"},
    )
    assert wrong_current.status_code == 401
    assert wrong_current.get_json()["error"]["code"] == "InvalidPassword"

    changed = client.put(
        "/api/auth/profile",
        json={"currentPassword": STRONG_PASSWORD, "newPassword": "Kiwi#Storm84"},
    )
    assert changed.status_code == 200

    client.post("/api/auth/logout")
    old = client.post(
        "/api/auth/login", json={"email": "david@example.com", "password": STRONG_PASSWORD}
    )
    new = client.post(
        "/api/auth/login", json={"email": "david@example.com", "password": "Kiwi#Storm84"}
    )
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_profile_email_conflict(
    app: Flask, register: Callable[..., dict]
) -> None:
    other = app.test_client()
    register(email="erin@example.com", name="Erin", on=other)
    register(email="frank@example.com", name="Frank")

    response = app.test_client().put("/api/auth/profile", json={"name": "x"})
    assert response.status_code == 401

    conflict = other.put("/api/auth/profile", json={"email": "frank@example.com"})
    assert conflict.status_code == 409
    assert conflict.get_json()["error"]["code"] == "EmailInUse"


def test_security_headers_and_json_errors(client: FlaskClient) -> None:
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NotFound"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Request-ID"]


def test_health(client: FlaskClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["database"] == "ok"


def test_password_at_the_hashing_limit(client: FlaskClient) -> None:
    too_long = client.post(
        "/api/auth/register",
        json={"name": "Gina", "email": "gina@example.com", "password": "Aa1!" + "xQ7#" * 20},
    )
    assert too_long.status_code == 400
    assert too_long.get_json()["error"] == {
        "code": "ValidationError",
        "message": "Password must be at most 72 bytes",
        "fields": ["password"],
    }

    longest = "Aa1!" + "xQ7#" * 17
    created = client.post(
        "/api/auth/register",
        json={"name": "Gina", "email": "gina@example.com", "password": longest},
    )
    assert created.status_code == 201

    client.post("/api/auth/logout")
    login = client.post("/api/auth/login", json={"email": "gina@example.com", "password": longest})
    assert login.status_code == 200

    # over-long input at login is a plain credential failure
    overlong_login = client.post(
        "/api/auth/login", json={"email": "gina@example.com", "password": longest + "x"}
    )
    assert overlong_login.status_code == 401


def test_active_session_keeps_cookie_alive(client: FlaskClient, register: Callable[..., dict]) -> None:
    register()
    token = client.get_cookie("sid").value

    me = client.get("/api/auth/me")

    assert me.status_code == 200
    set_cookie = me.headers.getlist("Set-Cookie")
    assert len(set_cookie) == 1
    assert set_cookie[0].startswith(f"sid={token};")
    assert f"Max-Age={7 * 24 * 60 * 60}" in set_cookie[0]

    # unauthenticated routes leave the cookie alone
    assert client.get("/api/health").headers.getlist("Set-Cookie") == []
