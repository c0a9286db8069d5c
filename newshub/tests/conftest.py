from __future__ import annotations

from collections.abc import Callable, Iterator

import httpx
import pytest
from flask import Flask
from flask.testing import FlaskClient

from newshub.app import create_app
from newshub.shared.config import AppConfig

from .fakes import STRONG_PASSWORD


def _news_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"status": "ok", "totalResults": 0, "articles": []})


@pytest.fixture()
def config(monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("PASSWORD_BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "false")
    monkeypatch.setenv("NEWS_API_KEY", "test-key")
    monkeypatch.setenv("NEWS_API_RETRIES", "0")
    monkeypatch.setenv("CLIENT_ORIGIN", "http://localhost:5173")
    return AppConfig()


@pytest.fixture()
def app(config: AppConfig) -> Iterator[Flask]:
    flask_app = create_app(config, news_transport=httpx.MockTransport(_news_handler))
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["newshub"].close()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def register(client: FlaskClient) -> Callable[..., dict]:
    def _register(
        email: str = "alice@example.com",
        name: str = "Alice",
        password: str = STRONG_PASSWORD,
        on: FlaskClient | None = None,
    ) -> dict:
        response = (on or client).post(
            "/api/auth/register", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.get_json()
        return response.get_json()["user"]

    return _register
