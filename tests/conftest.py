"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
from notifications import AbstractNotifier  # noqa: E402
from utils.auth import issue_session_token  # noqa: E402

DEFAULT_PASSWORD = "Secret123!"


class _BaseTestConfig(Config):
    TESTING = True
    APP_ENV = "development"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS: dict = {}
    SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough-for-hs256"
    BCRYPT_ROUNDS = 4
    RATE_LIMIT = "1000 per minute"
    MAIL_BACKEND = "log"
    MAIL_ASYNC = False
    FRONTEND_URL = "https://salus.example"


class RecordingNotifier(AbstractNotifier):
    """Keeps every message in memory instead of delivering it."""

    def __init__(self) -> None:
        self.sent: list[dict] = []

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        self.sent.append({"to": to_email, "subject": subject, "html": html_content})
        return True


def build_app(**overrides) -> Flask:
    """Create an app from the test config with some keys overridden."""

    class TestConfig(_BaseTestConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    application = create_app(TestConfig)
    application.extensions["mailer"].notifier = RecordingNotifier()
    return application


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = build_app()

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def outbox(app: Flask) -> list[dict]:
    """Messages handed to the mail dispatcher during the test."""

    return app.extensions["mailer"].notifier.sent


@pytest.fixture()
def make_user(app: Flask):
    """Persist a user and return its id."""

    def _make(
        email: str = "ada@example.com",
        password: str = DEFAULT_PASSWORD,
        *,
        name: str = "Ada",
        verified: bool = True,
        **fields,
    ) -> str:
        with app.app_context():
            user = User(email=email, name=name, is_email_verified=verified, **fields)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture()
def auth_header(app: Flask):
    """Build an ``Authorization`` header carrying a session token."""

    def _header(user_id: str, ttl: timedelta | None = None) -> dict[str, str]:
        with app.app_context():
            token = issue_session_token(user_id, ttl)
        return {"Authorization": f"Bearer {token}"}

    return _header
