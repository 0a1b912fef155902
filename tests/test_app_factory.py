"""Tests for the Flask application factory."""
from __future__ import annotations

from notifications import LogNotifier, MailDispatcher

from app import create_app
from conftest import _BaseTestConfig


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_blueprints_registered(app):
    """Application factory should register every resource blueprint."""
    bps = set(app.blueprints.keys())
    assert {"auth", "users", "symptoms", "medications", "wellness"}.issubset(bps)


def test_routes_mounted_without_api_prefix(app):
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert "/auth/register" in rules
    assert "/auth/users/<string:user_id>" in rules
    assert "/medications/<string:user_id>/active" in rules
    assert "/medications/<string:medication_id>/terminate" in rules
    assert "/wellness/<string:user_id>/stats" in rules


def test_mailer_extension_is_registered(app):
    mailer = app.extensions["mailer"]
    assert isinstance(mailer, MailDispatcher)
    assert mailer.run_async is False


def test_log_backend_is_default():
    app = create_app(_BaseTestConfig)
    assert isinstance(app.extensions["mailer"].notifier, LogNotifier)
