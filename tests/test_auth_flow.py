"""Tests covering registration, login, email verification and password flows."""

from __future__ import annotations

from datetime import timedelta

import pytest
from flask.testing import FlaskClient

from models import db, utcnow
from models.user import User

from conftest import DEFAULT_PASSWORD


def _register(client: FlaskClient, **overrides):
    payload = {"name": "Grace", "email": "grace@example.com", "password": "Hopper123!"}
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


def _stored_user(app, email: str) -> User:
    with app.app_context():
        user = User.find_by_email(email)
        db.session.expunge(user)
        return user


def test_register_creates_user_and_sends_verification(client: FlaskClient, app, outbox):
    """Registration signs the user in and emails a verification link."""

    response = _register(client, email="  Grace@Example.COM ")

    assert response.status_code == 201
    data = response.get_json()
    assert data["token"]
    assert data["message"]
    assert data["user"]["email"] == "grace@example.com"
    assert data["user"]["isEmailVerified"] is False
    assert data["user"]["language"] == "italian"
    assert "password" not in str(data["user"]).lower()

    user = _stored_user(app, "grace@example.com")
    assert user.email_verification_token
    assert user.email_verification_expires > utcnow() + timedelta(hours=23)

    assert len(outbox) == 1
    assert outbox[0]["to"] == "grace@example.com"
    assert f"verify-email?token={user.email_verification_token}" in outbox[0]["html"]


def test_register_rejects_duplicate_email_case_insensitively(client: FlaskClient, make_user):
    make_user(email="grace@example.com")

    response = _register(client, email="GRACE@example.com")

    assert response.status_code == 400
    assert response.get_json()["message"] == "User already registered."


def test_register_conflict_enforced_by_database(client: FlaskClient, monkeypatch):
    """The unique email index still rejects a duplicate the pre-check misses."""

    monkeypatch.setattr(User, "find_by_email", classmethod(lambda cls, email: None))

    first = _register(client)
    second = _register(client, email="GRACE@example.com")

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.get_json()["message"] == "User already registered."


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"email": "not-an-email"},
        {"password": ""},
        {"password": "x" * 73},
        {"language": "klingon"},
    ],
)
def test_register_validation(client: FlaskClient, overrides):
    """Malformed registration bodies are rejected with 400."""

    response = _register(client, **overrides)

    assert response.status_code == 400
    assert response.get_json()["message"]


def test_register_requires_json(client: FlaskClient):
    response = client.post("/auth/register", data="name=x")

    assert response.status_code == 400


def test_login_returns_token_and_sets_last_login(client: FlaskClient, make_user, app):
    """Valid credentials return a session token and record the login time."""

    make_user(email="ada@example.com")

    response = client.post(
        "/auth/login", json={"email": "ADA@example.com", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["token"]
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["lastLogin"] is not None
    assert _stored_user(app, "ada@example.com").last_login is not None


def test_login_failures_are_indistinguishable(client: FlaskClient, make_user):
    """Unknown email and wrong password produce the same response body."""

    make_user(email="ada@example.com")

    unknown = client.post(
        "/auth/login", json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD}
    )
    wrong = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "wrong-password"}
    )

    assert unknown.status_code == wrong.status_code == 400
    assert unknown.get_json()["message"] == wrong.get_json()["message"] == "Invalid credentials."


@pytest.mark.parametrize(
    "payload",
    [{"email": "ada@example.com"}, {"password": DEFAULT_PASSWORD}],
)
def test_login_requires_both_fields(client: FlaskClient, make_user, payload):
    make_user(email="ada@example.com")

    response = client.post("/auth/login", json=payload)

    assert response.status_code == 400


def test_unverified_login_allowed_outside_production(client: FlaskClient, make_user):
    make_user(email="ada@example.com", verified=False)

    response = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 200


def test_unverified_login_refused_in_production(client: FlaskClient, make_user, app):
    """In production an unverified account is told to verify first."""

    make_user(email="ada@example.com", verified=False)
    app.config["APP_ENV"] = "production"

    response = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 401
    assert response.get_json()["needsVerification"] is True


def test_unverified_login_with_wrong_password_in_production(client: FlaskClient, make_user, app):
    """The password is checked before the verification state is revealed."""

    make_user(email="ada@example.com", verified=False)
    app.config["APP_ENV"] = "production"

    response = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "wrong-password"}
    )

    assert response.status_code == 400
    assert "needsVerification" not in response.get_json()


def test_verify_email_marks_user_verified(client: FlaskClient, app):
    _register(client)
    token = _stored_user(app, "grace@example.com").email_verification_token

    response = client.get(f"/auth/verify-email/{token}")

    assert response.status_code == 200
    user = _stored_user(app, "grace@example.com")
    assert user.is_email_verified is True
    assert user.email_verification_token is None
    assert user.email_verification_expires is None

    again = client.get(f"/auth/verify-email/{token}")
    assert again.status_code == 400


def test_verify_email_rejects_expired_token(client: FlaskClient, app):
    _register(client)
    with app.app_context():
        user = User.find_by_email("grace@example.com")
        token = user.email_verification_token
        user.email_verification_expires = utcnow() - timedelta(minutes=1)
        db.session.commit()

    response = client.get(f"/auth/verify-email/{token}")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid or expired token."


def test_resend_verification_rotates_token(client: FlaskClient, app, outbox):
    _register(client)
    old_token = _stored_user(app, "grace@example.com").email_verification_token

    response = client.post("/auth/resend-verification", json={"email": "grace@example.com"})

    assert response.status_code == 200
    new_token = _stored_user(app, "grace@example.com").email_verification_token
    assert new_token != old_token
    assert len(outbox) == 2
    assert new_token in outbox[-1]["html"]


def test_resend_verification_does_not_reveal_unknown_email(client: FlaskClient, make_user, outbox):
    make_user(email="ada@example.com", verified=False)

    known = client.post("/auth/resend-verification", json={"email": "ada@example.com"})
    unknown = client.post("/auth/resend-verification", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()
    assert [message["to"] for message in outbox] == ["ada@example.com"]


def test_resend_verification_for_verified_account(client: FlaskClient, make_user, outbox):
    make_user(email="ada@example.com", verified=True)

    response = client.post("/auth/resend-verification", json={"email": "ada@example.com"})

    assert response.status_code == 200
    assert response.get_json()["message"] == "Email already verified."
    assert outbox == []


def test_forgot_password_is_generic(client: FlaskClient, make_user, app, outbox):
    """Forgot-password answers the same way whether or not the account exists."""

    make_user(email="ada@example.com")

    known = client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()

    user = _stored_user(app, "ada@example.com")
    assert user.reset_password_token
    assert user.reset_password_expires <= utcnow() + timedelta(hours=1)
    assert len(outbox) == 1
    assert f"reset-password?token={user.reset_password_token}" in outbox[0]["html"]


def test_reset_password_flow(client: FlaskClient, make_user, app, outbox):
    make_user(email="ada@example.com")
    client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    token = _stored_user(app, "ada@example.com").reset_password_token

    response = client.post(
        "/auth/reset-password", json={"token": token, "password": "BrandNew456!"}
    )

    assert response.status_code == 200
    user = _stored_user(app, "ada@example.com")
    assert user.reset_password_token is None
    assert user.reset_password_expires is None
    assert len(outbox) == 2

    old_login = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": DEFAULT_PASSWORD}
    )
    new_login = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "BrandNew456!"}
    )
    assert old_login.status_code == 400
    assert new_login.status_code == 200

    reused = client.post(
        "/auth/reset-password", json={"token": token, "password": "Another789!"}
    )
    assert reused.status_code == 400


def test_reset_password_rejects_expired_token(client: FlaskClient, make_user, app):
    make_user(email="ada@example.com")
    with app.app_context():
        user = User.find_by_email("ada@example.com")
        token = user.generate_password_reset_token()
        user.reset_password_expires = utcnow() - timedelta(seconds=1)
        db.session.commit()

    response = client.post(
        "/auth/reset-password", json={"token": token, "password": "BrandNew456!"}
    )

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid or expired token."


def test_reset_password_succeeds_when_confirmation_email_fails(
    client: FlaskClient, make_user, app
):
    """A committed reset is reported as done even if the notice bounces."""

    class _FailingNotifier:
        def send(self, to_email, subject, html_content):
            raise OSError("smtp down")

    make_user(email="ada@example.com")
    client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    token = _stored_user(app, "ada@example.com").reset_password_token
    app.extensions["mailer"].notifier = _FailingNotifier()

    response = client.post(
        "/auth/reset-password", json={"token": token, "password": "BrandNew456!"}
    )

    assert response.status_code == 200


def test_get_and_update_current_user(client: FlaskClient, make_user, auth_header):
    user_id = make_user(email="ada@example.com")
    headers = auth_header(user_id)

    response = client.get("/auth/user", headers=headers)
    assert response.status_code == 200
    assert response.get_json()["id"] == user_id

    updated = client.put(
        "/auth/user",
        json={"name": "Ada Lovelace", "language": "english", "age": 36, "gender": "female"},
        headers=headers,
    )
    assert updated.status_code == 200
    data = updated.get_json()
    assert data["name"] == "Ada Lovelace"
    assert data["language"] == "english"
    assert data["age"] == 36
    assert data["gender"] == "female"


def test_update_current_user_validates_fields(client: FlaskClient, make_user, auth_header):
    user_id = make_user()

    response = client.put("/auth/user", json={"age": 500}, headers=auth_header(user_id))

    assert response.status_code == 400


def test_current_user_missing_account_returns_404(client: FlaskClient, auth_header):
    response = client.get("/auth/user", headers=auth_header("0" * 32))

    assert response.status_code == 404


def test_change_password(client: FlaskClient, make_user, auth_header):
    user_id = make_user(email="ada@example.com")
    headers = auth_header(user_id)

    wrong = client.put(
        "/auth/change-password",
        json={"currentPassword": "nope", "newPassword": "BrandNew456!"},
        headers=headers,
    )
    assert wrong.status_code == 400

    response = client.put(
        "/auth/change-password",
        json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "BrandNew456!"},
        headers=headers,
    )
    assert response.status_code == 200

    login = client.post(
        "/auth/login", json={"email": "ada@example.com", "password": "BrandNew456!"}
    )
    assert login.status_code == 200


def test_register_verify_login_and_update_profile(client: FlaskClient, app):
    """Full account lifecycle from sign-up to a profile edit."""

    _register(client, name="Grace")
    token = _stored_user(app, "grace@example.com").email_verification_token
    assert client.get(f"/auth/verify-email/{token}").status_code == 200

    login = client.post(
        "/auth/login", json={"email": "grace@example.com", "password": "Hopper123!"}
    )
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.get_json()['token']}"}

    profile = client.get("/auth/user", headers=headers).get_json()
    assert profile["isEmailVerified"] is True
    assert not {"password", "passwordHash", "emailVerificationToken", "resetPasswordToken"} & set(profile)

    assert client.put("/auth/user", json={"age": 31}, headers=headers).status_code == 200
    updated = client.get("/auth/user", headers=headers).get_json()
    assert updated["age"] == 31
    assert updated["name"] == "Grace"
