"""Account email templates."""

from __future__ import annotations

from html import escape
from urllib.parse import quote

_LAYOUT = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #4A90E2;">{heading}</h2>
  {body}
  <p>The Salus team</p>
</div>
"""


def _link(frontend_url: str, path: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/{path}?token={quote(token)}"


def verification_email(name: str, frontend_url: str, token: str) -> tuple[str, str]:
    name = escape(name or "")
    url = _link(frontend_url, "verify-email", token)
    body = (
        f"<p>Hi {name}, thanks for signing up. Confirm your email address to finish "
        f"your registration:</p>"
        f'<p><a href="{url}">Confirm email</a></p>'
        f"<p>Or paste this address into your browser: {url}</p>"
        f"<p>The link expires in 24 hours. If you did not sign up, ignore this email.</p>"
    )
    return "Confirm your email for Salus", _LAYOUT.format(heading="Welcome to Salus!", body=body)


def password_reset_email(name: str, frontend_url: str, token: str) -> tuple[str, str]:
    name = escape(name or "")
    url = _link(frontend_url, "reset-password", token)
    body = (
        f"<p>Hi {name}, we received a request to reset your password.</p>"
        f'<p><a href="{url}">Choose a new password</a></p>'
        f"<p>The link expires in 1 hour. If you did not ask for a reset, ignore this email.</p>"
    )
    return "Reset your Salus password", _LAYOUT.format(heading="Password reset", body=body)


def password_changed_email(name: str) -> tuple[str, str]:
    name = escape(name or "")
    body = (
        f"<p>Hi {name}, your Salus password has just been changed.</p>"
        f"<p>If this was not you, reset your password immediately.</p>"
    )
    return "Your Salus password was changed", _LAYOUT.format(heading="Password updated", body=body)
