"""Email notification backends."""

from .abstract_notifier import AbstractNotifier
from .dispatcher import MailDispatcher
from .log_notifier import LogNotifier
from .smtp_notifier import SmtpNotifier

__all__ = ["AbstractNotifier", "LogNotifier", "MailDispatcher", "SmtpNotifier", "build_notifier"]


def build_notifier(config) -> AbstractNotifier:
    """Pick the backend named by ``MAIL_BACKEND``."""

    backend = (config.get("MAIL_BACKEND") or "log").strip().lower()
    if backend == "log":
        return LogNotifier()
    if backend == "smtp":
        return SmtpNotifier(
            server=config.get("SMTP_SERVER"),
            port=int(config.get("SMTP_PORT", 587)),
            username=config.get("SMTP_USERNAME", ""),
            password=config.get("SMTP_PASSWORD", ""),
            from_email=config.get("MAIL_FROM_EMAIL", ""),
            from_name=config.get("MAIL_FROM_NAME", ""),
            timeout=int(config.get("SMTP_TIMEOUT", 10)),
        )
    raise ValueError(f"Unknown MAIL_BACKEND: {backend!r}")
