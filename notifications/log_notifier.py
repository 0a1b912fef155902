"""Notifier that writes messages to the log instead of delivering them."""

from __future__ import annotations

import logging

from .abstract_notifier import AbstractNotifier

logger = logging.getLogger(__name__)


class LogNotifier(AbstractNotifier):
    """Development backend: every message is logged and reported as sent."""

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        logger.info("Email (not delivered) to=%s subject=%s\n%s", to_email, subject, html_content)
        return True
