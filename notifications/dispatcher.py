"""Dispatch emails inline or on a small worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from .abstract_notifier import AbstractNotifier

logger = logging.getLogger(__name__)


class MailDispatcher:
    """Owns the notifier and the worker pool used for fire-and-forget sends.

    Created once by the application factory and shut down at process exit.
    """

    def __init__(self, notifier: AbstractNotifier, *, run_async: bool = True, max_workers: int = 2):
        self.notifier = notifier
        self.run_async = run_async
        self._executor = (
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mail")
            if run_async
            else None
        )

    def _deliver(self, to_email: str, subject: str, html_content: str) -> bool:
        try:
            delivered = self.notifier.send(to_email, subject, html_content)
        except Exception:
            logger.exception("Notifier raised while sending %r to %s", subject, to_email)
            return False
        if not delivered:
            logger.warning("Email %r to %s was not delivered", subject, to_email)
        return delivered

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        """Deliver now and report the outcome."""

        return self._deliver(to_email, subject, html_content)

    def send_later(self, to_email: str, subject: str, html_content: str) -> Future | None:
        """Queue a message whose failure must never fail the request."""

        if self._executor is None:
            self._deliver(to_email, subject, html_content)
            return None
        return self._executor.submit(self._deliver, to_email, subject, html_content)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
