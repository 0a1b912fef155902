"""Notification abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractNotifier(ABC):
    """Interface for outbound email backends."""

    @abstractmethod
    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        """Deliver one message and return whether it was accepted."""
