"""SMTP email delivery."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .abstract_notifier import AbstractNotifier

logger = logging.getLogger(__name__)


class SmtpNotifier(AbstractNotifier):
    """Send HTML mail through an SMTP server using STARTTLS."""

    def __init__(
        self,
        server: str,
        port: int,
        username: str = "",
        password: str = "",
        from_email: str = "",
        from_name: str = "",
        timeout: int = 10,
    ):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email or username
        self.from_name = from_name
        self.timeout = timeout

    def _build_message(self, to_email: str, subject: str, html_content: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self.from_name} <{self.from_email}>" if self.from_name else self.from_email
        message["To"] = to_email
        message.attach(MIMEText(html_content, "html", "utf-8"))
        return message

    def send(self, to_email: str, subject: str, html_content: str) -> bool:
        message = self._build_message(to_email, subject, html_content)
        try:
            context = ssl.create_default_context()
            with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as server:
                server.starttls(context=context)
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email delivery failed: %s - %s - %s", to_email, subject, exc)
            return False

        logger.info("Email delivered: %s - %s", to_email, subject)
        return True
