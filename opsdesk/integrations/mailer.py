"""
SMTP transport used to verify mail settings and send operator-triggered
notifications.

Port 465 uses implicit TLS; any other port upgrades with STARTTLS when the
server offers it (and always on 587).
"""

from __future__ import annotations

import logging
import smtplib
import socket
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any, Callable, Optional

from opsdesk.errors import ConfigurationError, TransportError
from opsdesk.utils.settings import MailSettings

logger = logging.getLogger(__name__)


def _smtp_error(exc: Exception, action: str) -> TransportError:
    code = getattr(exc, "smtp_code", None) or getattr(exc, "errno", None)
    response = getattr(exc, "smtp_error", None)
    if isinstance(response, bytes):
        response = response.decode("utf-8", errors="replace")
    return TransportError(f"SMTP {action} failed: {exc}", code=code, response=response)


class SmtpMailer:
    def __init__(self, settings: MailSettings, smtp_factory: Optional[Callable[..., Any]] = None) -> None:
        missing = settings.missing_keys()
        if missing:
            raise ConfigurationError(
                "Email configuration is incomplete. Missing SMTP settings: " + ", ".join(missing),
                missing=missing,
            )
        self.settings = settings
        if smtp_factory is None:
            smtp_factory = smtplib.SMTP_SSL if settings.port == 465 else smtplib.SMTP
        self._smtp_factory = smtp_factory

    def _open(self) -> Any:
        s = self.settings
        server = self._smtp_factory(s.host, s.port, timeout=s.timeout)
        try:
            server.ehlo()
            if s.port != 465 and (s.port == 587 or server.has_extn("starttls")):
                server.starttls()
                server.ehlo()
            server.login(s.user, s.password)
        except BaseException:
            server.close()
            raise
        return server

    def verify(self) -> bool:
        """Connect, authenticate and disconnect. Raises TransportError on failure."""
        try:
            server = self._open()
            try:
                server.noop()
            finally:
                server.quit()
        except (smtplib.SMTPException, socket.error) as e:
            logger.error("SMTP verification failed: %s", e)
            raise _smtp_error(e, "verification") from e
        logger.info("Email server configuration verified successfully")
        return True

    def build_message(self, to: str, subject: str, body: str, html: bool = False) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.settings.sender_name, self.settings.from_address or ""))
        msg["To"] = to
        msg["Subject"] = subject
        domain = (self.settings.from_address or "").rpartition("@")[2]
        msg["Message-ID"] = make_msgid(domain=domain or None)
        msg.attach(MIMEText(body, "html" if html else "plain"))
        return msg

    def send(self, to: str, subject: str, body: str, html: bool = False) -> str:
        """Send one message; returns its Message-ID header."""
        msg = self.build_message(to, subject, body, html=html)
        try:
            server = self._open()
            try:
                server.send_message(msg)
            finally:
                server.quit()
        except (smtplib.SMTPException, socket.error) as e:
            logger.error("SMTP send to %s failed: %s", to, e)
            raise _smtp_error(e, "send") from e
        logger.info("Email sent via SMTP to %s", to)
        return msg["Message-ID"]
