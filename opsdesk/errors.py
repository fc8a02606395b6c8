"""Exception types raised by opsdesk tasks and collaborators."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class OpsError(Exception):
    """Base class for errors raised by opsdesk itself."""


class ConfigurationError(OpsError):
    """Required configuration is absent or invalid."""

    def __init__(self, message: str, missing: Optional[Iterable[str]] = None) -> None:
        super().__init__(message)
        self.missing: List[str] = list(missing or [])


class TransportError(OpsError):
    """
    Failure talking to the mail server or the application API.

    `code` and `response` carry whatever diagnostics the transport reported
    (SMTP reply code and text, HTTP status and body, socket errno).
    """

    def __init__(self, message: str, code: Any = None, response: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.response = response
