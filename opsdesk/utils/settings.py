"""
Environment-backed settings shared by all tasks.

Values come from the process environment; `load_environment()` first merges
`.env.local` and `.env` from the working directory without overriding
variables that are already exported.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from opsdesk.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "infinity-weekends"
DEFAULT_BASE_URL = "http://localhost:3000"


def load_environment(root: Optional[Path] = None) -> None:
    root = root or Path.cwd()
    for name in (".env.local", ".env"):
        path = root / name
        if path.exists():
            load_dotenv(path, override=False)
            logger.debug("Loaded environment from %s", path)


class MailSettings(BaseModel):
    host: Optional[str] = None
    port: int = Field(default=587, ge=1, le=65535)
    user: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    sender_name: str = "Infinity Weekends"
    timeout: float = 30.0

    def missing_keys(self) -> List[str]:
        required = {"SMTP_HOST": self.host, "SMTP_USER": self.user, "SMTP_PASS": self.password}
        return [k for k, v in required.items() if not v]

    @property
    def from_address(self) -> Optional[str]:
        return self.sender or self.user


class OpsSettings(BaseModel):
    mongodb_uri: Optional[str] = None
    mongodb_db: Optional[str] = None
    app_base_url: str = DEFAULT_BASE_URL
    auth_secret: Optional[str] = None
    admin_api_token: Optional[str] = None
    mail: MailSettings = Field(default_factory=MailSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OpsSettings":
        env = os.environ if environ is None else environ

        def get(key: str) -> Optional[str]:
            value = env.get(key)
            if value is None:
                return None
            value = value.strip()
            return value or None

        port_raw = get("SMTP_PORT")
        try:
            port = int(port_raw) if port_raw else 587
        except ValueError:
            raise ConfigurationError(f"SMTP_PORT is not a number: {port_raw!r}", missing=["SMTP_PORT"])

        return cls(
            mongodb_uri=get("MONGODB_URI"),
            mongodb_db=get("MONGODB_DB"),
            app_base_url=(get("APP_BASE_URL") or get("NEXTAUTH_URL") or DEFAULT_BASE_URL).rstrip("/"),
            auth_secret=get("NEXTAUTH_SECRET"),
            admin_api_token=get("ADMIN_API_TOKEN"),
            mail=MailSettings(
                host=get("SMTP_HOST"),
                port=port,
                user=get("SMTP_USER"),
                password=get("SMTP_PASS"),
                sender=get("EMAIL_FROM"),
                sender_name=get("EMAIL_FROM_NAME") or "Infinity Weekends",
            ),
        )

    def require_mongodb_uri(self) -> str:
        if not self.mongodb_uri:
            raise ConfigurationError("MONGODB_URI environment variable is not set", missing=["MONGODB_URI"])
        return self.mongodb_uri
