"""
Single-use MongoDB connection for maintenance tasks.

A `MongoConnection` moves through not-connected -> connected -> closed. Any
failure goes straight to closed; there is no reconnect.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

from pymongo import MongoClient
from pymongo.database import Database

from opsdesk.utils.settings import DEFAULT_DATABASE

logger = logging.getLogger(__name__)

NOT_CONNECTED = "not-connected"
CONNECTED = "connected"
CLOSED = "closed"

_CREDENTIALS_RE = re.compile(r"//[^/@\s:]+:[^/@\s]+@")


def normalize_connection_string(s: str) -> str:
    """Strip common mistakes: 'mongosh \'...\'', extra quotes, whitespace."""
    s = s.strip()
    if re.match(r"^(mongosh|mongo)\s+", s, re.IGNORECASE):
        s = re.sub(r"^(mongosh|mongo)\s+", "", s, flags=re.IGNORECASE).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s


def mask_connection_string(uri: str) -> str:
    return _CREDENTIALS_RE.sub("//***:***@", uri)


def describe_connection_string(uri: str) -> Optional[Dict[str, str]]:
    """Username, cluster and database of a connection string; never the password."""
    uri = normalize_connection_string(uri)
    if not re.match(r"^mongodb(\+srv)?://", uri):
        return None
    try:
        parts = urlsplit(uri)
        hosts = parts.netloc.rsplit("@", 1)[-1]
    except ValueError:
        return None
    database = parts.path.lstrip("/").split("?")[0]
    return {
        "username": parts.username or "",
        "cluster": hosts,
        "database": database or "(default)",
    }


class MongoConnection:
    def __init__(
        self,
        uri: str,
        database: Optional[str] = None,
        client_factory: Optional[Callable[..., Any]] = None,
        timeout_ms: int = 10000,
    ) -> None:
        self.uri = normalize_connection_string(uri)
        self.database_name = database
        self._client_factory = client_factory or MongoClient
        self._timeout_ms = timeout_ms
        self._client: Any = None
        self._db: Optional[Database] = None
        self.state = NOT_CONNECTED

    @property
    def client(self) -> Any:
        return self._client

    @property
    def db(self) -> Database:
        if self.state != CONNECTED or self._db is None:
            raise RuntimeError(f"MongoConnection is {self.state}")
        return self._db

    def connect(self) -> Database:
        if self.state != NOT_CONNECTED:
            raise RuntimeError(f"MongoConnection is {self.state}")
        logger.debug("Connecting to %s", mask_connection_string(self.uri))
        self._client = self._client_factory(
            self.uri,
            serverSelectionTimeoutMS=self._timeout_ms,
            connectTimeoutMS=self._timeout_ms,
        )
        # MongoClient connects lazily; ping forces server selection now
        self._client.admin.command("ping")
        if self.database_name:
            self._db = self._client[self.database_name]
        else:
            self._db = self._client.get_default_database(default=DEFAULT_DATABASE)
        self.state = CONNECTED
        return self._db

    def close(self) -> bool:
        """Close the client if one was created. Returns True only on the call that closed it."""
        if self.state == CLOSED:
            return False
        self.state = CLOSED
        self._db = None
        if self._client is None:
            return False
        try:
            self._client.close()
        finally:
            self._client = None
        return True

    def __enter__(self) -> Database:
        try:
            return self.connect()
        except BaseException:
            self.close()
            raise

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
