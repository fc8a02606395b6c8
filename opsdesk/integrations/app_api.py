"""
HTTP client for the back-office application's own REST endpoints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from opsdesk.errors import TransportError

logger = logging.getLogger(__name__)


def generic_error(status: Optional[int], message: str = "Unknown error") -> Dict[str, Any]:
    return {
        "success": False,
        "error": {"code": "UNPARSEABLE_RESPONSE", "message": message, "status": status},
    }


def parse_body(response: requests.Response) -> Any:
    """Decode a JSON body; empty or non-JSON bodies become the generic error object."""
    if not response.content:
        return generic_error(response.status_code, "Empty response body")
    try:
        return response.json()
    except ValueError:
        logger.debug("Non-JSON body from %s: %r", response.url, response.text[:200])
        return generic_error(response.status_code)


@dataclass
class ApiResponse:
    status: int
    ok: bool
    body: Any

    @property
    def error_message(self) -> Optional[str]:
        if self.ok or not isinstance(self.body, dict):
            return None
        err = self.body.get("error")
        if isinstance(err, dict):
            return err.get("message")
        if isinstance(err, str):
            return err
        return None


class AppApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, **kwargs: Any) -> ApiResponse:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", code=type(e).__name__) from e
        return ApiResponse(status=r.status_code, ok=r.ok, body=parse_body(r))

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: Dict[str, Any]) -> ApiResponse:
        return self._request("POST", path, json=payload)

    def close(self) -> None:
        self.session.close()
