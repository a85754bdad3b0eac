"""HTTP client for the remote progress store."""

import logging
from typing import Optional
from urllib.parse import quote

import requests

from .models import ProgressRecord
from ..errors import StoreError


logger = logging.getLogger(__name__)


class StoreClient:
    """Reads and writes progress records through the store relay."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _url(self, username: str) -> str:
        return f"{self.base_url}/api/users/{quote(username, safe='')}"

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the relay's own error text over the bare status line."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"HTTP {response.status_code} {response.reason or ''}".strip()

    def _request(self, method: str, username: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method, self._url(username), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise StoreError(f"Progress store unreachable: {e}") from e

    def get_user(self, username: str) -> Optional[ProgressRecord]:
        """
        Fetch the stored record for username.
        Returns None when the store holds no record for it.
        """
        safe = username.strip()
        if not safe:
            return None

        response = self._request("GET", safe)
        if response.status_code == 404:
            return None
        if not response.ok:
            raise StoreError(self._error_message(response))

        try:
            data = response.json()
        except ValueError:
            raise StoreError("Server returned invalid JSON")

        if data is None:
            return None
        try:
            record = ProgressRecord.from_dict(data)
        except (ValueError, TypeError, OverflowError) as e:
            raise StoreError(f"Server returned a malformed record: {e}") from e

        if record.username != safe:
            raise StoreError(
                f"Server returned the record of {record.username!r} instead of {safe!r}"
            )
        logger.debug(
            "Loaded record for %s (%d points, %d submissions)",
            safe,
            record.points,
            len(record.submissions),
        )
        return record

    def save_user(self, record: ProgressRecord) -> None:
        """Upsert the full record under its username."""
        response = self._request("PUT", record.username, json=record.to_dict())
        if not response.ok:
            raise StoreError(self._error_message(response))
        logger.debug("Saved record for %s", record.username)
