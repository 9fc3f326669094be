"""HTTP client for the Maelstrom API.

Serves as the remote note store and identity provider for the offline
queue's NoteSynchronizer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

import requests

from maelstrom.errors import InsightGenerationError
from maelstrom.insight import InsufficientData, Timeframe

logger = logging.getLogger(__name__)


def _json_or_none(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class MaelstromApiClient:
    """Client for the notes and undercurrents endpoints"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        user_id: Optional[str] = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            base_url: API server URL
            user_id: identity sent as X-User-Id (None means signed out)
            timeout: request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.timeout = timeout

    def current_user_id(self) -> Optional[str]:
        return self.user_id

    def _headers(self, user_id: Optional[str] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        identity = user_id or self.user_id
        if identity:
            headers["X-User-Id"] = identity
        return headers

    def insert_note(self, user_id: str, content: str) -> Dict[str, Any]:
        """
        Persist a note

        Raises:
            requests.exceptions.RequestException: network error or non-2xx response
        """
        response = requests.post(
            f"{self.base_url}/api/notes",
            headers=self._headers(user_id),
            json={"content": content},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    def fetch_notes(self, note_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Notes behind a citation; [] when none of them exist any more."""
        response = requests.get(
            f"{self.base_url}/api/notes/lookup",
            headers=self._headers(),
            params={"ids": list(note_ids)},
            timeout=self.timeout,
        )
        if response.status_code == 404:
            return []
        response.raise_for_status()
        return response.json()

    def generate_undercurrent(
        self, timeframe: Union[Timeframe, str] = Timeframe.ALL
    ) -> Union[Dict[str, Any], InsufficientData]:
        """
        Ask the server for a new undercurrent

        Returns:
            the undercurrent dict, or InsufficientData with the server's message

        Raises:
            InsightGenerationError: with a human-readable message on any failure
        """
        try:
            response = requests.post(
                f"{self.base_url}/api/undercurrents/generate",
                headers=self._headers(),
                json={"timeframe": Timeframe(timeframe).value},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise InsightGenerationError(str(e)) from e

        if not response.ok:
            detail = _json_or_none(response)
            if isinstance(detail, dict):
                detail = detail.get("detail")
            raise InsightGenerationError(
                str(detail or response.text or f"HTTP {response.status_code}")
            )

        data = _json_or_none(response)
        if not isinstance(data, dict):
            logger.error(f"Unexpected generate response: {response.text[:200]!r}")
            raise InsightGenerationError("Unexpected response from the undercurrent service")
        if data.get("undercurrent") is None:
            return InsufficientData(message=data.get("message") or InsufficientData().message)
        return data["undercurrent"]
