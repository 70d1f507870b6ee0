"""HTTP client for the task extraction API.

Used by scripts and by ReviewSession.approve_all as its submit function.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from models.extraction_models import ExtractedTaskCandidate

logger = logging.getLogger(__name__)


class TaskApiError(Exception):
    """Raised when the API returns a non-2xx response.

    Attributes:
        status_code: HTTP status of the response
        detail: Error detail from the response body, if any
    """
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {detail}")


class TaskApiClient:
    """Async client for the /api endpoints, authenticated with a bearer token."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def extract_tasks(self, transcript: str) -> List[ExtractedTaskCandidate]:
        """POST /api/extract-tasks and return the candidates (possibly empty)."""
        data = await self._request("POST", "/api/extract-tasks", json={"transcript": transcript})
        return [ExtractedTaskCandidate.model_validate(t) for t in data.get("tasks", [])]

    async def create_tasks(self, tasks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """POST /api/tasks with a list of wire-format candidates."""
        return await self._request("POST", "/api/tasks", json={"tasks": tasks})

    async def list_tasks(self, priority: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"priority": priority} if priority else None
        return await self._request("GET", "/api/tasks", params=params)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self.client.request(method, url, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.warning(f"API request failed: {method} {url} status={response.status_code}")
            raise TaskApiError(response.status_code, str(detail))
        if response.status_code == 204:
            return None
        return response.json()
