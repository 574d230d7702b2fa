"""Async HTTP wrapper around the task service.

Every non-success response becomes a ``TaskApiError`` carrying a fixed
message per operation; callers never see raw ``httpx`` errors.
"""

import logging
from typing import Any, Optional

import httpx

from task_board.models import Task

logger = logging.getLogger(__name__)

FETCH_FAILED = "Failed to fetch tasks"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"
HEALTH_FAILED = "Health check failed"


class TaskApiError(Exception):
    """A task service call did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TaskApi:
    """Thin client for ``{api_base}/tasks`` and ``{api_base}/health``."""

    def __init__(
        self,
        api_base: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.api_base, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "TaskApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(
        self, failure: str, method: str, path: str, json: Any = None
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise TaskApiError(failure) from e
        if not response.is_success:
            logger.warning("%s %s returned %s", method, path, response.status_code)
            raise TaskApiError(failure, response.status_code)
        return response

    async def health(self) -> bool:
        response = await self._request(HEALTH_FAILED, "GET", "/health")
        return bool(response.json().get("ok"))

    async def list_tasks(self) -> list[Task]:
        response = await self._request(FETCH_FAILED, "GET", "/tasks")
        return [Task.model_validate(item) for item in response.json()]

    async def create_task(self, title: str) -> dict:
        response = await self._request(CREATE_FAILED, "POST", "/tasks", {"title": title})
        return response.json()

    async def update_task(self, task_id: int, **patch: Any) -> dict:
        """Send a partial update, e.g. ``update_task(3, completed=True)``."""
        response = await self._request(UPDATE_FAILED, "PUT", f"/tasks/{task_id}", patch)
        return response.json()

    async def delete_task(self, task_id: int) -> None:
        await self._request(DELETE_FAILED, "DELETE", f"/tasks/{task_id}")
