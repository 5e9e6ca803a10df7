"""HTTP client for the taskboard REST API."""

from typing import Any, Optional

import httpx

from taskboard.config import get_settings
from taskboard.errors import InternalError, error_for_status
from taskboard.models import LaneTasks, ProjectRead, ProjectWithTasks, TaskRead, TaskStatus


class BoardAPI:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = settings.api_timeout if timeout is None else timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "BoardAPI":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send one request; non-2xx and transport failures raise ``BoardError``s.

        No retries: the caller decides what a failure means.
        """
        try:
            response = await self._get_client().request(method, path, json=json, params=params)
        except httpx.RequestError as e:
            raise InternalError(f"Request to {path} failed: {e}") from e

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            else:
                message = response.text or response.reason_phrase
            raise error_for_status(response.status_code, message)
        return response.json()

    # Projects

    async def list_projects(self, search: Optional[str] = None) -> list[ProjectRead]:
        params = {"search": search} if search else None
        data = await self.request("GET", "/projects", params=params)
        return [ProjectRead.model_validate(item) for item in data]

    async def get_project(self, project_id: str) -> ProjectRead:
        return ProjectRead.model_validate(await self.request("GET", f"/projects/{project_id}"))

    async def get_project_with_tasks(self, project_id: str) -> ProjectWithTasks:
        data = await self.request("GET", f"/projects/{project_id}/with-tasks")
        return ProjectWithTasks.model_validate(data)

    async def create_project(self, name: str, description: Optional[str] = None) -> ProjectRead:
        body: dict[str, Any] = {"name": name}
        if description is not None:
            body["description"] = description
        return ProjectRead.model_validate(await self.request("POST", "/projects", json=body))

    async def update_project(self, project_id: str, **updates: Any) -> ProjectRead:
        data = await self.request("PUT", f"/projects/{project_id}", json=updates)
        return ProjectRead.model_validate(data)

    async def delete_project(self, project_id: str) -> None:
        await self.request("DELETE", f"/projects/{project_id}")

    # Tasks

    async def list_tasks(self, project_id: str) -> LaneTasks:
        return LaneTasks.model_validate(await self.request("GET", f"/tasks/project/{project_id}"))

    async def get_task(self, task_id: str) -> TaskRead:
        return TaskRead.model_validate(await self.request("GET", f"/tasks/{task_id}"))

    async def create_task(
        self,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> TaskRead:
        body: dict[str, Any] = {"title": title, "projectId": project_id}
        if description is not None:
            body["description"] = description
        if status is not None:
            body["status"] = TaskStatus(status).value
        return TaskRead.model_validate(await self.request("POST", "/tasks", json=body))

    async def update_task(self, task_id: str, **updates: Any) -> TaskRead:
        if updates.get("status") is not None:
            updates["status"] = TaskStatus(updates["status"]).value
        return TaskRead.model_validate(await self.request("PUT", f"/tasks/{task_id}", json=updates))

    async def move_task(
        self,
        task_id: str,
        status: TaskStatus,
        position: int,
        project_id: Optional[str] = None,
    ) -> TaskRead:
        body: dict[str, Any] = {"status": TaskStatus(status).value, "position": position}
        if project_id is not None:
            body["projectId"] = project_id
        return TaskRead.model_validate(await self.request("PUT", f"/tasks/{task_id}/move", json=body))

    async def delete_task(self, task_id: str) -> None:
        await self.request("DELETE", f"/tasks/{task_id}")
