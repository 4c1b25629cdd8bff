"""
Todoist REST API client.

API Reference:
    https://developer.todoist.com/rest/v2
"""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.todoist.schemas import Project, Section, Task
from wakflo.sdk.client import BearerTokenClient
from wakflo.sdk.errors import NotFoundError

logger = logging.getLogger(__name__)


class TodoistClient(BearerTokenClient):
    """Async client for the Todoist REST API."""

    @property
    def name(self) -> str:
        return "todoist"

    # =========================================================================
    # Projects
    # =========================================================================

    async def list_projects(self) -> list[Project]:
        data = await self.get_json("/projects", operation="list_projects")
        return self.parse_many(Project, data, operation="list_projects")

    async def create_project(self, body: dict[str, Any]) -> Project:
        data = await self.post_json("/projects", json=body, operation="create_project")
        return self.parse(Project, data, operation="create_project")

    async def update_project(self, project_id: str, body: dict[str, Any]) -> Project:
        try:
            data = await self.post_json(
                f"/projects/{project_id}",
                json=body,
                operation="update_project",
                resource_id=project_id,
            )
        except NotFoundError as e:
            raise NotFoundError(
                f"no project found with ID '{project_id}'",
                self.name,
                operation="update_project",
                resource_id=project_id,
                status_code=404,
            ) from e
        return self.parse(Project, data, operation="update_project")

    async def list_sections(self, project_id: str | None = None) -> list[Section]:
        data = await self.get_json(
            "/sections", params={"project_id": project_id}, operation="list_sections"
        )
        return self.parse_many(Section, data, operation="list_sections")

    # =========================================================================
    # Tasks
    # =========================================================================

    async def list_tasks(self, params: dict[str, Any] | None = None) -> list[Task]:
        data = await self.get_json("/tasks", params=params, operation="list_tasks")
        return self.parse_many(Task, data, operation="list_tasks")

    async def create_task(self, body: dict[str, Any]) -> Task:
        data = await self.post_json("/tasks", json=body, operation="create_task")
        return self.parse(Task, data, operation="create_task")

    async def update_task(self, task_id: str, body: dict[str, Any]) -> Task:
        try:
            data = await self.post_json(
                f"/tasks/{task_id}",
                json=body,
                operation="update_task",
                resource_id=task_id,
            )
        except NotFoundError as e:
            raise NotFoundError(
                f"no task found with ID '{task_id}'",
                self.name,
                operation="update_task",
                resource_id=task_id,
                status_code=404,
            ) from e
        return self.parse(Task, data, operation="update_task")
