"""
ClickUp API client.

API Reference:
    https://clickup.com/api
"""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.clickup.schemas import Folder, Member, Space, Task, TaskList, Team
from wakflo.sdk.client import BearerTokenClient
from wakflo.sdk.errors import NotFoundError

logger = logging.getLogger(__name__)


class ClickUpClient(BearerTokenClient):
    """Async client for the ClickUp v2 API."""

    @property
    def name(self) -> str:
        return "clickup"

    # =========================================================================
    # Hierarchy
    # =========================================================================

    async def list_teams(self) -> list[Team]:
        data = await self.get_json("/v2/team", operation="list_workspaces")
        teams = self.unwrap(data, "teams", operation="list_workspaces")
        return self.parse_many(Team, teams, operation="list_workspaces")

    async def list_spaces(self, team_id: str) -> list[Space]:
        data = await self.get_json(
            f"/v2/team/{team_id}/space",
            params={"archived": "false"},
            operation="list_spaces",
            resource_id=team_id,
        )
        spaces = self.unwrap(data, "spaces", operation="list_spaces")
        return self.parse_many(Space, spaces, operation="list_spaces")

    async def list_folders(self, space_id: str) -> list[Folder]:
        data = await self.get_json(
            f"/v2/space/{space_id}/folder",
            params={"archived": "false"},
            operation="list_folders",
            resource_id=space_id,
        )
        folders = self.unwrap(data, "folders", operation="list_folders")
        return self.parse_many(Folder, folders, operation="list_folders")

    async def list_lists(self, folder_id: str) -> list[TaskList]:
        data = await self.get_json(
            f"/v2/folder/{folder_id}/list",
            params={"archived": "false"},
            operation="list_lists",
            resource_id=folder_id,
        )
        lists = self.unwrap(data, "lists", operation="list_lists")
        return self.parse_many(TaskList, lists, operation="list_lists")

    async def list_members(self, list_id: str) -> list[Member]:
        data = await self.get_json(
            f"/v2/list/{list_id}/member", operation="list_members", resource_id=list_id
        )
        members = self.unwrap(data, "members", operation="list_members")
        return self.parse_many(Member, members, operation="list_members")

    async def create_space(self, team_id: str, body: dict[str, Any]) -> dict[str, Any]:
        return await self.post_json(
            f"/v2/team/{team_id}/space",
            json=body,
            operation="create_space",
            resource_id=team_id,
        )

    async def update_space(self, space_id: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.request_json(
                "PUT",
                f"/v2/space/{space_id}",
                json=body,
                operation="update_space",
                resource_id=space_id,
            )
        except NotFoundError as e:
            raise NotFoundError(
                f"no space found with ID '{space_id}'",
                self.name,
                operation="update_space",
                resource_id=space_id,
                status_code=404,
            ) from e

    # =========================================================================
    # Tasks
    # =========================================================================

    async def list_tasks(
        self,
        list_id: str,
        page: int = 0,
        *,
        date_created_gt: int | None = None,
        date_updated_gt: int | None = None,
        statuses: list[str] | None = None,
    ) -> tuple[list[Task], bool]:
        """
        Fetch one page of tasks in a list.

        Date filters are epoch milliseconds.

        Returns:
            (tasks, last_page)
        """
        data = await self.get_json(
            f"/v2/list/{list_id}/task",
            params={
                "page": page,
                "date_created_gt": date_created_gt,
                "date_updated_gt": date_updated_gt,
                "statuses[]": statuses or None,
            },
            operation="list_tasks",
            resource_id=list_id,
        )
        raw = self.unwrap(data, "tasks", operation="list_tasks")
        tasks = self.parse_many(Task, raw, operation="list_tasks")
        return tasks, bool(data.get("last_page", True))

    async def create_task(self, list_id: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.post_json(
                f"/v2/list/{list_id}/task",
                json=body,
                operation="create_task",
                resource_id=list_id,
            )
        except NotFoundError as e:
            raise NotFoundError(
                f"no list found with ID '{list_id}'",
                self.name,
                operation="create_task",
                resource_id=list_id,
                status_code=404,
            ) from e

    async def update_task(self, task_id: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self.request_json(
                "PUT",
                f"/v2/task/{task_id}",
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
