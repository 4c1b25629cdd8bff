"""
Tests for the ClickUp integration.

Tests cover:
- The workspace -> space -> folder -> list selector chain
- Paged task selector
- Task and space actions
- TaskCreatedTrigger and TaskUpdatedTrigger filters, paging and truncation
"""

from datetime import datetime, timezone

import httpx
import pytest

from wakflo.config import ConnectorSettings
from wakflo.integrations import clickup
from wakflo.sdk.context import ExecuteContext, PerformContext
from wakflo.sdk.errors import NotFoundError, PreconditionError
from wakflo.sdk.resolution import ResolutionSession

API = "/api/v2"

HIERARCHY = {
    "workspace-id": "team1",
    "space-id": "space1",
    "folder-id": "folder1",
    "list-id": "list1",
}


def _task_pages(pages):
    """Handler serving `pages` of tasks by the page query parameter."""

    def handler(request):
        page = int(request.url.params.get("page", "0"))
        tasks = [{"id": t, "name": f"Task {t}"} for t in pages[page]]
        return httpx.Response(200, json={"tasks": tasks, "last_page": page == len(pages) - 1})

    return handler


@pytest.fixture
def integration(settings, vendor):
    return clickup.create_integration(settings, vendor.transport)


# =============================================================================
# Selectors
# =============================================================================


class TestClickUpSelectors:
    """Tests for the dependent hierarchy selectors."""

    @pytest.fixture
    def session(self, integration, oauth):
        schema = integration.action("update_task").properties()
        return ResolutionSession(schema, oauth, integration="clickup")

    @pytest.mark.asyncio
    async def test_children_empty_until_parent_selected(self, session, vendor):
        """Test that child fields resolve to nothing without a parent, with no request."""
        for name in ("space-id", "folder-id", "list-id", "task-id", "assignee-id"):
            assert (await session.resolve(name)).ids == []

        assert vendor.requests == []

    @pytest.mark.asyncio
    async def test_chain(self, session, vendor):
        """Test walking the hierarchy one selection at a time."""
        vendor.add("GET", f"{API}/team", {"teams": [{"id": "team1", "name": "Acme"}]})
        vendor.add("GET", f"{API}/team/team1/space", {"spaces": [{"id": "space1", "name": "Eng"}]})
        vendor.add(
            "GET", f"{API}/space/space1/folder", {"folders": [{"id": "folder1", "name": "Q3"}]}
        )
        vendor.add("GET", f"{API}/folder/folder1/list", {"lists": [{"id": "list1", "name": "Bugs"}]})

        assert (await session.resolve("workspace-id")).ids == ["team1"]
        session.set_value("workspace-id", "team1")
        assert (await session.resolve("space-id")).ids == ["space1"]
        session.set_value("space-id", "space1")
        assert (await session.resolve("folder-id")).ids == ["folder1"]
        session.set_value("folder-id", "folder1")
        assert (await session.resolve("list-id")).ids == ["list1"]

        assert vendor.calls(f"{API}/team/team1/space")[0].url.params["archived"] == "false"

    @pytest.mark.asyncio
    async def test_list_change_refreshes_tasks_and_assignees(self, session, vendor):
        """Test that both list-scoped selectors are invalidated by a list change."""
        vendor.add_handler("GET", f"{API}/list/list1/task", _task_pages([["t1"]]))
        vendor.add("GET", f"{API}/list/list1/member", {"members": [{"id": 7, "username": "ana"}]})
        session.set_value("list-id", "list1")
        await session.resolve("task-id")
        assignees = await session.resolve("assignee-id")

        invalidated = session.set_value("list-id", "list2")

        assert sorted(invalidated) == ["assignee-id", "task-id"]
        assert assignees.to_dict()["items"] == [{"id": "7", "name": "ana"}]

    @pytest.mark.asyncio
    async def test_tasks_follow_pages(self, session, vendor):
        """Test that the task selector walks page numbers until last_page."""
        vendor.add_handler(
            "GET", f"{API}/list/list1/task", _task_pages([["t1", "t2"], ["t3"], ["t4"]])
        )
        session.set_value("list-id", "list1")

        response = await session.resolve("task-id")

        assert response.ids == ["t1", "t2", "t3", "t4"]
        pages = [r.url.params["page"] for r in vendor.calls(f"{API}/list/list1/task")]
        assert pages == ["0", "1", "2"]


# =============================================================================
# Actions
# =============================================================================


class TestClickUpActions:
    """Tests for ClickUp actions."""

    @pytest.mark.asyncio
    async def test_create_task(self, integration, vendor, oauth):
        """Test the create payload with priority and assignees."""
        vendor.add("POST", f"{API}/list/list1/task", {"id": "abc", "name": "Fix login"})
        ctx = PerformContext(
            input={
                **HIERARCHY,
                "name": "Fix login",
                "priority": "2",
                "assignee-id": "7, 8",
            },
            auth=oauth,
        )

        result = await integration.action("create_task").perform(ctx)

        assert vendor.last_json(f"{API}/list/list1/task") == {
            "name": "Fix login",
            "priority": 2,
            "assignees": [7, 8],
        }
        assert result["id"] == "abc"

    @pytest.mark.asyncio
    async def test_create_task_requires_list(self, integration, vendor, oauth):
        """Test that the whole hierarchy must be selected."""
        ctx = PerformContext(input={"workspace-id": "team1", "name": "x"}, auth=oauth)

        with pytest.raises(PreconditionError, match="space-id, folder-id, list-id"):
            await integration.action("create_task").perform(ctx)

        assert vendor.requests == []

    @pytest.mark.asyncio
    async def test_create_task_unknown_list(self, integration, vendor, oauth):
        """Test that a 404 names the list."""
        vendor.add("POST", f"{API}/list/list1/task", {"err": "List not found"}, status=404)
        ctx = PerformContext(input={**HIERARCHY, "name": "x"}, auth=oauth)

        with pytest.raises(NotFoundError, match="no list found with ID 'list1'"):
            await integration.action("create_task").perform(ctx)

    @pytest.mark.asyncio
    async def test_update_task_adds_assignees(self, integration, vendor, oauth):
        """Test that update sends assignees as an add operation."""
        vendor.add("PUT", f"{API}/task/t1", {"id": "t1", "name": "Renamed"})
        ctx = PerformContext(
            input={**HIERARCHY, "task-id": "t1", "name": "Renamed", "assignee-id": "7", "priority": ""},
            auth=oauth,
        )

        await integration.action("update_task").perform(ctx)

        assert vendor.last_json(f"{API}/task/t1") == {"name": "Renamed", "assignees": {"add": [7]}}

    @pytest.mark.asyncio
    async def test_create_space(self, integration, vendor, oauth):
        """Test space creation in the selected workspace."""
        vendor.add("POST", f"{API}/team/team1/space", {"id": "s9", "name": "Ops"})
        ctx = PerformContext(input={"workspace-id": "team1", "name": "Ops"}, auth=oauth)

        result = await integration.action("create_space").perform(ctx)

        body = vendor.last_json(f"{API}/team/team1/space")
        assert body["name"] == "Ops"
        assert body["private"] is False
        assert body["features"]["tags"] == {"enabled": True}
        assert result == {"id": "s9", "name": "Ops"}

    @pytest.mark.asyncio
    async def test_update_space(self, integration, vendor, oauth):
        """Test renaming a space and switching off tags."""
        vendor.add("PUT", f"{API}/space/space1", {"id": "space1", "name": "Platform"})
        ctx = PerformContext(
            input={
                "workspace-id": "team1",
                "space-id": "space1",
                "name": "Platform",
                "tags": False,
            },
            auth=oauth,
        )

        result = await integration.action("update_space").perform(ctx)

        body = vendor.last_json(f"{API}/space/space1")
        assert body["name"] == "Platform"
        assert body["multiple_assignees"] is True
        assert body["features"]["tags"] == {"enabled": False}
        assert body["features"]["custom_fields"] == {"enabled": True}
        assert result == {"id": "space1", "name": "Platform"}

    @pytest.mark.asyncio
    async def test_update_space_keeps_name(self, integration, vendor, oauth):
        """Test that an empty name is not sent."""
        vendor.add("PUT", f"{API}/space/space1", {"id": "space1", "name": "Ops"})
        ctx = PerformContext(input={"workspace-id": "team1", "space-id": "space1"}, auth=oauth)

        await integration.action("update_space").perform(ctx)

        assert "name" not in vendor.last_json(f"{API}/space/space1")

    @pytest.mark.asyncio
    async def test_update_unknown_space(self, integration, vendor, oauth):
        """Test that a 404 names the space."""
        vendor.add("PUT", f"{API}/space/gone", {"err": "Space not found"}, status=404)
        ctx = PerformContext(input={"workspace-id": "team1", "space-id": "gone"}, auth=oauth)

        with pytest.raises(NotFoundError, match="no space found with ID 'gone'"):
            await integration.action("update_space").perform(ctx)


# =============================================================================
# Trigger
# =============================================================================


class TestTaskCreatedTrigger:
    """Tests for TaskCreatedTrigger."""

    @pytest.mark.asyncio
    async def test_filters_by_last_run(self, integration, vendor, oauth):
        """Test that lastRun becomes date_created_gt in milliseconds."""
        vendor.add_handler("GET", f"{API}/list/list1/task", _task_pages([["t1"], ["t2"]]))
        last_run = datetime(2024, 5, 1, tzinfo=timezone.utc)
        ctx = ExecuteContext(input=HIERARCHY, auth=oauth, metadata={"lastRun": last_run})

        result = await integration.trigger("task_created").execute(ctx)

        assert [t["id"] for t in result["tasks"]] == ["t1", "t2"]
        for request in vendor.calls(f"{API}/list/list1/task"):
            assert request.url.params["date_created_gt"] == "1714521600000"

    @pytest.mark.asyncio
    async def test_first_run_has_no_filter(self, integration, vendor, oauth):
        """Test that the first run reports every task."""
        vendor.add_handler("GET", f"{API}/list/list1/task", _task_pages([["t1"]]))
        ctx = ExecuteContext(input=HIERARCHY, auth=oauth)

        await integration.trigger("task_created").execute(ctx)

        assert "date_created_gt" not in vendor.calls(f"{API}/list/list1/task")[0].url.params

    @pytest.mark.asyncio
    async def test_page_bound_is_reported(self, vendor, oauth):
        """Test that stopping at max_pages marks the result truncated."""
        integration = clickup.create_integration(ConnectorSettings(max_pages=1), vendor.transport)
        vendor.add_handler("GET", f"{API}/list/list1/task", _task_pages([["t1"], ["t2"]]))
        ctx = ExecuteContext(input=HIERARCHY, auth=oauth)

        result = await integration.trigger("task_created").execute(ctx)

        assert [t["id"] for t in result["tasks"]] == ["t1"]
        assert result["truncated"] is True
        assert len(vendor.calls(f"{API}/list/list1/task")) == 1

    @pytest.mark.asyncio
    async def test_complete_run_is_not_truncated(self, integration, vendor, oauth):
        """Test that reaching the last page reports truncated=False."""
        vendor.add_handler("GET", f"{API}/list/list1/task", _task_pages([["t1"], ["t2"]]))
        ctx = ExecuteContext(input=HIERARCHY, auth=oauth)

        result = await integration.trigger("task_created").execute(ctx)

        assert result["truncated"] is False


class TestTaskUpdatedTrigger:
    """Tests for TaskUpdatedTrigger."""

    TASKS = {
        "tasks": [
            {"id": "edited", "name": "Edited", "date_created": "1000", "date_updated": "2000"},
            {"id": "fresh", "name": "Fresh", "date_created": "3000", "date_updated": "3000"},
        ],
        "last_page": True,
    }

    @pytest.mark.asyncio
    async def test_filters_by_last_run(self, integration, vendor, oauth):
        """Test that lastRun becomes date_updated_gt and new tasks are left out."""
        vendor.add("GET", f"{API}/list/list1/task", self.TASKS)
        last_run = datetime(2024, 5, 1, tzinfo=timezone.utc)
        ctx = ExecuteContext(input=HIERARCHY, auth=oauth, metadata={"lastRun": last_run})

        result = await integration.trigger("task_updated").execute(ctx)

        params = vendor.calls(f"{API}/list/list1/task")[0].url.params
        assert params["date_updated_gt"] == "1714521600000"
        assert "date_created_gt" not in params
        assert "statuses[]" not in params
        assert [t["id"] for t in result["tasks"]] == ["edited"]
        assert result["truncated"] is False

    @pytest.mark.asyncio
    async def test_status_filter(self, integration, vendor, oauth):
        """Test that a status becomes the statuses[] filter."""
        vendor.add("GET", f"{API}/list/list1/task", self.TASKS)
        ctx = ExecuteContext(input={**HIERARCHY, "status": "in progress"}, auth=oauth)

        await integration.trigger("task_updated").execute(ctx)

        params = vendor.calls(f"{API}/list/list1/task")[0].url.params
        assert params.get_list("statuses[]") == ["in progress"]

    @pytest.mark.asyncio
    async def test_first_run_reports_every_task(self, integration, vendor, oauth):
        """Test that the first run has no date filter and keeps new tasks."""
        vendor.add("GET", f"{API}/list/list1/task", self.TASKS)
        ctx = ExecuteContext(input={**HIERARCHY, "status": "  "}, auth=oauth)

        result = await integration.trigger("task_updated").execute(ctx)

        params = vendor.calls(f"{API}/list/list1/task")[0].url.params
        assert "date_updated_gt" not in params
        assert "statuses[]" not in params
        assert [t["id"] for t in result["tasks"]] == ["edited", "fresh"]
