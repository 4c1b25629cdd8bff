"""
ClickUp triggers.

Both triggers poll one list and follow its task pages up to the configured
page bound. When the bound stops collection the result carries
truncated=True and lastRun must not move past the reported tasks.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from datetime import datetime
from typing import Any

from wakflo.integrations.clickup.client import ClickUpClient
from wakflo.integrations.clickup.options import ClickUpOptions, register_hierarchy_fields
from wakflo.integrations.clickup.schemas import Task, TaskCreatedProps, TaskUpdatedProps
from wakflo.sdk.action import Trigger, TriggerMetadata, TriggerType
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import ExecuteContext
from wakflo.sdk.form import FormBuilder, FormSchema, new_form
from wakflo.sdk.options import collect_pages

logger = logging.getLogger(__name__)


def _epoch_millis(when: datetime | None) -> int | None:
    return int(when.timestamp() * 1000) if when else None


class _TaskPollingTrigger(Trigger):
    integration = "clickup"
    form_id: str
    form_title: str

    def __init__(self, config: ClientConfig, options: ClickUpOptions | None = None):
        self.config = config
        self.options = options or ClickUpOptions(config)

    def properties(self) -> FormSchema:
        form = new_form(self.form_id, self.form_title)
        register_hierarchy_fields(form, self.options)
        self._extra_fields(form)
        return form.build()

    def _extra_fields(self, form: FormBuilder) -> None:
        pass

    @abstractmethod
    def _filters(self, ctx: ExecuteContext, props: TaskCreatedProps) -> dict[str, Any]:
        """Keyword filters passed to ClickUpClient.list_tasks."""
        ...

    def _keep(self, task: Task, ctx: ExecuteContext) -> bool:
        return True

    async def _poll(self, ctx: ExecuteContext, props: TaskCreatedProps) -> dict[str, Any]:
        list_id = props.list_id
        filters = self._filters(ctx, props)

        async with ClickUpClient(self.config, ctx.auth_context(self.integration)) as client:

            async def fetch_page(cursor: str | None) -> tuple[list[Task], str | None]:
                page = int(cursor or 0)
                tasks, last_page = await client.list_tasks(list_id, page=page, **filters)
                return tasks, None if last_page else str(page + 1)

            collected = await collect_pages(
                fetch_page,
                integration=self.integration,
                operation=self.operation_id,
                max_pages=self.config.max_pages,
            )

        tasks = [t.model_dump() for t in collected.items if self._keep(t, ctx)]
        logger.debug(
            f"[clickup] {self.operation_id}: {len(tasks)} tasks in list {list_id} "
            f"({collected.pages_fetched} pages, filters={filters})"
        )
        return {"tasks": tasks, "truncated": collected.truncated}


class TaskCreatedTrigger(_TaskPollingTrigger):
    """Polls a list for tasks created since the last run."""

    form_id = "clickup-task-created"
    form_title = "Task Created"

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(
            id="task_created",
            display_name="Task Created",
            description="Triggered when a new task is created in a ClickUp list.",
            type=TriggerType.POLLING,
            sample_output={
                "tasks": [
                    {
                        "id": "abc123",
                        "name": "New Task",
                        "status": {"status": "Open"},
                        "date_created": "1647354847362",
                    }
                ],
                "truncated": False,
            },
            icon="material-symbols:add-task",
        )

    def _filters(self, ctx: ExecuteContext, props: TaskCreatedProps) -> dict[str, Any]:
        return {"date_created_gt": _epoch_millis(ctx.last_run)}

    async def execute(self, ctx: ExecuteContext) -> dict[str, Any]:
        return await self._poll(ctx, self.decode_input(ctx, TaskCreatedProps))


class TaskUpdatedTrigger(_TaskPollingTrigger):
    """
    Polls a list for tasks changed since the last run.

    Tasks created after the last run also match date_updated_gt; after
    the first run those are left to task_created by keeping only tasks
    whose update time is later than their creation time.
    """

    form_id = "clickup-task-updated"
    form_title = "Task Updated"

    def metadata(self) -> TriggerMetadata:
        return TriggerMetadata(
            id="task_updated",
            display_name="Task Updated",
            description=(
                "Triggered when an existing task in a ClickUp list changes, "
                "optionally only when it moves to a given status."
            ),
            type=TriggerType.POLLING,
            sample_output={
                "tasks": [
                    {
                        "id": "abc123",
                        "name": "Updated Task",
                        "status": {"status": "In Progress", "color": "#4194f6"},
                        "date_created": "1647354847362",
                        "date_updated": "1647441247362",
                    }
                ],
                "truncated": False,
            },
            icon="material-symbols:update",
        )

    def _extra_fields(self, form: FormBuilder) -> None:
        form.text_field("status", "Status Filter").placeholder("in progress").help_text(
            "Only report tasks currently in this status. Leave empty for any change."
        )

    def _filters(self, ctx: ExecuteContext, props: TaskUpdatedProps) -> dict[str, Any]:
        return {
            "date_updated_gt": _epoch_millis(ctx.last_run),
            "statuses": [props.status] if props.status else None,
        }

    def _keep(self, task: Task, ctx: ExecuteContext) -> bool:
        if ctx.last_run is None:
            return True
        return int(task.date_updated or 0) > int(task.date_created or 0)

    async def execute(self, ctx: ExecuteContext) -> dict[str, Any]:
        return await self._poll(ctx, self.decode_input(ctx, TaskUpdatedProps))
