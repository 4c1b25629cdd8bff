"""ClickUp actions."""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.clickup.client import ClickUpClient
from wakflo.integrations.clickup.options import (
    ClickUpOptions,
    register_assignee_field,
    register_hierarchy_fields,
    register_space_field,
    register_task_field,
    register_workspace_field,
)
from wakflo.integrations.clickup.schemas import (
    CreateSpaceProps,
    CreateTaskProps,
    UpdateSpaceProps,
    UpdateTaskProps,
)
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.form import FormBuilder, FormSchema, Option, new_form

logger = logging.getLogger(__name__)

PRIORITY_OPTIONS = (
    Option("1", "Urgent"),
    Option("2", "High"),
    Option("3", "Normal"),
    Option("4", "Low"),
)

_TASK_SAMPLE = {
    "id": "abc123",
    "name": "Example Task",
    "description": "This is a sample task",
    "status": {"status": "Open", "color": "#d3d3d3"},
    "priority": {"priority": "High", "color": "#f50000"},
    "date_created": "1647354847362",
    "date_updated": "1647354847362",
}


def _task_detail_fields(form: FormBuilder, name_required: bool) -> None:
    form.text_field("name", "Name").placeholder("Task Name").required(name_required)
    form.textarea_field("description", "Description").placeholder("Task Description")
    form.select_field("priority", "Priority").add_options(*PRIORITY_OPTIONS)


class _ClickUpAction(Action):
    integration = "clickup"

    def __init__(self, config: ClientConfig, options: ClickUpOptions | None = None):
        self.config = config
        self.options = options or ClickUpOptions(config)

    def _client(self, ctx: PerformContext) -> ClickUpClient:
        return ClickUpClient(self.config, ctx.auth_context(self.integration))


class CreateTaskAction(_ClickUpAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_task",
            display_name="Create Task",
            description=(
                "Creates a new task in a ClickUp list with a name, description, "
                "priority and assignee."
            ),
            sample_output=_TASK_SAMPLE,
            icon="material-symbols:add-task",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_task", "Create Task")
        register_hierarchy_fields(form, self.options)
        register_assignee_field(form, self.options)
        _task_detail_fields(form, name_required=True)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateTaskProps)
        async with self._client(ctx) as client:
            task = await client.create_task(props.list_id, props.to_api_dict())
        logger.info(f"[clickup] Created task {task.get('id')} in list {props.list_id}")
        return task


class UpdateTaskAction(_ClickUpAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="update_task",
            display_name="Update Task",
            description="Updates the name, description, priority or assignees of a ClickUp task.",
            sample_output={**_TASK_SAMPLE, "status": {"status": "In Progress", "color": "#4194f6"}},
            icon="material-symbols:edit-document",
        )

    def properties(self) -> FormSchema:
        form = new_form("update_task", "Update Task")
        register_hierarchy_fields(form, self.options)
        register_task_field(form, self.options)
        register_assignee_field(form, self.options)
        _task_detail_fields(form, name_required=False)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, UpdateTaskProps)
        async with self._client(ctx) as client:
            return await client.update_task(props.task_id, props.to_api_dict())


class CreateSpaceAction(_ClickUpAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_space",
            display_name="Create Space",
            description="Creates a new space in a ClickUp workspace.",
            sample_output={
                "id": "123456",
                "name": "New Space",
                "private": False,
                "multiple_assignees": True,
            },
            icon="material-symbols:create-new-folder",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_space", "Create Space")
        register_workspace_field(form, self.options)
        form.text_field("name", "Name").placeholder("Space Name").required()
        form.checkbox_field("private", "Private").default_value(False).help_text(
            "Whether the space is private"
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateSpaceProps)
        async with self._client(ctx) as client:
            return await client.create_space(props.workspace_id, props.to_api_dict())


class UpdateSpaceAction(_ClickUpAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="update_space",
            display_name="Update Space",
            description="Renames a ClickUp space or toggles its optional features.",
            sample_output={
                "id": "123456",
                "name": "Updated Space",
                "private": True,
                "statuses": [{"id": "st123", "status": "Open", "color": "#d3d3d3"}],
                "multiple_assignees": True,
            },
            icon="material-symbols:space-dashboard",
        )

    def properties(self) -> FormSchema:
        form = new_form("update_space", "Update Space")
        register_workspace_field(form, self.options)
        register_space_field(form, self.options)
        form.text_field("name", "Name").placeholder("Space Name").help_text(
            "Leave empty to keep the current name"
        )
        form.checkbox_field("multiple-assignees", "Multiple Assignees").default_value(True)
        form.checkbox_field("tags", "Tags").default_value(True)
        form.checkbox_field("custom-fields", "Custom Fields").default_value(True)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, UpdateSpaceProps)
        async with self._client(ctx) as client:
            space = await client.update_space(props.space_id, props.to_api_dict())
        logger.info(f"[clickup] Updated space {props.space_id}")
        return space
