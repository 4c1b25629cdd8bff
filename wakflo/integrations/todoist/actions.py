"""Todoist actions."""

from __future__ import annotations

import logging
from typing import Any

from wakflo.integrations.todoist.client import TodoistClient
from wakflo.integrations.todoist.options import (
    TodoistOptions,
    register_project_field,
    register_section_field,
    register_task_field,
)
from wakflo.integrations.todoist.schemas import (
    CreateProjectProps,
    CreateTaskProps,
    ListTasksProps,
    UpdateProjectProps,
    UpdateTaskProps,
    ViewStyle,
)
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.errors import PreconditionError
from wakflo.sdk.form import FormBuilder, FormSchema, Option, new_form

logger = logging.getLogger(__name__)

VIEW_STYLE_OPTIONS = (
    Option(ViewStyle.LIST.value, "List"),
    Option(ViewStyle.BOARD.value, "Board"),
)

_PRIORITY_OPTIONS = (
    Option(1, "Normal"),
    Option(2, "Medium"),
    Option(3, "High"),
    Option(4, "Urgent"),
)

_TASK_SAMPLE = {
    "id": "2995104339",
    "content": "Buy Milk",
    "description": "",
    "project_id": "2203306141",
    "priority": 1,
    "labels": ["Food"],
    "url": "https://todoist.com/showTask?id=2995104339",
}


def _task_detail_fields(form: FormBuilder) -> None:
    form.textarea_field("description", "Description")
    form.textarea_field("labels", "Labels").help_text("Comma-separated label names")
    form.select_field("priority", "Priority").add_options(*_PRIORITY_OPTIONS)
    form.date_time_field("dueDate", "Due date")


class _TodoistAction(Action):
    integration = "todoist"

    def __init__(self, config: ClientConfig, options: TodoistOptions | None = None):
        self.config = config
        self.options = options or TodoistOptions(config)

    def _client(self, ctx: PerformContext) -> TodoistClient:
        return TodoistClient(self.config, ctx.auth_context(self.integration))


class CreateTaskAction(_TodoistAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_task",
            display_name="Create Task",
            description="Create a new task in Todoist.",
            sample_output=_TASK_SAMPLE,
            icon="todoist",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_task", "Create Task")
        form.textarea_field("content", "Content").required().max_length(500).help_text(
            "Task content. May contain markdown-formatted text and hyperlinks."
        )
        register_project_field(form, self.options)
        register_section_field(form, self.options)
        register_task_field(
            form, self.options, name="parent_id", label="Parent Task", required=False
        )
        form.number_field("order", "Order")
        _task_detail_fields(form)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateTaskProps)
        async with self._client(ctx) as client:
            task = await client.create_task(props.to_api_dict())
        logger.info(f"[todoist] Created task {task.id}")
        return task.model_dump()


class UpdateTaskAction(_TodoistAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="update_task",
            display_name="Update Task",
            description="Update the content, labels, priority or due date of a task.",
            sample_output=_TASK_SAMPLE,
            icon="todoist",
        )

    def properties(self) -> FormSchema:
        form = new_form("update_task", "Update Task")
        register_project_field(form, self.options)
        register_section_field(form, self.options)
        register_task_field(form, self.options)
        form.textarea_field("content", "Content").max_length(500)
        _task_detail_fields(form)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, UpdateTaskProps)
        async with self._client(ctx) as client:
            task = await client.update_task(props.task_id, props.to_api_dict())
        return task.model_dump()


class ListTasksAction(_TodoistAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="list_tasks",
            display_name="List Tasks",
            description=(
                "List active tasks, optionally filtered by project, section, label or query."
            ),
            sample_output={"tasks": [_TASK_SAMPLE]},
            icon="todoist",
        )

    def properties(self) -> FormSchema:
        form = new_form("list_tasks", "List Tasks")
        register_project_field(form, self.options)
        register_section_field(form, self.options)
        form.text_field("label", "Label")
        form.text_field("filter", "Filter").placeholder("today | overdue")
        form.text_field("lang", "Lang").help_text("Language of the filter query")
        form.text_field("ids", "IDs").help_text("Comma-separated task IDs")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, ListTasksProps)
        async with self._client(ctx) as client:
            tasks = await client.list_tasks(props.to_params())
        return {"tasks": [task.model_dump() for task in tasks]}


class CreateProjectAction(_TodoistAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="create_project",
            display_name="Create Project",
            description="Create a new Todoist project.",
            sample_output={"id": "2203306141", "name": "Shopping List", "view_style": "list"},
            icon="todoist",
        )

    def properties(self) -> FormSchema:
        form = new_form("create_project", "Create Project")
        form.text_field("name", "Name").required()
        register_project_field(form, self.options).help_text(
            "Parent project. Leave empty for a top-level project."
        )
        form.text_field("color", "Color").placeholder("berry_red")
        form.checkbox_field("is_favorite", "Is Favourite").default_value(False)
        form.select_field("view_style", "View Style").add_options(
            *VIEW_STYLE_OPTIONS
        ).default_value(ViewStyle.LIST.value)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, CreateProjectProps)
        async with self._client(ctx) as client:
            project = await client.create_project(props.to_api_dict())
        return project.model_dump()


class UpdateProjectAction(_TodoistAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="update_project",
            display_name="Update Project",
            description="Rename a Todoist project or change how it is displayed.",
            sample_output={
                "id": "2203306141",
                "name": "Groceries",
                "color": "berry_red",
                "is_favorite": True,
                "view_style": "board",
            },
            icon="todoist",
        )

    def properties(self) -> FormSchema:
        form = new_form("update_project", "Update Project")
        register_project_field(form, self.options, required=True).help_text(
            "Project to update"
        )
        form.text_field("name", "Name").help_text("Leave empty to keep the current name")
        form.text_field("color", "Color").placeholder("berry_red")
        form.checkbox_field("is_favorite", "Is Favourite")
        form.select_field("view_style", "View Style").add_options(*VIEW_STYLE_OPTIONS)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, UpdateProjectProps)
        body = props.to_api_dict()
        if not body:
            raise PreconditionError(
                "nothing to update: set a name, color, favorite flag or view style",
                self.integration,
                operation=self.operation_id,
                resource_id=props.project_id,
            )
        async with self._client(ctx) as client:
            project = await client.update_project(props.project_id, body)
        logger.info(f"[todoist] Updated project {props.project_id}")
        return project.model_dump()
