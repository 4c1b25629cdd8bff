"""
Dynamic select fields for ClickUp.

The hierarchy is a chain of dependent selects:

    workspace-id -> space-id -> folder-id -> list-id -> task-id / assignee-id

Each field references and refreshes on its parent. A field whose parent
is unset resolves to an empty list, since ClickUp has no "all spaces"
or "all folders" endpoint.
"""

from __future__ import annotations

from wakflo.integrations.clickup.client import ClickUpClient
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import DynamicFieldContext
from wakflo.sdk.form import FieldBuilder, FormBuilder
from wakflo.sdk.options import (
    DynamicOption,
    DynamicOptionsDescriptor,
    DynamicOptionsResponse,
    OptionsBuilder,
    Resolver,
    collect_pages,
)

PAGE_SIZE = 10


class ClickUpOptions:
    def __init__(self, config: ClientConfig):
        self.config = config

    async def workspaces(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        async with ClickUpClient(self.config, ctx.auth) as client:
            teams = await client.list_teams()
        return ctx.respond(DynamicOption(id=t.id, name=t.name) for t in teams)

    async def spaces(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        workspace_id = ctx.value("workspace-id")
        if workspace_id is None:
            return DynamicOptionsResponse.empty()
        async with ClickUpClient(self.config, ctx.auth) as client:
            spaces = await client.list_spaces(workspace_id)
        return ctx.respond(DynamicOption(id=s.id, name=s.name) for s in spaces)

    async def folders(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        space_id = ctx.value("space-id")
        if space_id is None:
            return DynamicOptionsResponse.empty()
        async with ClickUpClient(self.config, ctx.auth) as client:
            folders = await client.list_folders(space_id)
        return ctx.respond(DynamicOption(id=f.id, name=f.name) for f in folders)

    async def lists(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        folder_id = ctx.value("folder-id")
        if folder_id is None:
            return DynamicOptionsResponse.empty()
        async with ClickUpClient(self.config, ctx.auth) as client:
            lists = await client.list_lists(folder_id)
        return ctx.respond(DynamicOption(id=item.id, name=item.name) for item in lists)

    async def tasks(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        list_id = ctx.value("list-id")
        if list_id is None:
            return DynamicOptionsResponse.empty()
        async with ClickUpClient(self.config, ctx.auth) as client:

            async def fetch_page(cursor: str | None) -> tuple[list[DynamicOption], str | None]:
                page = int(cursor or 0)
                tasks, last_page = await client.list_tasks(list_id, page=page)
                options = [DynamicOption(id=t.id, name=t.name) for t in tasks]
                return options, None if last_page else str(page + 1)

            collected = await collect_pages(
                fetch_page,
                integration="clickup",
                operation="list_tasks",
                max_pages=self.config.max_pages,
            )
        response = ctx.respond(collected.items)
        if collected.truncated:
            return DynamicOptionsResponse.from_items(response.items, truncated=True)
        return response

    async def assignees(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        list_id = ctx.value("list-id")
        if list_id is None:
            return DynamicOptionsResponse.empty()
        async with ClickUpClient(self.config, ctx.auth) as client:
            members = await client.list_members(list_id)
        return ctx.respond(DynamicOption(id=str(m.id), name=m.display_name) for m in members)


# =============================================================================
# Field Registration
# =============================================================================


def _child_descriptor(resolver: Resolver, parent: str) -> DynamicOptionsDescriptor:
    return (
        OptionsBuilder()
        .resolver(resolver)
        .field_reference(parent)
        .refresh_on(parent)
        .with_search()
        .with_pagination(PAGE_SIZE)
        .build()
    )


def register_workspace_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = True
) -> FieldBuilder:
    descriptor = (
        OptionsBuilder()
        .resolver(options.workspaces)
        .with_search()
        .with_pagination(PAGE_SIZE)
        .build()
    )
    return (
        form.select_field("workspace-id", "Workspace")
        .placeholder("Select a workspace")
        .required(required)
        .with_dynamic_options(descriptor)
    )


def register_space_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = True
) -> FieldBuilder:
    return (
        form.select_field("space-id", "Space")
        .placeholder("Select a space")
        .required(required)
        .with_dynamic_options(_child_descriptor(options.spaces, "workspace-id"))
    )


def register_folder_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = True
) -> FieldBuilder:
    return (
        form.select_field("folder-id", "Folder")
        .placeholder("Select a folder")
        .required(required)
        .with_dynamic_options(_child_descriptor(options.folders, "space-id"))
    )


def register_list_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = True
) -> FieldBuilder:
    return (
        form.select_field("list-id", "List")
        .placeholder("Select a list")
        .required(required)
        .with_dynamic_options(_child_descriptor(options.lists, "folder-id"))
    )


def register_task_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = True
) -> FieldBuilder:
    return (
        form.select_field("task-id", "Task")
        .placeholder("Choose a task")
        .required(required)
        .with_dynamic_options(_child_descriptor(options.tasks, "list-id"))
    )


def register_assignee_field(
    form: FormBuilder, options: ClickUpOptions, required: bool = False
) -> FieldBuilder:
    return (
        form.select_field("assignee-id", "Assignee")
        .placeholder("Choose an assignee")
        .required(required)
        .with_dynamic_options(_child_descriptor(options.assignees, "list-id"))
    )


def register_hierarchy_fields(form: FormBuilder, options: ClickUpOptions) -> None:
    """Workspace, space, folder and list selectors, in dependency order."""
    register_workspace_field(form, options)
    register_space_field(form, options)
    register_folder_field(form, options)
    register_list_field(form, options)
