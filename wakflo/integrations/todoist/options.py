"""
Dynamic select fields for Todoist.

A project selection scopes the section list, and project and section
together scope the task list. With nothing selected, every project,
section or active task visible to the user is offered.
"""

from __future__ import annotations

from wakflo.integrations.todoist.client import TodoistClient
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import DynamicFieldContext
from wakflo.sdk.form import FieldBuilder, FormBuilder
from wakflo.sdk.options import DynamicOption, DynamicOptionsResponse, OptionsBuilder


class TodoistOptions:
    def __init__(self, config: ClientConfig):
        self.config = config

    async def projects(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        async with TodoistClient(self.config, ctx.auth) as client:
            projects = await client.list_projects()
        return ctx.respond(
            DynamicOption(id=p.id, name=p.name, extra={"color": p.color} if p.color else {})
            for p in projects
        )

    async def sections(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        async with TodoistClient(self.config, ctx.auth) as client:
            sections = await client.list_sections(ctx.value("project_id"))
        return ctx.respond(DynamicOption(id=s.id, name=s.name) for s in sections)

    async def tasks(self, ctx: DynamicFieldContext) -> DynamicOptionsResponse:
        params = {
            "project_id": ctx.value("project_id"),
            "section_id": ctx.value("section_id"),
        }
        async with TodoistClient(self.config, ctx.auth) as client:
            tasks = await client.list_tasks(params)
        return ctx.respond(DynamicOption(id=t.id, name=t.content) for t in tasks)


def register_project_field(
    form: FormBuilder, options: TodoistOptions, required: bool = False
) -> FieldBuilder:
    descriptor = OptionsBuilder().resolver(options.projects).with_search().build()
    return (
        form.select_field("project_id", "Project")
        .required(required)
        .with_dynamic_options(descriptor)
        .help_text("Task project. If not set, the task is put in the Inbox.")
    )


def register_section_field(form: FormBuilder, options: TodoistOptions) -> FieldBuilder:
    descriptor = (
        OptionsBuilder()
        .resolver(options.sections)
        .field_reference("project_id")
        .refresh_on("project_id")
        .build()
    )
    return (
        form.select_field("section_id", "Section")
        .with_dynamic_options(descriptor)
        .help_text("A section under the selected project")
    )


def register_task_field(
    form: FormBuilder,
    options: TodoistOptions,
    name: str = "taskId",
    label: str = "Task",
    required: bool = True,
) -> FieldBuilder:
    descriptor = (
        OptionsBuilder()
        .resolver(options.tasks)
        .field_reference("project_id", "section_id")
        .refresh_on("project_id", "section_id")
        .with_search()
        .build()
    )
    return form.select_field(name, label).required(required).with_dynamic_options(descriptor)
