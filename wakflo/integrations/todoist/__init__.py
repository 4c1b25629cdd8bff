"""
Todoist Integration for Wakflo.

Provides:
- Task creation, update and listing
- Project creation and update
- Dynamic project, section and task selectors

API Reference:
    https://developer.todoist.com/rest/v2
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.todoist.actions import (
    CreateProjectAction,
    CreateTaskAction,
    ListTasksAction,
    UpdateProjectAction,
    UpdateTaskAction,
)
from wakflo.integrations.todoist.client import TodoistClient
from wakflo.integrations.todoist.options import TodoistOptions
from wakflo.sdk.auth import oauth2_auth
from wakflo.sdk.integration import Integration

TODOIST_AUTH = oauth2_auth(
    "todoist-auth",
    "Todoist OAuth",
    authorization_url="https://todoist.com/oauth/authorize",
    token_url="https://todoist.com/oauth/access_token",
    scopes=["data:read_write"],
)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    config = settings.client_config(settings.todoist_base_url, transport)
    options = TodoistOptions(config)
    return Integration(
        name="todoist",
        display_name="Todoist",
        description="Manage Todoist tasks and projects.",
        auth=TODOIST_AUTH,
        actions=(
            CreateTaskAction(config, options),
            UpdateTaskAction(config, options),
            ListTasksAction(config, options),
            CreateProjectAction(config, options),
            UpdateProjectAction(config, options),
        ),
        categories=("productivity",),
    )


__all__ = [
    "TODOIST_AUTH",
    "CreateProjectAction",
    "CreateTaskAction",
    "ListTasksAction",
    "TodoistClient",
    "TodoistOptions",
    "UpdateProjectAction",
    "UpdateTaskAction",
    "create_integration",
]
