"""
ClickUp Integration for Wakflo.

Provides:
- Task creation and update, space creation and update
- Polling triggers for new and changed tasks
- Dependent workspace / space / folder / list selectors

API Reference:
    https://clickup.com/api
"""

from __future__ import annotations

import httpx

from wakflo.config import ConnectorSettings
from wakflo.integrations.clickup.actions import (
    CreateSpaceAction,
    CreateTaskAction,
    UpdateSpaceAction,
    UpdateTaskAction,
)
from wakflo.integrations.clickup.client import ClickUpClient
from wakflo.integrations.clickup.options import ClickUpOptions
from wakflo.integrations.clickup.triggers import TaskCreatedTrigger, TaskUpdatedTrigger
from wakflo.sdk.auth import oauth2_auth
from wakflo.sdk.integration import Integration

CLICKUP_AUTH = oauth2_auth(
    "clickup-auth",
    "ClickUp OAuth",
    authorization_url="https://app.clickup.com/api",
    token_url="https://api.clickup.com/api/v2/oauth/token",
    scopes=[],
)


def create_integration(
    settings: ConnectorSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Integration:
    config = settings.client_config(settings.clickup_base_url, transport)
    options = ClickUpOptions(config)
    return Integration(
        name="clickup",
        display_name="ClickUp",
        description="Manage ClickUp tasks and spaces.",
        auth=CLICKUP_AUTH,
        actions=(
            CreateTaskAction(config, options),
            UpdateTaskAction(config, options),
            CreateSpaceAction(config, options),
            UpdateSpaceAction(config, options),
        ),
        triggers=(
            TaskCreatedTrigger(config, options),
            TaskUpdatedTrigger(config, options),
        ),
        categories=("productivity", "project-management"),
    )


__all__ = [
    "CLICKUP_AUTH",
    "ClickUpClient",
    "ClickUpOptions",
    "CreateSpaceAction",
    "CreateTaskAction",
    "TaskCreatedTrigger",
    "TaskUpdatedTrigger",
    "UpdateSpaceAction",
    "UpdateTaskAction",
    "create_integration",
]
