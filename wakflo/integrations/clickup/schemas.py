"""
Pydantic schemas for the ClickUp API v2.

Form fields use kebab-case names (workspace-id, space-id, ...) and the
action inputs alias them back to Python attribute names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Vendor Resources
# =============================================================================


class _Resource(BaseModel):
    model_config = ConfigDict(extra="allow")


class Team(_Resource):
    """A ClickUp workspace. The v2 API still calls these teams."""

    id: str
    name: str
    color: str | None = None


class Space(_Resource):
    id: str
    name: str
    private: bool = False


class Folder(_Resource):
    id: str
    name: str
    hidden: bool = False


class TaskList(_Resource):
    id: str
    name: str
    task_count: int | None = None


class Member(_Resource):
    id: int
    username: str | None = None
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.username or self.email or str(self.id)


class Task(_Resource):
    id: str
    name: str
    description: str | None = None
    status: dict[str, Any] | None = None
    priority: dict[str, Any] | None = None
    date_created: str | None = None
    date_updated: str | None = None
    url: str | None = None


# =============================================================================
# Action Inputs
# =============================================================================


class _Input(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _TaskFields(_Input):
    description: str | None = None
    priority: int | None = Field(None, ge=1, le=4)
    assignees: list[int] = Field(default_factory=list, alias="assignee-id")

    @field_validator("priority", mode="before")
    @classmethod
    def empty_priority(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("assignees", mode="before")
    @classmethod
    def split_assignees(cls, value: Any) -> Any:
        if value is None or value == "":
            return []
        if isinstance(value, (str, int)):
            return [part.strip() for part in str(value).split(",") if part.strip()]
        return value

    def _common_api_fields(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        if self.priority is not None:
            data["priority"] = self.priority
        return data


class CreateTaskProps(_TaskFields):
    list_id: str = Field(..., alias="list-id", min_length=1)
    name: str = Field(..., min_length=1)

    def to_api_dict(self) -> dict[str, Any]:
        data = {"name": self.name, **self._common_api_fields()}
        if self.assignees:
            data["assignees"] = self.assignees
        return data


class UpdateTaskProps(_TaskFields):
    task_id: str = Field(..., alias="task-id", min_length=1)
    name: str | None = None

    def to_api_dict(self) -> dict[str, Any]:
        data = self._common_api_fields()
        if self.name:
            data["name"] = self.name
        if self.assignees:
            data["assignees"] = {"add": self.assignees}
        return data


def _space_features(tags: bool = True, custom_fields: bool = True) -> dict[str, Any]:
    return {
        "due_dates": {
            "enabled": True,
            "start_date": False,
            "remap_due_dates": True,
            "remap_closed_due_date": False,
        },
        "time_tracking": {"enabled": False},
        "tags": {"enabled": tags},
        "time_estimates": {"enabled": True},
        "checklists": {"enabled": True},
        "custom_fields": {"enabled": custom_fields},
    }


class CreateSpaceProps(_Input):
    workspace_id: str = Field(..., alias="workspace-id", min_length=1)
    name: str = Field(..., min_length=1)
    private: bool = False
    multiple_assignees: bool = True

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "private": self.private,
            "multiple_assignees": self.multiple_assignees,
            "features": _space_features(),
        }


class TaskCreatedProps(_Input):
    list_id: str = Field(..., alias="list-id", min_length=1)


class UpdateSpaceProps(_Input):
    space_id: str = Field(..., alias="space-id", min_length=1)
    name: str | None = None
    multiple_assignees: bool = Field(True, alias="multiple-assignees")
    tags: bool = True
    custom_fields: bool = Field(True, alias="custom-fields")

    def to_api_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "multiple_assignees": self.multiple_assignees,
            "features": _space_features(self.tags, self.custom_fields),
        }
        if self.name:
            data["name"] = self.name
        return data


class TaskUpdatedProps(TaskCreatedProps):
    status: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def blank_status(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
