"""
Pydantic schemas for the Todoist REST API v2.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ViewStyle(str, Enum):
    LIST = "list"
    BOARD = "board"


# =============================================================================
# Vendor Resources
# =============================================================================


class _Resource(BaseModel):
    model_config = ConfigDict(extra="allow")


class Project(_Resource):
    id: str
    name: str
    color: str | None = None
    is_favorite: bool = False
    view_style: str | None = None
    url: str | None = None


class Section(_Resource):
    id: str
    name: str
    project_id: str | None = None
    order: int | None = None


class Task(_Resource):
    id: str
    content: str
    description: str = ""
    project_id: str | None = None
    section_id: str | None = None
    parent_id: str | None = None
    labels: list[str] = Field(default_factory=list)
    priority: int = 1
    is_completed: bool = False
    due: dict[str, Any] | None = None
    url: str | None = None


# =============================================================================
# Action Inputs
# =============================================================================


class _TaskFields(BaseModel):
    description: str | None = None
    labels: list[str] | None = None
    priority: int | None = Field(None, ge=1, le=4)
    due_date: datetime | None = Field(None, alias="dueDate")

    @field_validator("labels", mode="before")
    @classmethod
    def split_labels(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [label.strip() for label in value.split(",") if label.strip()]
        return value

    def _common_api_fields(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        if self.labels:
            data["labels"] = self.labels
        if self.priority is not None:
            data["priority"] = self.priority
        if self.due_date is not None:
            due = self.due_date
            if due.tzinfo is None:
                due = due.replace(tzinfo=timezone.utc)
            data["due_datetime"] = due.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return data


class CreateTaskProps(_TaskFields):
    content: str = Field(..., min_length=1)
    project_id: str | None = None
    section_id: str | None = None
    parent_id: str | None = None
    order: int | None = None

    def to_api_dict(self) -> dict[str, Any]:
        """Convert to API request format, excluding None values."""
        data = {"content": self.content, **self._common_api_fields()}
        for key in ("project_id", "section_id", "parent_id", "order"):
            value = getattr(self, key)
            if value is not None and value != "":
                data[key] = value
        return data


class UpdateTaskProps(_TaskFields):
    task_id: str = Field(..., alias="taskId", min_length=1)
    content: str | None = None

    def to_api_dict(self) -> dict[str, Any]:
        data = self._common_api_fields()
        if self.content:
            data["content"] = self.content
        return data


class ListTasksProps(BaseModel):
    project_id: str | None = None
    section_id: str | None = None
    label: str | None = None
    filter: str | None = None
    lang: str | None = None
    ids: str | None = None

    def to_params(self) -> dict[str, Any]:
        params = {
            "project_id": self.project_id,
            "section_id": self.section_id,
            "label": self.label,
            "filter": self.filter,
            "lang": self.lang,
        }
        if self.ids:
            params["ids"] = ",".join(i.strip() for i in self.ids.split(",") if i.strip())
        return {k: v for k, v in params.items() if v}


class CreateProjectProps(BaseModel):
    """The project selector on the form doubles as the parent project."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    parent_id: str | None = Field(None, alias="project_id")
    color: str | None = None
    is_favorite: bool = False
    view_style: ViewStyle | None = None

    def to_api_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "is_favorite": self.is_favorite}
        if self.parent_id:
            data["parent_id"] = self.parent_id
        if self.color:
            data["color"] = self.color
        if self.view_style is not None:
            data["view_style"] = self.view_style.value
        return data


class UpdateProjectProps(BaseModel):
    """Only the fields that are set are sent; the rest keep their current values."""

    project_id: str = Field(..., min_length=1)
    name: str | None = None
    color: str | None = None
    is_favorite: bool | None = None
    view_style: ViewStyle | None = None

    @field_validator("name", "color", "is_favorite", "view_style", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    def to_api_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.color:
            data["color"] = self.color
        if self.is_favorite is not None:
            data["is_favorite"] = self.is_favorite
        if self.view_style is not None:
            data["view_style"] = self.view_style.value
        return data
