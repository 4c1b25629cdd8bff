"""
Form schema declarations.

Actions and triggers declare their input surface as a FormSchema built
with a FormBuilder:

    form = new_form("create_task", "Create Task")
    form.text_field("content", "Content").required().max_length(500)
    form.select_field("view_style", "View Style").add_options(
        Option("list", "List"),
        Option("board", "Board"),
    )
    form.text_field("search", "Search").visible_when_equals("mode", "search")
    schema = form.build()

The schema only declares. Validation rules and visibility rules are
carried through unmodified for the platform's renderer and input
decoder; nothing here evaluates them, except missing_required() which
actions use to fail before any network call.

Each FormBuilder owns its field builders; build() produces frozen
FieldDefinitions, so concurrent schema constructions share no state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from wakflo.sdk.errors import SchemaError
from wakflo.sdk.options import DynamicOptionsDescriptor

# =============================================================================
# Enums
# =============================================================================


class FieldType(str, Enum):
    """Kinds of form fields."""

    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    MULTI_SELECT = "multiselect"
    DATE_TIME = "datetime"
    FILE = "file"
    SECTION = "section"
    PASSWORD = "password"
    OAUTH = "oauth"

    @property
    def accepts_options(self) -> bool:
        return self in (FieldType.SELECT, FieldType.MULTI_SELECT)

    @property
    def holds_value(self) -> bool:
        return self is not FieldType.SECTION


class ValidationKind(str, Enum):
    """Descriptive validation rule kinds."""

    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    FILE_TYPES = "fileTypes"
    PATTERN = "pattern"


# =============================================================================
# Value Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class Option:
    """A static select option."""

    value: Any
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"const": self.value, "title": self.label}


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """A declared validation constraint."""

    kind: ValidationKind
    value: Any = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.kind.value}
        if self.value is not None:
            result["value"] = list(self.value) if isinstance(self.value, tuple) else self.value
        if self.message:
            result["message"] = self.message
        return result


@dataclass(frozen=True, slots=True)
class VisibilityRule:
    """Show the field only when another field equals a value."""

    field: str
    equals: Any

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": "equals", "value": self.equals}


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """A single, immutable field declaration."""

    name: str
    type: FieldType
    label: str
    placeholder: str | None = None
    help_text: str | None = None
    required: bool = False
    default_value: Any = None
    options: tuple[Option, ...] = ()
    dynamic: DynamicOptionsDescriptor | None = None
    validations: tuple[ValidationRule, ...] = ()
    visibility: tuple[VisibilityRule, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_dynamic(self) -> bool:
        return self.dynamic is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON wire form consumed by the platform renderer."""
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "label": self.label,
            "required": self.required,
        }
        if self.placeholder is not None:
            result["placeholder"] = self.placeholder
        if self.help_text is not None:
            result["helpText"] = self.help_text
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        if self.options:
            result["options"] = [option.to_dict() for option in self.options]
        if self.dynamic is not None:
            result["dynamicOptions"] = self.dynamic.to_dict()
        if self.validations:
            result["validations"] = [rule.to_dict() for rule in self.validations]
        if self.visibility:
            result["visibleWhen"] = [rule.to_dict() for rule in self.visibility]
        if self.extra:
            result.update(self.extra)
        return result


@dataclass(frozen=True, slots=True)
class FormSchema:
    """An ordered, immutable set of fields with unique names."""

    id: str
    title: str
    fields: tuple[FieldDefinition, ...] = ()

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def required_fields(self) -> list[FieldDefinition]:
        return [f for f in self.fields if f.required]

    @property
    def dynamic_fields(self) -> list[FieldDefinition]:
        return [f for f in self.fields if f.is_dynamic]

    def field(self, name: str) -> FieldDefinition | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_required(self, name: str) -> FieldDefinition:
        found = self.field(name)
        if found is None:
            raise SchemaError(f"form '{self.id}' has no field named '{name}'")
        return found

    def missing_required(self, values: Mapping[str, Any]) -> list[str]:
        """
        Names of required fields absent from values.

        None, empty strings and empty collections count as absent. Fields
        hidden by an unmet visibility rule are not required.
        """
        missing = []
        for f in self.required_fields:
            if not self._is_visible(f, values):
                continue
            if _is_empty(values.get(f.name)):
                missing.append(f.name)
        return missing

    def is_visible(self, name: str, values: Mapping[str, Any]) -> bool:
        """Whether a field is shown, using a controlling field's default when it is unset."""
        return self._is_visible(self.get_required(name), values)

    def _is_visible(self, f: FieldDefinition, values: Mapping[str, Any]) -> bool:
        for rule in f.visibility:
            current = values.get(rule.field)
            if current is None:
                controlling = self.field(rule.field)
                current = controlling.default_value if controlling is not None else None
            if current != rule.equals:
                return False
        return True

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self.fields)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "fields": [f.to_dict() for f in self.fields],
        }


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


# =============================================================================
# Builders
# =============================================================================


class FieldBuilder:
    """
    Chained configuration for one field.

    Returned by the FormBuilder field methods; every setter returns self.
    """

    def __init__(self, name: str, field_type: FieldType, label: str):
        if not name:
            raise SchemaError("field name must not be empty")
        self._definition = FieldDefinition(name=name, type=field_type, label=label)

    @property
    def name(self) -> str:
        return self._definition.name

    def _update(self, **changes: Any) -> FieldBuilder:
        self._definition = replace(self._definition, **changes)
        return self

    def required(self, required: bool = True) -> FieldBuilder:
        return self._update(required=required)

    def placeholder(self, text: str) -> FieldBuilder:
        return self._update(placeholder=text)

    def help_text(self, text: str) -> FieldBuilder:
        return self._update(help_text=text)

    def default_value(self, value: Any) -> FieldBuilder:
        return self._update(default_value=value)

    def add_option(self, value: Any, label: str) -> FieldBuilder:
        return self.add_options(Option(value, label))

    def add_options(self, *options: Option) -> FieldBuilder:
        if not self._definition.type.accepts_options:
            raise SchemaError(
                f"field '{self.name}' of type {self._definition.type.value} cannot have options"
            )
        return self._update(options=self._definition.options + tuple(options))

    def add_validation(self, rule: ValidationRule) -> FieldBuilder:
        return self._update(validations=self._definition.validations + (rule,))

    def max_length(self, length: int, message: str | None = None) -> FieldBuilder:
        return self.add_validation(ValidationRule(ValidationKind.MAX_LENGTH, length, message))

    def min_length(self, length: int, message: str | None = None) -> FieldBuilder:
        return self.add_validation(ValidationRule(ValidationKind.MIN_LENGTH, length, message))

    def min_value(self, value: float, message: str | None = None) -> FieldBuilder:
        return self.add_validation(ValidationRule(ValidationKind.MIN, value, message))

    def max_value(self, value: float, message: str | None = None) -> FieldBuilder:
        return self.add_validation(ValidationRule(ValidationKind.MAX, value, message))

    def file_types(self, *extensions: str) -> FieldBuilder:
        normalized = tuple(ext.lower().lstrip(".") for ext in extensions)
        return self.add_validation(ValidationRule(ValidationKind.FILE_TYPES, normalized))

    def pattern(self, regex: str, message: str | None = None) -> FieldBuilder:
        return self.add_validation(ValidationRule(ValidationKind.PATTERN, regex, message))

    def visible_when_equals(self, other_field: str, value: Any) -> FieldBuilder:
        rule = VisibilityRule(field=other_field, equals=value)
        return self._update(visibility=self._definition.visibility + (rule,))

    def with_dynamic_options(self, descriptor: DynamicOptionsDescriptor) -> FieldBuilder:
        if not self._definition.type.accepts_options:
            raise SchemaError(
                f"field '{self.name}' of type {self._definition.type.value} "
                f"cannot have dynamic options"
            )
        return self._update(dynamic=descriptor)

    def with_extra(self, **extra: Any) -> FieldBuilder:
        """Attach renderer-specific attributes (OAuth URLs, scopes)."""
        return self._update(extra={**self._definition.extra, **extra})

    def build(self) -> FieldDefinition:
        definition = self._definition
        if definition.required and not any(
            rule.kind is ValidationKind.REQUIRED for rule in definition.validations
        ):
            definition = replace(
                definition,
                validations=(ValidationRule(ValidationKind.REQUIRED),) + definition.validations,
            )
        return definition


class FormBuilder:
    """
    Builder for a FormSchema.

    Field methods append a field and return its FieldBuilder. build()
    raises SchemaError on duplicate names or on references to fields that
    do not exist in the form.
    """

    def __init__(self, form_id: str, title: str):
        self._id = form_id
        self._title = title
        self._builders: list[FieldBuilder] = []

    def _add(self, name: str, field_type: FieldType, label: str) -> FieldBuilder:
        builder = FieldBuilder(name, field_type, label)
        self._builders.append(builder)
        return builder

    def text_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.TEXT, label)

    def textarea_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.TEXTAREA, label)

    def number_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.NUMBER, label)

    def checkbox_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.CHECKBOX, label)

    def select_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.SELECT, label)

    def multi_select_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.MULTI_SELECT, label)

    def date_time_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.DATE_TIME, label)

    def file_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.FILE, label)

    def password_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.PASSWORD, label)

    def oauth_field(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.OAUTH, label)

    def section(self, name: str, label: str) -> FieldBuilder:
        return self._add(name, FieldType.SECTION, label)

    def build(self) -> FormSchema:
        fields = tuple(builder.build() for builder in self._builders)
        _check_unique(self._id, fields)
        _check_references(self._id, fields)
        return FormSchema(id=self._id, title=self._title, fields=fields)


def new_form(form_id: str, title: str) -> FormBuilder:
    """Start a new form schema."""
    return FormBuilder(form_id, title)


def _check_unique(form_id: str, fields: Iterable[FieldDefinition]) -> None:
    seen: set[str] = set()
    for f in fields:
        if f.name in seen:
            raise SchemaError(f"form '{form_id}' declares field '{f.name}' more than once")
        seen.add(f.name)


def _check_references(form_id: str, fields: tuple[FieldDefinition, ...]) -> None:
    names = {f.name for f in fields}
    for f in fields:
        for rule in f.visibility:
            if rule.field not in names:
                raise SchemaError(
                    f"field '{f.name}' in form '{form_id}' is visible when unknown "
                    f"field '{rule.field}' equals {rule.equals!r}"
                )
        if f.dynamic is None:
            continue
        for ref in f.dynamic.field_references | f.dynamic.refresh_on:
            if ref == f.name:
                raise SchemaError(f"dynamic field '{f.name}' in form '{form_id}' references itself")
            if ref not in names:
                raise SchemaError(
                    f"dynamic field '{f.name}' in form '{form_id}' references "
                    f"unknown field '{ref}'"
                )
