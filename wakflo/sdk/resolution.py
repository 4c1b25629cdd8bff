"""
Dynamic field resolution sessions.

A ResolutionSession tracks one rendered form: the current values of its
fields and, per dynamic field, the cached options and their state.

State machine per dynamic field:

    UNRESOLVED ──resolve()──▶ RESOLVING ──ok──▶ RESOLVED
         ▲                        │
         │                        └──error──▶ FAILED
         └──── refresh_on field changed ◀── RESOLVED / FAILED

A change to field A invalidates exactly the dynamic fields whose
refresh_on contains A. Invalidation never starts a resolution; the
platform has to call resolve() again.

Usage:
    session = ResolutionSession(action.properties(), auth)
    channels = await session.resolve("channel_id")
    session.set_value("channel_id", channels.items[0].id)
    playlists = await session.resolve("playlist_id")
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from wakflo.sdk.context import AuthContext, DynamicFieldContext
from wakflo.sdk.errors import PreconditionError, SchemaError
from wakflo.sdk.form import FieldDefinition, FormSchema
from wakflo.sdk.options import DynamicOptionsResponse

logger = logging.getLogger(__name__)


class FieldState(str, Enum):
    """Cache state of a dynamic field."""

    UNRESOLVED = "unresolved"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    key: tuple[Any, ...]
    response: DynamicOptionsResponse


def _freeze(value: Any) -> Any:
    """Make a field value hashable for use in a cache key."""
    if isinstance(value, Mapping):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(v) for v in value)
    return value


class ResolutionSession:
    """
    Dependency-aware option cache for one form.

    Not shared between concurrent users; each rendered form owns one.
    """

    def __init__(
        self,
        schema: FormSchema,
        auth: AuthContext | None,
        *,
        integration: str = "wakflo",
        values: Mapping[str, Any] | None = None,
    ):
        self._schema = schema
        self._auth = auth
        self._integration = integration
        self._values: dict[str, Any] = dict(values or {})
        self._states: dict[str, FieldState] = {
            f.name: FieldState.UNRESOLVED for f in schema.dynamic_fields
        }
        self._cache: dict[str, _CacheEntry] = {}
        # Bumped on invalidation; an in-flight resolve started under an older
        # generation is discarded when it completes.
        self._generations: dict[str, int] = dict.fromkeys(self._states, 0)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    def state(self, name: str) -> FieldState:
        self._dynamic_field(name)
        return self._states[name]

    def states(self) -> dict[str, FieldState]:
        return dict(self._states)

    def set_value(self, name: str, value: Any) -> list[str]:
        """
        Record a field value.

        Returns the dynamic fields invalidated by the change. Setting a
        field to its current value invalidates nothing.
        """
        if name not in self._schema:
            raise SchemaError(f"form '{self._schema.id}' has no field named '{name}'")

        previous = self._values.get(name)
        self._values[name] = value
        if _freeze(previous) == _freeze(value):
            return []

        invalidated = []
        for f in self._schema.dynamic_fields:
            if name in f.dynamic.refresh_on and self._states[f.name] is not FieldState.UNRESOLVED:
                self.invalidate(f.name)
                invalidated.append(f.name)

        if invalidated:
            logger.debug(f"[{self._integration}] '{name}' changed, invalidated {invalidated}")
        return invalidated

    def invalidate(self, name: str) -> None:
        self._dynamic_field(name)
        self._cache.pop(name, None)
        self._generations[name] += 1
        self._states[name] = FieldState.UNRESOLVED

    async def resolve(self, name: str, search: str | None = None) -> DynamicOptionsResponse:
        """
        Return options for a dynamic field, calling its resolver if needed.

        Raises:
            PreconditionError: No satisfied auth context
            SchemaError: Unknown or non-dynamic field
            ConnectorError: Whatever the resolver raised; nothing is cached
        """
        definition = self._dynamic_field(name)
        if self._auth is None or not self._auth.is_satisfied:
            raise PreconditionError(
                f"cannot load options for '{definition.label}' without a connected account",
                self._integration,
                operation=name,
            )

        descriptor = definition.dynamic
        search = search if descriptor.supports_search else None
        references = {ref: self._values.get(ref) for ref in sorted(descriptor.field_references)}
        key = (_freeze(references), search)

        entry = self._cache.get(name)
        if self._states[name] is FieldState.RESOLVED and entry is not None and entry.key == key:
            return entry.response

        ctx = DynamicFieldContext(
            auth=self._auth,
            field_name=name,
            input=references,
            search=search,
        )

        generation = self._generations[name]
        self._states[name] = FieldState.RESOLVING
        start = time.perf_counter()
        try:
            response = await descriptor.resolver(ctx)
        except Exception:
            if self._generations[name] == generation:
                self._states[name] = FieldState.FAILED
                self._cache.pop(name, None)
            raise

        if self._generations[name] != generation:
            logger.debug(
                f"[{self._integration}] Discarded options for '{name}': "
                f"invalidated while resolving"
            )
            return response

        self._cache[name] = _CacheEntry(key=key, response=response)
        self._states[name] = FieldState.RESOLVED
        logger.debug(
            f"[{self._integration}] Resolved '{name}': {len(response)} options "
            f"in {(time.perf_counter() - start) * 1000:.1f}ms"
        )
        return response

    def _dynamic_field(self, name: str) -> FieldDefinition:
        definition = self._schema.field(name)
        if definition is None:
            raise SchemaError(f"form '{self._schema.id}' has no field named '{name}'")
        if definition.dynamic is None:
            raise SchemaError(f"field '{name}' in form '{self._schema.id}' is not dynamic")
        return definition
