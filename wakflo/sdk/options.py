"""
Dynamic options for select fields.

A dynamic select field does not list its options in the schema. It
carries a DynamicOptionsDescriptor whose resolver is called by the
platform when the field is rendered:

    descriptor = (
        OptionsBuilder()
        .resolver(list_playlists)
        .field_reference("channel_id")
        .refresh_on("channel_id")
        .with_search()
        .build()
    )
    form.select_field("playlist_id", "Playlist").with_dynamic_options(descriptor)

The resolver receives a DynamicFieldContext holding the auth credentials
and the current values of the declared field references, performs a
bounded number of vendor calls and returns a DynamicOptionsResponse.
Declaring a descriptor performs no I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from wakflo.sdk.errors import ConnectorError, PartialResultError, SchemaError

if TYPE_CHECKING:
    from wakflo.sdk.context import DynamicFieldContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

Resolver = Callable[["DynamicFieldContext"], Awaitable["DynamicOptionsResponse"]]

DEFAULT_MAX_PAGES = 10


# =============================================================================
# Response Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class DynamicOption:
    """A single resolved option: an id, a display name and optional extras."""

    id: str
    name: str
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, Any],
        *,
        id_key: str = "id",
        name_key: str = "name",
    ) -> DynamicOption:
        """Build an option from a vendor record, keeping other keys as extras."""
        extra = {k: v for k, v in data.items() if k not in (id_key, name_key)}
        return cls(
            id=str(data[id_key]),
            name=str(data.get(name_key) or data[id_key]),
            extra=extra,
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the wire form ``{"id", "name", ...extra}``."""
        return {**self.extra, "id": self.id, "name": self.name}


@dataclass(frozen=True, slots=True)
class DynamicOptionsResponse:
    """
    Ordered options returned by a resolver.

    total is a pagination hint for the UI; it defaults to the number of
    items. truncated is set when a page bound stopped collection early.
    """

    items: tuple[DynamicOption, ...] = ()
    total: int = 0
    truncated: bool = False

    @classmethod
    def from_items(
        cls,
        items: Iterable[DynamicOption | Mapping[str, Any]],
        total: int | None = None,
        *,
        truncated: bool = False,
    ) -> DynamicOptionsResponse:
        """
        Build a response, deduplicating by id.

        First occurrence wins and order is preserved. Mappings are
        converted with DynamicOption.from_mapping.
        """
        seen: set[str] = set()
        unique: list[DynamicOption] = []
        for item in items:
            option = item if isinstance(item, DynamicOption) else DynamicOption.from_mapping(item)
            if option.id in seen:
                continue
            seen.add(option.id)
            unique.append(option)

        return cls(
            items=tuple(unique),
            total=len(unique) if total is None else total,
            truncated=truncated,
        )

    @classmethod
    def empty(cls) -> DynamicOptionsResponse:
        return cls()

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "items": [item.to_dict() for item in self.items],
            "totalCount": self.total,
        }
        if self.truncated:
            result["truncated"] = True
        return result


# =============================================================================
# Descriptor
# =============================================================================


@dataclass(frozen=True, slots=True)
class DynamicOptionsDescriptor:
    """
    Declaration of a dynamic select field's option source.

    Attributes:
        resolver: Async callable invoked with a DynamicFieldContext
        field_references: Sibling fields whose values are passed to the resolver
        refresh_on: Sibling fields whose change invalidates cached options
        supports_search: Client may pass a free-text filter
        page_size: Pagination hint for the UI (0 = no pagination)
    """

    resolver: Resolver
    field_references: frozenset[str] = frozenset()
    refresh_on: frozenset[str] = frozenset()
    supports_search: bool = False
    page_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Wire form. The resolver itself is addressed by field name, never serialised."""
        result: dict[str, Any] = {
            "type": "dynamic",
            "fieldReferences": sorted(self.field_references),
            "refreshOn": sorted(self.refresh_on),
        }
        if self.supports_search:
            result["searchable"] = True
        if self.page_size:
            result["pagination"] = {"pageSize": self.page_size}
        return result


class OptionsBuilder:
    """Chained builder for DynamicOptionsDescriptor."""

    def __init__(self) -> None:
        self._resolver: Resolver | None = None
        self._references: list[str] = []
        self._refresh_on: list[str] = []
        self._search = False
        self._page_size = 0

    def resolver(self, fn: Resolver) -> OptionsBuilder:
        self._resolver = fn
        return self

    def field_reference(self, *names: str) -> OptionsBuilder:
        """Pass the current value of these fields into the resolver context."""
        self._references.extend(names)
        return self

    def refresh_on(self, *names: str) -> OptionsBuilder:
        """Invalidate cached options when any of these fields change."""
        self._refresh_on.extend(names)
        return self

    def with_search(self) -> OptionsBuilder:
        self._search = True
        return self

    def with_pagination(self, page_size: int) -> OptionsBuilder:
        if page_size < 0:
            raise SchemaError("page size must not be negative")
        self._page_size = page_size
        return self

    def build(self) -> DynamicOptionsDescriptor:
        if self._resolver is None:
            raise SchemaError("dynamic options require a resolver function")
        return DynamicOptionsDescriptor(
            resolver=self._resolver,
            field_references=frozenset(self._references),
            refresh_on=frozenset(self._refresh_on),
            supports_search=self._search,
            page_size=self._page_size,
        )


# =============================================================================
# Pagination
# =============================================================================


@dataclass(frozen=True, slots=True)
class CollectedPages(Generic[T]):
    """Items accumulated across pages."""

    items: list[T]
    pages_fetched: int
    truncated: bool = False


PageFetcher = Callable[[str | None], Awaitable[tuple[list[T], str | None]]]


async def collect_pages(
    fetch_page: PageFetcher[T],
    *,
    integration: str,
    operation: str,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> CollectedPages[T]:
    """
    Follow a vendor cursor until it is exhausted or max_pages is reached.

    fetch_page(cursor) returns (items, next_cursor); the first call gets
    None. At most max_pages calls are made. If a page after the first
    fails, PartialResultError is raised instead of returning the pages
    already collected. A failure on the first page propagates unchanged.

    Args:
        fetch_page: Async callable fetching one page
        integration: Integration name for error context
        operation: Operation name for error context
        max_pages: Upper bound on requests

    Returns:
        CollectedPages with truncated=True if the bound stopped collection
    """
    if max_pages < 1:
        raise ValueError("max_pages must be at least 1")

    items: list[T] = []
    cursor: str | None = None
    pages = 0

    while pages < max_pages:
        try:
            page_items, next_cursor = await fetch_page(cursor)
        except ConnectorError as e:
            if pages == 0:
                raise
            raise PartialResultError(
                f"{operation} failed on page {pages + 1} after collecting "
                f"{len(items)} items: {e.message}",
                integration,
                operation=operation,
                collected=len(items),
                pages_fetched=pages,
                cause=e,
                status_code=e.status_code,
            ) from e

        pages += 1
        items.extend(page_items)

        if not next_cursor:
            return CollectedPages(items=items, pages_fetched=pages)

        cursor = next_cursor

    logger.warning(
        f"[{integration}] {operation} stopped after {max_pages} pages "
        f"with more results available"
    )
    return CollectedPages(items=items, pages_fetched=pages, truncated=True)
