"""
Tests for dynamic options and bounded pagination.

Tests cover:
- DynamicOptionsResponse construction and dedup
- DynamicFieldContext.respond search filtering
- collect_pages cursor following, bounds and partial failures
"""

import pytest

from wakflo.sdk.context import AuthContext, DynamicFieldContext
from wakflo.sdk.errors import NotFoundError, PartialResultError, SchemaError, VendorError
from wakflo.sdk.options import (
    DynamicOption,
    DynamicOptionsResponse,
    OptionsBuilder,
    collect_pages,
)


def _pager(pages, fail_on=None):
    """Build a fetch_page callable over a list of item lists."""
    calls = []

    async def fetch_page(cursor):
        index = 0 if cursor is None else int(cursor)
        calls.append(cursor)
        if fail_on is not None and index == fail_on:
            raise VendorError("server error", "test", status_code=500, retryable=True)
        next_cursor = str(index + 1) if index + 1 < len(pages) else None
        return pages[index], next_cursor

    return fetch_page, calls


# =============================================================================
# Response Tests
# =============================================================================


class TestDynamicOptionsResponse:
    """Tests for DynamicOptionsResponse."""

    def test_from_items_dedups_by_id(self):
        """Test that the first occurrence of an id wins."""
        response = DynamicOptionsResponse.from_items(
            [
                DynamicOption("1", "First"),
                DynamicOption("2", "Second"),
                DynamicOption("1", "Duplicate"),
            ]
        )

        assert response.ids == ["1", "2"]
        assert response.items[0].name == "First"
        assert response.total == 2

    def test_from_items_accepts_mappings(self):
        """Test that vendor records become options with extras."""
        response = DynamicOptionsResponse.from_items([{"id": 7, "name": "Seven", "color": "red"}])

        option = response.items[0]
        assert option.id == "7"
        assert option.extra == {"color": "red"}
        assert option.to_dict() == {"color": "red", "id": "7", "name": "Seven"}

    def test_empty(self):
        """Test the empty response."""
        response = DynamicOptionsResponse.empty()

        assert len(response) == 0
        assert response.to_dict() == {"items": [], "totalCount": 0}

    def test_truncated_flag_in_wire_form(self):
        """Test that truncation is reported to the platform."""
        response = DynamicOptionsResponse.from_items([DynamicOption("a", "A")], truncated=True)

        assert response.to_dict()["truncated"] is True


class TestRespond:
    """Tests for DynamicFieldContext.respond."""

    def test_search_filters_case_insensitively(self):
        """Test that search keeps only names containing the needle."""
        ctx = DynamicFieldContext(auth=AuthContext(access_token="t"), search="  MUSIC ")

        response = ctx.respond(
            [
                DynamicOption("1", "Music videos"),
                DynamicOption("2", "Vlogs"),
                DynamicOption("3", "Live music"),
            ]
        )

        assert response.ids == ["1", "3"]
        assert response.total == 2

    def test_value_treats_blank_as_unset(self):
        """Test that blank strings read as None."""
        ctx = DynamicFieldContext(auth=AuthContext(access_token="t"), input={"a": " ", "b": "x"})

        assert ctx.value("a") is None
        assert ctx.value("b") == "x"
        assert ctx.value("missing") is None


class TestOptionsBuilder:
    """Tests for OptionsBuilder."""

    def test_build_requires_resolver(self):
        """Test that a descriptor without a resolver is rejected."""
        with pytest.raises(SchemaError):
            OptionsBuilder().field_reference("a").build()

    def test_negative_page_size_rejected(self):
        """Test pagination validation."""
        with pytest.raises(SchemaError):
            OptionsBuilder().with_pagination(-1)


# =============================================================================
# Pagination Tests
# =============================================================================


class TestCollectPages:
    """Tests for collect_pages."""

    @pytest.mark.asyncio
    async def test_follows_cursor_until_exhausted(self):
        """Test that three pages of two items yield six items in three calls."""
        fetch_page, calls = _pager([["a", "b"], ["c", "d"], ["e", "f"]])

        result = await collect_pages(fetch_page, integration="test", operation="list")

        assert result.items == ["a", "b", "c", "d", "e", "f"]
        assert result.pages_fetched == 3
        assert result.truncated is False
        assert calls == [None, "1", "2"]

    @pytest.mark.asyncio
    async def test_stops_at_max_pages(self):
        """Test that the page bound caps requests and flags truncation."""
        fetch_page, calls = _pager([["a"], ["b"], ["c"], ["d"]])

        result = await collect_pages(fetch_page, integration="test", operation="list", max_pages=2)

        assert result.items == ["a", "b"]
        assert result.truncated is True
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_failure_after_first_page_is_partial(self):
        """Test that a mid-way failure raises PartialResultError, not a short list."""
        fetch_page, _ = _pager([["a", "b"], ["c", "d"], ["e"]], fail_on=1)

        with pytest.raises(PartialResultError) as exc_info:
            await collect_pages(fetch_page, integration="test", operation="list")

        error = exc_info.value
        assert error.collected == 2
        assert error.pages_fetched == 1
        assert error.status_code == 500
        assert isinstance(error.cause, VendorError)

    @pytest.mark.asyncio
    async def test_failure_on_first_page_propagates_unchanged(self):
        """Test that a first-page error is not wrapped."""

        async def fetch_page(cursor):
            raise NotFoundError("no channel found with ID 'x'", "test", status_code=404)

        with pytest.raises(NotFoundError, match="'x'"):
            await collect_pages(fetch_page, integration="test", operation="list")

    @pytest.mark.asyncio
    async def test_invalid_max_pages(self):
        """Test that max_pages must be positive."""
        fetch_page, _ = _pager([["a"]])

        with pytest.raises(ValueError):
            await collect_pages(fetch_page, integration="test", operation="list", max_pages=0)
