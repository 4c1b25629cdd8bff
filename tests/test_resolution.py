"""
Tests for ResolutionSession.

Tests cover:
- Resolving dynamic fields with referenced values
- refresh_on invalidation of exactly the dependent fields
- Caching by referenced values and search text
- FAILED state and auth preconditions
"""

import asyncio

import pytest

from wakflo.sdk.context import AuthContext
from wakflo.sdk.errors import PreconditionError, SchemaError, VendorError
from wakflo.sdk.form import new_form
from wakflo.sdk.options import DynamicOption, DynamicOptionsResponse, OptionsBuilder
from wakflo.sdk.resolution import FieldState, ResolutionSession

PLAYLISTS = {
    "c1": [DynamicOption("p1", "Playlist One")],
    "c2": [DynamicOption("p2", "Playlist Two"), DynamicOption("p3", "Playlist Three")],
}


class FakeVendor:
    """Records resolver calls."""

    def __init__(self):
        self.calls = []

    async def channels(self, ctx):
        self.calls.append(("channels", dict(ctx.input)))
        return ctx.respond([DynamicOption("c1", "Channel One"), DynamicOption("c2", "Channel Two")])

    async def playlists(self, ctx):
        self.calls.append(("playlists", dict(ctx.input)))
        channel = ctx.value("channel_id")
        if channel is None:
            return DynamicOptionsResponse.empty()
        return ctx.respond(PLAYLISTS.get(channel, []))

    async def categories(self, ctx):
        self.calls.append(("categories", dict(ctx.input)))
        return ctx.respond([DynamicOption("10", "Music")])


@pytest.fixture
def vendor():
    return FakeVendor()


@pytest.fixture
def schema(vendor):
    form = new_form("video", "Video")
    form.select_field("channel_id", "Channel").with_dynamic_options(
        OptionsBuilder().resolver(vendor.channels).with_search().build()
    )
    form.select_field("playlist_id", "Playlist").with_dynamic_options(
        OptionsBuilder()
        .resolver(vendor.playlists)
        .field_reference("channel_id")
        .refresh_on("channel_id")
        .build()
    )
    form.select_field("category_id", "Category").with_dynamic_options(
        OptionsBuilder().resolver(vendor.categories).build()
    )
    form.text_field("title", "Title")
    return form.build()


@pytest.fixture
def session(schema):
    return ResolutionSession(schema, AuthContext(access_token="t"), integration="youtube")


# =============================================================================
# Resolution
# =============================================================================


class TestResolve:
    """Tests for ResolutionSession.resolve."""

    @pytest.mark.asyncio
    async def test_dependent_field_uses_parent_value(self, session):
        """Test that a channel selection scopes the playlist list."""
        session.set_value("channel_id", "c1")

        response = await session.resolve("playlist_id")

        assert response.ids == ["p1"]
        assert session.state("playlist_id") is FieldState.RESOLVED

    @pytest.mark.asyncio
    async def test_blank_parent_gives_empty_list(self, session):
        """Test that an empty channel yields no playlists rather than an error."""
        session.set_value("channel_id", "")

        response = await session.resolve("playlist_id")

        assert response.ids == []

    @pytest.mark.asyncio
    async def test_resolver_sees_only_declared_references(self, session, vendor):
        """Test that undeclared values never reach the resolver."""
        session.set_value("title", "secret draft")
        session.set_value("channel_id", "c2")

        await session.resolve("playlist_id")

        assert vendor.calls == [("playlists", {"channel_id": "c2"})]

    @pytest.mark.asyncio
    async def test_cached_until_references_change(self, session, vendor):
        """Test that a second resolve with the same inputs does not call the resolver."""
        session.set_value("channel_id", "c1")
        await session.resolve("playlist_id")
        await session.resolve("playlist_id")

        assert len(vendor.calls) == 1

    @pytest.mark.asyncio
    async def test_search_is_part_of_cache_key(self, session, vendor):
        """Test that different search text re-runs the resolver."""
        all_channels = await session.resolve("channel_id")
        two = await session.resolve("channel_id", search="two")

        assert all_channels.ids == ["c1", "c2"]
        assert two.ids == ["c2"]
        assert len(vendor.calls) == 2

    @pytest.mark.asyncio
    async def test_requires_auth(self, schema):
        """Test that resolution without credentials fails before the resolver runs."""
        session = ResolutionSession(schema, None)

        with pytest.raises(PreconditionError, match="connected account"):
            await session.resolve("channel_id")

    @pytest.mark.asyncio
    async def test_failure_marks_field_failed(self):
        """Test that a resolver error propagates and is not cached."""

        async def broken(ctx):
            raise VendorError("boom", "youtube", status_code=500)

        form = new_form("f", "F")
        form.select_field("x", "X").with_dynamic_options(OptionsBuilder().resolver(broken).build())
        session = ResolutionSession(form.build(), AuthContext(access_token="t"))

        with pytest.raises(VendorError):
            await session.resolve("x")

        assert session.state("x") is FieldState.FAILED

    @pytest.mark.asyncio
    async def test_non_dynamic_field_rejected(self, session):
        """Test that static fields cannot be resolved."""
        with pytest.raises(SchemaError, match="not dynamic"):
            await session.resolve("title")


# =============================================================================
# Invalidation
# =============================================================================


class TestInvalidation:
    """Tests for refresh_on invalidation."""

    @pytest.mark.asyncio
    async def test_change_invalidates_only_dependents(self, session):
        """Test that changing the channel invalidates the playlist and nothing else."""
        await session.resolve("channel_id")
        await session.resolve("category_id")
        session.set_value("channel_id", "c1")
        await session.resolve("playlist_id")

        invalidated = session.set_value("channel_id", "c2")

        assert invalidated == ["playlist_id"]
        assert session.state("playlist_id") is FieldState.UNRESOLVED
        assert session.state("channel_id") is FieldState.RESOLVED
        assert session.state("category_id") is FieldState.RESOLVED

    @pytest.mark.asyncio
    async def test_reresolve_after_invalidation(self, session):
        """Test that a re-resolve reflects the new parent value."""
        session.set_value("channel_id", "c1")
        assert (await session.resolve("playlist_id")).ids == ["p1"]

        session.set_value("channel_id", "c2")

        assert (await session.resolve("playlist_id")).ids == ["p2", "p3"]

    @pytest.mark.asyncio
    async def test_same_value_invalidates_nothing(self, session):
        """Test that setting an unchanged value is a no-op."""
        session.set_value("channel_id", "c1")
        await session.resolve("playlist_id")

        assert session.set_value("channel_id", "c1") == []
        assert session.state("playlist_id") is FieldState.RESOLVED

    def test_invalidation_never_resolves(self, session, vendor):
        """Test that set_value alone performs no resolver calls."""
        session.set_value("channel_id", "c1")

        assert vendor.calls == []
        assert session.state("playlist_id") is FieldState.UNRESOLVED

    def test_unknown_field_rejected(self, session):
        """Test set_value on a field the form lacks."""
        with pytest.raises(SchemaError):
            session.set_value("nope", 1)

    @pytest.mark.asyncio
    async def test_change_during_resolve_discards_result(self):
        """Test that options invalidated mid-flight are neither cached nor marked resolved."""
        release = asyncio.Event()
        calls = []

        async def slow_tags(ctx):
            calls.append(len(calls))
            if len(calls) == 1:
                await release.wait()
                return ctx.respond([DynamicOption("old1", "Old")])
            return ctx.respond([DynamicOption("new1", "New")])

        form = new_form("f", "F")
        form.text_field("region", "Region")
        form.select_field("tag", "Tag").with_dynamic_options(
            OptionsBuilder().resolver(slow_tags).refresh_on("region").build()
        )
        session = ResolutionSession(form.build(), AuthContext(access_token="t"))

        pending = asyncio.create_task(session.resolve("tag"))
        await asyncio.sleep(0)
        assert session.state("tag") is FieldState.RESOLVING

        assert session.set_value("region", "eu") == ["tag"]
        release.set()
        stale = await pending

        assert stale.ids == ["old1"]
        assert session.state("tag") is FieldState.UNRESOLVED
        assert (await session.resolve("tag")).ids == ["new1"]
        assert len(calls) == 2
