"""Tests for the profile resolver."""

import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from matchday.modules.profiles.exceptions import ProfileFetchError, ProfileNotFoundError
from matchday.modules.profiles.interfaces import IProfileResolver, IProfileStore
from matchday.modules.profiles.models import (
    PROFILE_NOT_FOUND_REASON,
    ProfileResult,
    ProfileStatus,
)
from matchday.modules.profiles.repository import InMemoryProfileStore
from matchday.modules.profiles.service import (
    ProfileResolver,
    get_profile_resolver,
    reset_profile_resolver,
)


class TestProfileResult:
    def test_found(self):
        """found() carries the profile."""
        from matchday.shared.models import Profile

        result = ProfileResult.found(Profile(roles=["team"]))
        assert result.is_found
        assert result.profile.roles == ["team"]

    def test_not_found_uses_sentinel_reason(self):
        """not_found() carries the sentinel reason."""
        result = ProfileResult.not_found()
        assert result.is_not_found
        assert result.reason == PROFILE_NOT_FOUND_REASON

    def test_error(self):
        """error() is neither found nor not-found."""
        result = ProfileResult.error("timeout")
        assert result.status == ProfileStatus.ERROR
        assert not result.is_found
        assert not result.is_not_found


class TestProfileResolver:
    @pytest.fixture
    def store(self):
        return InMemoryProfileStore({
            "user-1": {"id": "user-1", "roles": ["organizer", "team"], "display_name": "Sam"},
            "legacy": {"id": "legacy", "role": "team"},
        })

    @pytest.mark.asyncio
    async def test_found(self, store):
        """Should return the parsed profile when the record exists."""
        result = await ProfileResolver(store).resolve("user-1")
        assert result.is_found
        assert result.profile.roles == ["organizer", "team"]
        assert result.profile.display_name == "Sam"

    @pytest.mark.asyncio
    async def test_legacy_record_found(self, store):
        """Legacy records resolve; role normalization happens later."""
        result = await ProfileResolver(store).resolve("legacy")
        assert result.is_found
        assert result.profile.role == "team"

    @pytest.mark.asyncio
    async def test_missing_record_is_not_found(self, store):
        """A missing record is not-found, not an error."""
        result = await ProfileResolver(store).resolve("ghost")
        assert result.is_not_found

    @pytest.mark.asyncio
    async def test_deleted_record_is_not_found(self, store):
        """Deleting the record turns a found profile into not-found."""
        store.delete("user-1")
        assert (await ProfileResolver(store).resolve("user-1")).is_not_found

    @pytest.mark.asyncio
    async def test_not_found_exception(self):
        """ProfileNotFoundError from the store is not-found."""
        store = MagicMock()
        store.get_by_key = AsyncMock(side_effect=ProfileNotFoundError("user-1"))
        assert (await ProfileResolver(store).resolve("user-1")).is_not_found

    @pytest.mark.asyncio
    async def test_not_found_message(self):
        """Any error whose message says 'not found' is not-found."""
        store = MagicMock()
        store.get_by_key = AsyncMock(side_effect=RuntimeError("User Not Found"))
        assert (await ProfileResolver(store).resolve("user-1")).is_not_found

    @pytest.mark.asyncio
    async def test_transient_error(self):
        """Network or permission failures are errors."""
        store = MagicMock()
        store.get_by_key = AsyncMock(side_effect=ProfileFetchError("permission denied"))
        result = await ProfileResolver(store).resolve("user-1")
        assert result.status == ProfileStatus.ERROR
        assert result.reason == "permission denied"

    @pytest.mark.asyncio
    async def test_exception_without_message(self):
        """An error with no message is reported by class name."""
        store = MagicMock()
        store.get_by_key = AsyncMock(side_effect=TimeoutError())
        result = await ProfileResolver(store).resolve("user-1")
        assert result.reason == "TimeoutError"

    @pytest.mark.asyncio
    async def test_malformed_record_is_error(self):
        """A record that is not a profile is an error, never not-found."""
        store = InMemoryProfileStore({"user-1": {"roles": 42}})
        result = await ProfileResolver(store).resolve("user-1")
        assert result.status == ProfileStatus.ERROR


class TestProtocols:
    def test_resolver_implements_protocol(self):
        """ProfileResolver should implement IProfileResolver."""
        assert isinstance(ProfileResolver(InMemoryProfileStore()), IProfileResolver)

    def test_in_memory_store_implements_protocol(self):
        """InMemoryProfileStore should implement IProfileStore."""
        assert isinstance(InMemoryProfileStore(), IProfileStore)


class TestSingleton:
    @patch("matchday.modules.profiles.service.get_supabase_client")
    def test_get_profile_resolver_is_cached(self, mock_client):
        """The resolver singleton is built once."""
        mock_client.return_value = MagicMock()
        assert get_profile_resolver() is get_profile_resolver()
        mock_client.assert_called_once()
        reset_profile_resolver()
        assert get_profile_resolver() is not None
