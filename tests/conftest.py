"""
Shared test fixtures and utilities.

This module provides fakes for the external collaborators (identity
provider, profile resolver, timer) and resets module singletons between
tests.
"""

from typing import Callable, Optional

import pytest

from matchday.shared.config import get_settings
from matchday.shared.database import reset_client_cache
from matchday.shared.models import Identity, Profile
from matchday.modules.activity.service import reset_activity_aggregator
from matchday.modules.profiles.models import ProfileResult
from matchday.modules.profiles.service import reset_profile_resolver
from matchday.modules.roles.store import RoleStore


class FakeIdentityProvider:
    """Identity provider driven by the test through emit() and fail()."""

    def __init__(self, sign_out_error: Optional[Exception] = None):
        self.on_change: Optional[Callable] = None
        self.on_error: Optional[Callable] = None
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0
        self.sign_out_calls = 0
        self.sign_out_error = sign_out_error

    def subscribe(self, on_change, on_error):
        self.subscribe_calls += 1
        self.on_change = on_change
        self.on_error = on_error

        def unsubscribe():
            self.unsubscribe_calls += 1

        return unsubscribe

    def emit(self, identity: Optional[Identity]) -> None:
        self.on_change(identity)

    def fail(self, error: BaseException) -> None:
        self.on_error(error)

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        if self.sign_out_error is not None:
            raise self.sign_out_error


class StubProfileResolver:
    """Returns canned results per identity id and records every lookup."""

    def __init__(self, results: Optional[dict[str, ProfileResult]] = None):
        self.results = results or {}
        self.calls: list[str] = []

    async def resolve(self, identity_id: str) -> ProfileResult:
        self.calls.append(identity_id)
        return self.results.get(identity_id, ProfileResult.not_found())


class ManualTimer:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Controllable clock: timers only fire when the test says so."""

    def __init__(self):
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            if not timer.cancelled:
                timer.callback()


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, clients and services around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_profile_resolver()
    reset_activity_aggregator()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_profile_resolver()
    reset_activity_aggregator()


@pytest.fixture
def identity() -> Identity:
    return Identity(id="user-123", email="player@example.com", phone_number="+15550100")


@pytest.fixture
def role_store() -> RoleStore:
    return RoleStore()


@pytest.fixture
def signed_in_store(identity) -> RoleStore:
    """RoleStore with an identity already set."""
    store = RoleStore()
    store.set_identity(identity)
    return store


@pytest.fixture
def multi_role_profile() -> Profile:
    return Profile(roles=["organizer", "team"], display_name="Sam")


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
