"""Tests for matchday/shared/models.py."""

import pytest

from matchday.shared.models import Identity, Profile


class TestIdentity:
    def test_create_identity(self):
        """Should create an identity with optional contact fields."""
        identity = Identity(id="user-1")
        assert identity.id == "user-1"
        assert identity.email is None
        assert identity.phone_number is None

    def test_identity_is_immutable(self):
        """Identity should be immutable."""
        identity = Identity(id="user-1", email="a@example.com")
        with pytest.raises(Exception):  # Pydantic ValidationError
            identity.id = "user-2"

    def test_identity_ignores_extra_fields(self):
        """Extra provider fields should be dropped."""
        identity = Identity(id="user-1", aud="authenticated")
        assert not hasattr(identity, "aud")


class TestProfile:
    def test_roles_default_empty(self):
        """Profile without roles should have an empty list."""
        assert Profile().roles == []

    def test_scalar_roles_coerced_to_list(self):
        """A bare string in roles should become a one-element list."""
        assert Profile(roles="organizer").roles == ["organizer"]

    def test_null_roles_coerced_to_empty(self):
        """A null roles column should become an empty list."""
        assert Profile.model_validate({"roles": None}).roles == []

    def test_legacy_role_kept_separately(self):
        """The legacy singular role should be kept as-is."""
        profile = Profile.model_validate({"role": "team"})
        assert profile.roles == []
        assert profile.role == "team"

    def test_display_name_accepts_camel_case(self):
        """Records from older exports use displayName."""
        assert Profile.model_validate({"displayName": "Sam"}).display_name == "Sam"
        assert Profile.model_validate({"display_name": "Alex"}).display_name == "Alex"
