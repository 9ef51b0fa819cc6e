"""Tests for matchday/shared/exceptions.py."""

from matchday.shared.exceptions import (
    MatchdayError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
)


class TestMatchdayError:
    def test_message(self):
        """MatchdayError should store message."""
        error = MatchdayError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """MatchdayError should default code to class name."""
        assert MatchdayError("Test error").code == "MatchdayError"

    def test_custom_code_and_details(self):
        """MatchdayError should accept a code and details."""
        error = MatchdayError("Test error", code="CUSTOM", details={"key": "value"})
        assert error.code == "CUSTOM"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        """MatchdayError should convert to dict."""
        result = MatchdayError("Test error", code="TEST_ERROR", details={"k": 1}).to_dict()
        assert result == {"error": "TEST_ERROR", "message": "Test error", "details": {"k": 1}}


class TestSubclasses:
    def test_all_inherit_from_base(self):
        """Every category should be a MatchdayError."""
        for cls in (NotFoundError, ValidationError):
            assert isinstance(cls("x"), MatchdayError)

    def test_external_service_error_records_service(self):
        """ExternalServiceError should store the service name in details."""
        error = ExternalServiceError("Boom", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"
