"""
Tests for custom exception classes

Tests exception initialization, messages, status codes, and details.
"""

from fastapi import status

from app.exceptions import (
    AuthenticationError,
    CustomFieldError,
    CustomFieldsNotLoadedError,
    FieldTypeConflictError,
    ForumException,
    NotPreloadedError,
    ResourceNotFoundError,
    TopicNotFoundError,
    UndeclaredFieldError,
    UserNotFoundError,
    ValidationError,
)


class TestForumException:
    """Test base ForumException class"""

    def test_default_values(self):
        exc = ForumException("Test error")
        assert str(exc) == "Test error"
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert exc.details == {}

    def test_custom_status_and_details(self):
        exc = ForumException("Test error", status_code=status.HTTP_400_BAD_REQUEST, details={"key": "value"})
        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert exc.details["key"] == "value"


class TestRequestExceptions:
    def test_authentication_error(self):
        exc = AuthenticationError()
        assert exc.status_code == status.HTTP_401_UNAUTHORIZED
        assert exc.message == "Authentication required"

    def test_topic_not_found(self):
        exc = TopicNotFoundError(7)
        assert isinstance(exc, ResourceNotFoundError)
        assert exc.status_code == status.HTTP_404_NOT_FOUND
        assert exc.message == "Topic with id '7' not found"

    def test_user_not_found_without_id(self):
        assert UserNotFoundError().message == "User not found"

    def test_validation_error_records_field(self):
        exc = ValidationError("bad", field="Price")
        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert exc.details == {"field": "Price"}


class TestCustomFieldExceptions:
    def test_undeclared_field(self):
        exc = UndeclaredFieldError("Cost")
        assert isinstance(exc, CustomFieldError)
        assert exc.field_name == "Cost"
        assert exc.details == {"field_name": "Cost", "entity": "Topic"}

    def test_type_conflict(self):
        exc = FieldTypeConflictError("Price", "string", "integer")
        assert "already declared as 'string'" in exc.message
        assert exc.details["requested_kind"] == "integer"

    def test_not_loaded(self):
        exc = CustomFieldsNotLoadedError("Price", 3)
        assert exc.details["entity_id"] == 3

    def test_not_preloaded(self):
        exc = NotPreloadedError("Store")
        assert exc.message == "Attempted to access the non preloaded custom field 'Store'"
