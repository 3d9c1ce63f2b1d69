"""
Custom Exception Classes for the forum host and its plugins

This module defines custom exceptions for better error handling and
consistent error responses across the application.
"""

from typing import Any

from fastapi import status


class ForumException(Exception):
    """Base exception class for all forum-related exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Authentication
# ============================================================================


class AuthenticationError(ForumException):
    """Raised when the acting user cannot be identified"""

    def __init__(self, message: str = "Authentication required", details: dict[str, Any] | None = None):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, details=details or {})


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(ForumException):
    """Base class for resource not found errors"""

    def __init__(self, resource_type: str, resource_id: Any | None = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user is not found"""

    def __init__(self, user_id: Any | None = None):
        super().__init__(resource_type="User", resource_id=user_id)


class TopicNotFoundError(ResourceNotFoundError):
    """Raised when a topic is not found"""

    def __init__(self, topic_id: Any | None = None):
        super().__init__(resource_type="Topic", resource_id=topic_id)


# ============================================================================
# Validation
# ============================================================================


class ValidationError(ForumException):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, details=error_details)


# ============================================================================
# Custom Field Exceptions
# ============================================================================


class CustomFieldError(ForumException):
    """Base class for custom-field registration and access errors"""

    def __init__(self, message: str, field_name: str, details: dict[str, Any] | None = None):
        error_details = {"field_name": field_name, **(details or {})}
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, details=error_details)
        self.field_name = field_name


class UndeclaredFieldError(CustomFieldError):
    """Raised when an extension references a custom field that was never declared"""

    def __init__(self, field_name: str, entity: str = "Topic"):
        super().__init__(
            message=f"Custom field '{field_name}' has not been declared on {entity}",
            field_name=field_name,
            details={"entity": entity},
        )


class FieldTypeConflictError(CustomFieldError):
    """Raised when a custom field is redeclared with a different kind"""

    def __init__(self, field_name: str, existing_kind: str, requested_kind: str):
        super().__init__(
            message=f"Custom field '{field_name}' is already declared as '{existing_kind}', not '{requested_kind}'",
            field_name=field_name,
            details={"existing_kind": existing_kind, "requested_kind": requested_kind},
        )


class CustomFieldsNotLoadedError(CustomFieldError):
    """Raised when custom fields of a persisted entity are read before being loaded"""

    def __init__(self, field_name: str, entity_id: Any | None = None):
        super().__init__(
            message=f"Custom fields of entity '{entity_id}' were not loaded before reading '{field_name}'",
            field_name=field_name,
            details={"entity_id": entity_id},
        )


class NotPreloadedError(CustomFieldError):
    """Raised when a preloaded-only entity is asked for a field outside its preload set"""

    def __init__(self, field_name: str):
        super().__init__(
            message=f"Attempted to access the non preloaded custom field '{field_name}'",
            field_name=field_name,
        )
