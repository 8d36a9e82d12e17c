"""Domain exceptions for the ProjectHub application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class ProjectHubException(Exception):
    """Base exception for all ProjectHub application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an error response body."""
        return {"error": self.error_code, "message": self.message, "details": self.details}


class RequestValidationException(ProjectHubException):
    """Raised when request input fails its rule set.

    Carries the full field -> messages map (dot paths for nested fields).
    Always recoverable by resubmitting corrected input.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        """Initialize with the error map.

        Args:
            errors: Field path to ordered list of human-readable messages.
        """
        self.errors = errors
        super().__init__(
            "The given data was invalid.",
            "VALIDATION_FAILED",
            {"errors": errors},
        )

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "errors": self.errors}


class AuthenticationException(ProjectHubException):
    """Raised when no acting user can be resolved for the request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(ProjectHubException):
    """Raised when the authorization gate denies an operation.

    The message never says why; resource and action are kept in details
    for logs only.
    """

    def __init__(self, resource: str | None = None, action: str | None = None) -> None:
        """Initialize with optional resource and action.

        Args:
            resource: Resource type (e.g. 'custom_field').
            action: Operation attempted (e.g. 'update').
        """
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__("This action is unauthorized.", "PERMISSION_DENIED", details)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message}


class ResourceNotFoundException(ProjectHubException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'form', 'custom_field').
            resource_id: The id, slug or token that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class DomainInvariantException(ProjectHubException):
    """Raised inside a repository transaction when a business rule would break.

    The surrounding transaction must be rolled back by the caller.
    """

    def __init__(self, message: str, invariant: str, **details_extra: Any) -> None:
        """Initialize with message and invariant name.

        Args:
            message: Human-readable description.
            invariant: Short machine name (e.g. 'conversation_owner_required').
            **details_extra: Optional keys merged into details.
        """
        super().__init__(
            message,
            "DOMAIN_INVARIANT_VIOLATED",
            {"invariant": invariant, **details_extra},
        )
