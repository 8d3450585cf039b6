"""Custom exception classes for the application.

Defines domain-specific exceptions raised by the nutrition and plan
services and handled consistently by the API exception handlers. Every
error here is recoverable at the call site: the user can correct input or
re-trigger a generation.
"""

from typing import Optional, Any, Dict


class AppException(Exception):
    """Base exception class for all application exceptions.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional additional error details.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize application exception.

        Args:
            message: Error message.
            status_code: HTTP status code (default: 500).
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource: str, identifier: Any):
        """Initialize not found error.

        Args:
            resource: Type of record (e.g., 'UserProfile', 'MealPlan').
            identifier: ID or identifier that was not found.
        """
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class InvalidInputError(AppException):
    """Exception raised when biometric or request input is malformed or missing."""

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize invalid input error.

        Args:
            message: Validation error message.
            field: Optional field name that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class IncompletePlanError(AppException):
    """Raised when the inference service returns fewer days than requested.

    The plan must not be persisted; the caller surfaces this as a retryable
    failure.
    """

    def __init__(self, requested_days: int, received_days: int, kind: str = "meal plan"):
        message = f"Only {received_days} of {requested_days} days generated for {kind}. Please try again."
        super().__init__(
            message,
            status_code=422,
            details={
                "requested_days": requested_days,
                "received_days": received_days,
                "retryable": True,
            },
        )
        self.requested_days = requested_days
        self.received_days = received_days


class RemoteOperationFailed(AppException):
    """Exception raised when a persistence or inference call fails."""

    def __init__(self, service: str, operation: str, reason: Optional[str] = None):
        """Initialize remote operation error.

        Args:
            service: Collaborator that failed ('persistence' or 'inference').
            operation: Operation that failed (e.g., 'create', 'invoke').
            reason: Optional short description of the underlying failure.
        """
        message = f"{service} operation '{operation}' failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            status_code=502,
            details={"service": service, "operation": operation, "retryable": True},
        )
        self.service = service
        self.operation = operation


class ConfigurationError(AppException):
    """Exception raised when application configuration is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        """Initialize configuration error.

        Args:
            message: Configuration error message.
            config_key: Optional configuration key that is invalid.
        """
        details = {"config_key": config_key} if config_key else {}
        super().__init__(message, status_code=500, details=details)
