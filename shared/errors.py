"""
Shared error handling for the Access Authorization Service.
"""

from datetime import datetime, timezone
from typing import Dict, Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    status: int
    error: str
    message: str
    path: str


class AccessLayerException(Exception):
    """Base exception for Access Layer services."""

    status_code: int = 400
    reason: str = "Bad Request"

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, path: str) -> ErrorResponse:
        """Convert to error response.

        Only the public message is rendered; ``details`` stay server-side so
        the body never carries information about the targeted record.
        """
        return ErrorResponse(
            status=self.status_code,
            error=self.reason,
            message=self.message,
            path=path
        )


class AuthenticationError(AccessLayerException):
    """No verifiable principal for a guarded surface."""

    status_code = 401
    reason = "Unauthorized"

    def __init__(self, message: str = "Full authentication is required to access this resource",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHENTICATION_ERROR", message, details)


class MalformedCredentialsError(AuthenticationError):
    """Credentials could not be parsed; handled exactly like a failed login."""

    def __init__(self, message: str = "Malformed credentials", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "MALFORMED_CREDENTIALS"


class AuthorizationError(AccessLayerException):
    """Principal resolved but lacks a required role."""

    status_code = 403
    reason = "Forbidden"

    def __init__(self, message: str = "Access is denied", details: Optional[Dict[str, Any]] = None):
        super().__init__("AUTHORIZATION_ERROR", message, details)


class NotFoundError(AccessLayerException):
    """Target record absent."""

    status_code = 404
    reason = "Not Found"

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class ValidationError(AccessLayerException):
    """Request payload could not be validated."""

    status_code = 400
    reason = "Bad Request"

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class PolicyConfigurationError(AccessLayerException):
    """Invalid policy or user directory configuration, raised at startup."""

    status_code = 500
    reason = "Internal Server Error"

    def __init__(self, message: str = "Invalid policy configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("POLICY_CONFIGURATION_ERROR", message, details)
