"""
Shared error handling for the ACL service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for ACL errors."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class UndefinedAccessControlList(AccessLayerException):
    """No ACL registered for the protected type."""

    def __init__(self, message: str = "No access control list defined", details: Optional[Dict[str, Any]] = None):
        super().__init__("UNDEFINED_ACL", message, details)


class InvalidSuspect(AccessLayerException):
    """Resolved suspect can't answer role queries."""

    def __init__(self, message: str = "Invalid ACL suspect", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_SUSPECT", message, details)


class InvalidPermission(AccessLayerException):
    """Permission descriptor has an unrecognized shape."""

    def __init__(self, message: str = "Invalid ACL permission", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_PERMISSION", message, details)


class AccessDenied(AccessLayerException):
    """Suspect is not authorized to perform the action."""

    status_code = 403

    def __init__(self, message: str = "Access Denied", details: Optional[Dict[str, Any]] = None):
        super().__init__("ACCESS_DENIED", message, details)


class ValidationError(AccessLayerException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)
