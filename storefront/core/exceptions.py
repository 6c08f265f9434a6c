# storefront/core/exceptions.py
"""
Core exceptions for the storefront service.

Every application error carries an ErrorCode. The code decides the HTTP
status and the envelope returned to the client (see core.responses).
"""

from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CSRF_INVALID = "CSRF_INVALID"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_IMPLEMENTED = "NOT_IMPLEMENTED"


ERROR_CODE_TO_HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.CSRF_INVALID: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.NOT_IMPLEMENTED: 501,
}

DEFAULT_ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.VALIDATION_ERROR: "The request contains invalid input.",
    ErrorCode.UNAUTHORIZED: "Login required.",
    ErrorCode.FORBIDDEN: "You do not have permission to perform this action.",
    ErrorCode.CSRF_INVALID: "Invalid CSRF token.",
    ErrorCode.NOT_FOUND: "Resource not found.",
    ErrorCode.CONFLICT: "The resource was modified concurrently.",
    ErrorCode.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again later.",
    ErrorCode.NOT_IMPLEMENTED: "This operation is not implemented yet.",
}


class StorefrontError(Exception):
    """Base exception for all storefront errors"""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message, defaults to the code's message
            details: Optional additional error details (never sent to clients)
        """
        message = message or DEFAULT_ERROR_MESSAGES[self.code]
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def http_status(self) -> int:
        return ERROR_CODE_TO_HTTP_STATUS[self.code]

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(StorefrontError):
    """Errors in input validation"""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        field_errors: Optional[List[Dict[str, str]]] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize validation error.

        Args:
            field_errors: List of {"field": ..., "message": ...} entries
            message: Error description
            details: Additional validation context
        """
        super().__init__(message, details)
        self.field_errors = field_errors or []


class UnauthorizedError(StorefrontError):
    """No valid session is attached to the request"""

    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(StorefrontError):
    """Session is valid but lacks the required role"""

    code = ErrorCode.FORBIDDEN


class CsrfInvalidError(StorefrontError):
    """Submitted CSRF token was missing, unknown, consumed or bound to another session"""

    code = ErrorCode.CSRF_INVALID


class DomainNotImplementedError(StorefrontError):
    """Raised by domain operations that have no business logic yet"""

    code = ErrorCode.NOT_IMPLEMENTED

    def __init__(self, domain: str, operation: str):
        super().__init__(
            f"{domain}.{operation} is not implemented",
            details={"domain": domain, "operation": operation}
        )
        self.domain = domain
        self.operation = operation


class ServiceError(StorefrontError):
    """Errors in external service interactions"""

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize service error.

        Args:
            message: Error description
            service_name: Name of the failing service
            operation: Operation that failed
            details: Additional service context
        """
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation

        if service_name:
            self.details['service'] = service_name
        if operation:
            self.details['operation'] = operation


class ConfigurationError(StorefrontError):
    """Errors in system configuration and initialization"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.component = component

        if component:
            self.details['component'] = component


# Convenience functions for creating common errors

def not_implemented(domain: str, operation: str) -> DomainNotImplementedError:
    """Create a not-implemented error for a domain operation."""
    return DomainNotImplementedError(domain, operation)
