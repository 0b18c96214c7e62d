"""
Custom Exceptions for Campus Events
===================================

Every failure the core can produce is one of these. The API layer turns them
into `{"message": ...}` bodies with the status code carried by the class.

Usage:
    from campus_events.core.exceptions import EventNotFoundError, AlreadyRegisteredError

    if not event:
        raise EventNotFoundError(event_id)
"""

from typing import Optional, Any, Dict


class CampusEventsError(Exception):
    """Base exception for all Campus Events errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(CampusEventsError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidCredentialsError(CampusEventsError):
    """Login failed. Unknown identifier and wrong secret are reported identically."""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(CampusEventsError):
    """Bearer token missing or unusable"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class MissingTokenError(AuthenticationError):
    def __init__(self):
        super().__init__("No token, authorization denied")
        self.code = "TOKEN_MISSING"


class TokenExpiredError(AuthenticationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class TokenMalformedError(AuthenticationError):
    """JWT token could not be parsed or lacks the identity claims"""

    def __init__(self):
        super().__init__("Token is malformed")
        self.code = "TOKEN_MALFORMED"


class TokenSignatureError(AuthenticationError):
    """JWT token signature does not verify"""

    def __init__(self):
        super().__init__("Token signature is invalid")
        self.code = "TOKEN_SIGNATURE_INVALID"


class ForbiddenError(CampusEventsError):
    """Role or ownership check failed"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(CampusEventsError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_').replace('-', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class EventNotFoundError(ResourceNotFoundError):
    def __init__(self, event_id: str):
        super().__init__("Event", event_id)


class OnDutyRequestNotFoundError(ResourceNotFoundError):
    def __init__(self, request_id: str):
        super().__init__("On-duty request", request_id)


class CertificateNotFoundError(ResourceNotFoundError):
    def __init__(self, certificate_id: str):
        super().__init__("Certificate", certificate_id)


# ============================================
# State Transition Errors (400-type)
# ============================================

class InvalidTransitionError(CampusEventsError):
    """A state machine guard rejected the requested change"""

    status_code = 400

    def __init__(self, message: str, code: str = "INVALID_TRANSITION"):
        super().__init__(message, code=code)


class RegistrationClosedError(InvalidTransitionError):
    def __init__(self):
        super().__init__("Registration is closed for this event", code="REGISTRATION_CLOSED")


class AlreadyRegisteredError(InvalidTransitionError):
    def __init__(self):
        super().__init__("You are already registered for this event", code="ALREADY_REGISTERED")


class NotRegisteredError(InvalidTransitionError):
    def __init__(self):
        super().__init__("You are not registered for this event", code="NOT_REGISTERED")


class RequestAlreadyResolvedError(InvalidTransitionError):
    def __init__(self, status: str):
        super().__init__(f"Request has already been {status}", code="ALREADY_RESOLVED")
        self.details["status"] = status


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: CampusEventsError) -> Dict[str, Any]:
    """Convert exception to API error response body"""
    return {"message": error.message}
