"""
Custom Exceptions for X-Recruit API
===================================

Every failure inside the auth core is one of these. Route handlers never build
error responses by hand: the exception handlers in app.main map the error kind
to an HTTP status and the uniform envelope at the boundary.

Usage:
    from app.core.exceptions import ConflictError

    if existing:
        raise ConflictError("User with this email already exists")

Token verification failures carry a specific subclass (expired, malformed,
bad signature) for logs and tests. Clients only ever see the generic message.
"""

from typing import Optional, Any, Dict


class XRecruitError(Exception):
    """Base exception for all X-Recruit errors"""

    status_code: int = 500
    public_message: Optional[str] = None

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

    @property
    def client_message(self) -> str:
        """Message that is safe to send to the client"""
        return self.public_message or self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(XRecruitError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Conflict Errors (409)
# ============================================

class ConflictError(XRecruitError):
    """Resource already exists"""

    status_code = 409

    def __init__(self, message: str = "User with this email already exists"):
        super().__init__(message, code="CONFLICT")


# ============================================
# Authentication Errors (401)
# ============================================

class AuthenticationError(XRecruitError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="AUTH_FAILED")


class TokenVerificationError(AuthenticationError):
    """Bearer token could not be verified"""

    public_message = "Invalid token"

    def __init__(self, reason: str = "Token verification failed"):
        super().__init__(reason)
        self.code = "INVALID_TOKEN"


class TokenExpiredError(TokenVerificationError):
    """JWT token has expired"""

    def __init__(self):
        super().__init__("Token has expired")
        self.code = "TOKEN_EXPIRED"


class MalformedTokenError(TokenVerificationError):
    """JWT token is not three base64url segments with JSON header and claims"""

    def __init__(self, reason: str = "Token is malformed"):
        super().__init__(reason)
        self.code = "TOKEN_MALFORMED"


class TokenSignatureError(TokenVerificationError):
    """JWT signature does not match"""

    def __init__(self):
        super().__init__("Token signature mismatch")
        self.code = "TOKEN_SIGNATURE"


# ============================================
# Resource Errors (404)
# ============================================

class NotFoundError(XRecruitError):
    """Resource not found"""

    status_code = 404

    def __init__(self, message: str = "User not found", resource_id: Optional[Any] = None):
        details = {"resource_id": resource_id} if resource_id is not None else {}
        super().__init__(message, code="NOT_FOUND", details=details)


# ============================================
# Internal Errors (500)
# ============================================

class InternalError(XRecruitError):
    """Unexpected server-side failure. Details stay in the logs."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, code="INTERNAL_ERROR")


class HashError(InternalError):
    """Password hashing failed (e.g. malformed stored hash)"""

    def __init__(self, message: str = "Password hashing failed"):
        super().__init__(message)
        self.code = "HASH_ERROR"


class StoreError(InternalError):
    """Credential store I/O failed"""

    def __init__(self, message: str = "Credential store failure"):
        super().__init__(message)
        self.code = "STORE_ERROR"


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: XRecruitError) -> Dict[str, Any]:
    """Convert exception to the API envelope. Internal codes are not exposed."""
    return {
        "success": False,
        "message": error.client_message
    }
