"""
Service error taxonomy.

Every failure a handler can report maps to one exception class here. Each
class knows its HTTP status and renders the JSON envelope the edge function
clients already branch on, so the handlers in app.main only translate.
"""
# app/core/errors.py
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors reported to the caller as JSON"""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> Dict[str, Any]:
        return {"message": self.message}


# Place info (read-through cache) errors
class PreconditionError(ServiceError):
    """Missing or invalid key, rejected before any I/O"""
    status_code = 403

    def __init__(self, message: str = "invalid place id"):
        super().__init__(message)


class StoreReadError(ServiceError):
    status_code = 500


class StoreWriteError(ServiceError):
    status_code = 501


class UpstreamFetchError(ServiceError):
    status_code = 500


# Identity exchange errors
class MissingAuthorizationCodeError(ServiceError):
    status_code = 400

    def __init__(self, message: str = "token is missing"):
        super().__init__(message)

    def body(self) -> Dict[str, Any]:
        return {"error": self.message}


class IdentityExchangeError(ServiceError):
    """Sign-in failed; `code` tells clients which step rejected it"""
    status_code = 403

    PROVIDER_REJECTED = "K01"
    NO_SESSION = "S01"
    NO_USER = "U01"

    def __init__(self, code: str, detail: Optional[str] = None):
        super().__init__("Authentication failed")
        self.code = code
        self.detail = detail

    def body(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code}


# Method dispatch errors
class MethodNotAllowedError(ServiceError):
    def __init__(self, status_code: int, message: str = "Invalid method"):
        super().__init__(message)
        self.status_code = status_code


class RouteNotFoundError(ServiceError):
    status_code = 404

    def __init__(self, message: str = "not found"):
        super().__init__(message)
