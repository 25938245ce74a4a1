"""
Error taxonomy shared by the adapter, dispatcher and API layer.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds callers can branch on."""
    UNAUTHORIZED = "unauthorized"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    REMOTE_STORE = "remote_store"
    DOMAIN_RESOLUTION = "domain_resolution"


class GroupSyncError(Exception):
    """Base exception for all group sync errors."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class Unauthorized(GroupSyncError):
    """No valid session."""
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class ValidationError(GroupSyncError):
    """Caller supplied incomplete or invalid input."""
    kind = ErrorKind.VALIDATION


class NotFound(GroupSyncError):
    """Resource absent, or not owned by the caller."""
    kind = ErrorKind.NOT_FOUND


class RemoteStoreError(GroupSyncError):
    """Transport, HTTP or parse failure talking to a remote store."""
    kind = ErrorKind.REMOTE_STORE

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code


class DomainResolutionError(GroupSyncError):
    """Store domain cannot be mapped to a request target."""
    kind = ErrorKind.DOMAIN_RESOLUTION
