"""Exception hierarchy shared by every App Store operation."""

from __future__ import annotations

from typing import Optional


class AppStoreError(Exception):
    """Base class for all errors raised by appstore_scraper."""


class PreconditionError(AppStoreError, ValueError):
    """Raised before any network I/O when caller input is missing or out of range."""


class HttpError(AppStoreError):
    """Raised when a request ends with a non-2xx status.

    Also used with status 204 when a 200 response carries no usable body.
    Branch on ``status`` rather than on the message text.
    """

    def __init__(self, message: str, status: int, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


class TransportError(AppStoreError):
    """Raised when a network-level failure (DNS, TLS, timeout) exhausts its retries."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class ResponseDecodeError(AppStoreError, ValueError):
    """Raised when a response body is not valid JSON or XML."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ResponseValidationError(AppStoreError, ValueError):
    """Raised when a decoded payload does not have the expected shape."""

    def __init__(self, message: str, operation: str) -> None:
        super().__init__(message)
        self.operation = operation


class AppNotFoundError(AppStoreError, LookupError):
    """Raised when a lookup succeeds but returns no matching app."""
