"""
Exceptions raised by the library sheet and block tooling.

Validation errors are raised before any network call. Transport errors carry
the HTTP context of the failed request so tool results can report it.
"""

from __future__ import annotations

from typing import Any


class LibraryError(Exception):
    """Base class for all da-library errors."""


class LibraryValidationError(LibraryError):
    """Raised when an identifier, row or argument is malformed."""


class UnknownLibraryTypeError(LibraryValidationError):
    """Raised when a library type is not one of the known types."""

    def __init__(self, library_type: object):
        self.library_type = library_type
        super().__init__(f"Unknown library type: {library_type}")


class TransportError(LibraryError):
    """A remote request failed with a non-success status or never completed."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        url: str | None = None,
        method: str | None = None,
        body: Any = None,
    ):
        self.status = status
        self.url = url
        self.method = method
        self.body = body
        super().__init__(message)


class NotFoundError(TransportError):
    """The remote document or path does not exist (HTTP 404)."""


class AccessError(LibraryError):
    """A remote repository or branch is not reachable with the configured credentials."""
