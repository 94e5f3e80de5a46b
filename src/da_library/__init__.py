"""
DA Library MCP Server - library sheet management and block documentation for DA sites.
"""

from .errors import (
    LibraryError,
    LibraryValidationError,
    NotFoundError,
    TransportError,
    UnknownLibraryTypeError,
)

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("da-library-mcp")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "LibraryError",
    "LibraryValidationError",
    "NotFoundError",
    "TransportError",
    "UnknownLibraryTypeError",
]
