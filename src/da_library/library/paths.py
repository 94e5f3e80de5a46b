"""Storage paths and public content URLs for library documents."""

from __future__ import annotations

import re

from ..sheets.models import LibraryType, resolve_library_type

CONTENT_DOMAIN = "https://content.da.live"
DEFAULT_BASE_FOLDER = "library"


def clean_path(path: str) -> str:
    """Strip a single leading slash."""
    return path[1:] if path.startswith("/") else path


def build_storage_path(
    library_type: str | LibraryType,
    base_folder: str,
    item_name: str | None = None,
) -> str:
    """Return ``/<base>/<type>`` or ``/<base>/<type>/<item>``.

    Raises:
        UnknownLibraryTypeError: If the type is not recognised
    """
    resolved = resolve_library_type(library_type)
    base = f"/{base_folder.strip('/')}/{resolved.value}"
    return f"{base}/{item_name}" if item_name else base


def build_public_url(org: str, repo: str, path: str) -> str:
    return f"{CONTENT_DOMAIN}/{org}/{repo}/{clean_path(path)}"


def build_library_config_url(
    org: str,
    repo: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
    library_type: str | LibraryType = LibraryType.BLOCKS,
) -> str:
    """Public URL of a library sheet, as registered in the site config."""
    return build_public_url(org, repo, f"{build_storage_path(library_type, base_folder)}.json")


def template_slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


def capitalize_name(name: str) -> str:
    return name[:1].upper() + name[1:]
