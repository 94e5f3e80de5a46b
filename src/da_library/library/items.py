"""Icon and placeholder sheets: row builders, paths and encoders."""

from __future__ import annotations

from typing import Any

from ..errors import LibraryValidationError
from ..sheets.codec import library_document_encoder
from ..sheets.models import LibraryType, Row, library_type_spec
from .paths import DEFAULT_BASE_FOLDER, build_storage_path

ICON_KEY_FIELD = library_type_spec(LibraryType.ICONS).key_field
PLACEHOLDER_KEY_FIELD = library_type_spec(LibraryType.PLACEHOLDERS).key_field
DEFAULT_PLACEHOLDERS_FOLDER = "placeholders"

encode_icons = library_document_encoder(LibraryType.ICONS)
encode_placeholders = library_document_encoder(LibraryType.PLACEHOLDERS)


def _required(item: dict[str, Any], name: str) -> str:
    value = item.get(name)
    if not isinstance(value, str) or not value.strip():
        raise LibraryValidationError(f"'{name}' must be a non-empty string")
    return value


def icon_entry(item: dict[str, Any]) -> Row:
    return {"key": _required(item, "key"), "icon": _required(item, "icon")}


def placeholder_entry(item: dict[str, Any]) -> Row:
    return {"Key": _required(item, "key"), "Text": item.get("text") or ""}


def icons_sheet_path(base_folder: str = DEFAULT_BASE_FOLDER) -> str:
    return build_storage_path(LibraryType.ICONS, base_folder)


def placeholders_sheet_path(config_path: str = DEFAULT_PLACEHOLDERS_FOLDER) -> str:
    return build_storage_path(LibraryType.PLACEHOLDERS, config_path)
