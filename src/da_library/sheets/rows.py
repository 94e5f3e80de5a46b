"""Keyed row operations on sheets.

Every function returns a new Sheet; the sheet passed in is never modified.
"""

from __future__ import annotations

from typing import Any

from ..errors import LibraryValidationError
from .models import Row, Sheet

DEFAULT_KEY_FIELD = "name"


def _rows_of(sheet: Sheet | None) -> list[Row]:
    return list(sheet.data) if sheet is not None else []


def upsert_row(sheet: Sheet | None, row: Row, key_field: str = DEFAULT_KEY_FIELD) -> Sheet:
    """Replace the row with the same key in place, or append it.

    Raises:
        LibraryValidationError: If ``row`` has no value for ``key_field``
    """
    key = row.get(key_field)
    if key is None or (isinstance(key, str) and not key.strip()):
        raise LibraryValidationError(f"Row is missing a value for key field '{key_field}'")

    rows = _rows_of(sheet)
    for index, existing in enumerate(rows):
        if existing.get(key_field) == key:
            rows[index] = dict(row)
            break
    else:
        rows.append(dict(row))

    if sheet is None:
        return Sheet.from_rows(rows)
    return sheet.with_rows(rows)


def remove_row(sheet: Sheet | None, key_value: Any, key_field: str = DEFAULT_KEY_FIELD) -> Sheet:
    """Drop every row whose ``key_field`` equals ``key_value``; absent keys are a no-op."""
    rows = [row for row in _rows_of(sheet) if row.get(key_field) != key_value]
    if sheet is None:
        return Sheet.from_rows(rows)
    return sheet.with_rows(rows)


def row_exists(sheet: Sheet | None, key_value: Any, key_field: str = DEFAULT_KEY_FIELD) -> bool:
    return any(row.get(key_field) == key_value for row in _rows_of(sheet))
