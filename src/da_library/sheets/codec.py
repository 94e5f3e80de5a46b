"""
Encoding and decoding of sheet documents.

Documents come in two shapes, told apart only by their ``:type`` tag:

- flat sheet: ``{total, limit, offset, data, ":type": "sheet"}``
- multi-sheet: each sheet under its name, plus ``:version``, ``:names`` and
  ``":type": "multi-sheet"``
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..errors import LibraryValidationError
from .models import (
    DATA_SHEET,
    MULTI_SHEET_TYPE,
    MULTI_SHEET_VERSION,
    OPTIONS_SHEET,
    SHEET_TYPE,
    LibraryType,
    MultiSheetDocument,
    Row,
    Sheet,
    library_type_spec,
    resolve_library_type,
)

DEFAULT_BLOCK_OPTIONS: list[Row] = [
    {
        "key": "style",
        "blocks": "section-metadata",
        "values": "xxs-spacing | xs-spacing | s-spacing | m-spacing | l-spacing | xl-spacing | xxl-spacing | dark | light | quiet",
    },
    {
        "key": "gap",
        "blocks": "ALL",
        "values": "100 | 200 | 300 | 400 | 500 | 600 | 700 | 800",
    },
    {
        "key": "background",
        "blocks": "section-metadata",
        "values": "dark-grey=#676767 | light-grey=#EFEFEF | adobe-red=#FF0000 | blue=#0077B6 | green=#00A36C",
    },
    {
        "key": "spacing",
        "blocks": "section-metadata",
        "values": "400 | 500 | 600 | 700 | 800",
    },
    {
        "key": "template",
        "blocks": "metadata",
        "values": "blog-post | product-page | feature-page",
    },
]


def is_multi_sheet(document: Mapping[str, Any] | None) -> bool:
    return bool(document) and document.get(":type") == MULTI_SHEET_TYPE


def is_flat_sheet(document: Mapping[str, Any] | None) -> bool:
    return bool(document) and document.get(":type") == SHEET_TYPE


def decode_data_sheet(document: Mapping[str, Any] | None) -> Sheet | None:
    """Return the primary table of a document of either shape."""
    if not document:
        return None
    if is_multi_sheet(document):
        return Sheet.from_json(document.get(DATA_SHEET))
    if "data" not in document:
        return None
    return Sheet.from_json(dict(document))


def decode_options_sheet(document: Mapping[str, Any] | None) -> Sheet | None:
    if not document:
        return None
    return Sheet.from_json(document.get(OPTIONS_SHEET))


def parse_multi_sheet(document: Mapping[str, Any]) -> dict[str, Sheet]:
    """Return the sheets listed in ``:names`` that are present, in order."""
    sheets: dict[str, Sheet] = {}
    for name in document.get(":names") or []:
        sheet = Sheet.from_json(document.get(name))
        if sheet is not None:
            sheets[name] = sheet
    return sheets


def decode_multi_sheet(document: Mapping[str, Any]) -> MultiSheetDocument:
    sheets = parse_multi_sheet(document)
    return MultiSheetDocument(
        sheets=sheets,
        names=list(sheets),
        version=document.get(":version") or MULTI_SHEET_VERSION,
    )


def encode_sheet(rows: list[Row]) -> dict[str, Any]:
    """Wrap rows into a flat single-table document."""
    return Sheet.from_rows(rows, tagged=True).to_json()


def _as_sheet(value: Sheet | Mapping[str, Any]) -> Sheet:
    if isinstance(value, Sheet):
        return value
    extras = {k: v for k, v in value.items() if k not in ("total", "limit", "offset", "data", ":type")}
    return Sheet.from_rows(list(value.get("data") or []), **extras)


def encode_multi_sheet(named_sheets: Mapping[str, Sheet | Mapping[str, Any]]) -> dict[str, Any]:
    """Wrap named tables into a multi-sheet document, keeping the given name order.

    Each value is a Sheet or a mapping with at least a ``data`` list.
    """
    sheets = {name: _as_sheet(value) for name, value in named_sheets.items()}
    return MultiSheetDocument(sheets=sheets, names=list(sheets)).to_json()


def encode_library_document(
    library_type: str | LibraryType,
    rows: list[Row],
    options: Sheet | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the stored document for a library sheet of ``library_type``.

    Blocks documents are always multi-sheet and always carry an options table:
    the one passed in, verbatim, or the default catalog.

    Raises:
        UnknownLibraryTypeError: If the type is not recognised
    """
    spec = library_type_spec(library_type)

    if not spec.is_multi_sheet:
        return encode_sheet(rows)

    sheets: dict[str, Sheet | Mapping[str, Any]] = {DATA_SHEET: {"data": rows}}
    if options is not None:
        sheets[OPTIONS_SHEET] = options
    elif spec.has_options_default:
        sheets[OPTIONS_SHEET] = {"data": [dict(row) for row in DEFAULT_BLOCK_OPTIONS]}
    return encode_multi_sheet(sheets)


def library_document_encoder(library_type: str | LibraryType):
    """Return an ``encode(rows)`` callable for a single-sheet library type.

    The type is resolved immediately so an unknown type fails before any I/O.
    Multi-sheet types are refused: an encoder sees only the data rows and would
    replace their other sheets (the blocks ``options`` sheet) with defaults.
    Blocks documents are written through ``library.blocks``.

    Raises:
        UnknownLibraryTypeError: If the type is not recognised
        LibraryValidationError: If the type is stored as a multi-sheet document
    """
    resolved = resolve_library_type(library_type)
    if library_type_spec(resolved).is_multi_sheet:
        raise LibraryValidationError(
            f"'{resolved.value}' documents hold more than one sheet and cannot be encoded from rows alone"
        )

    def encode(rows: list[Row]) -> dict[str, Any]:
        return encode_library_document(resolved, rows)

    return encode
