"""Flat and multi-sheet JSON documents and keyed row operations."""

from da_library.sheets.codec import (
    DEFAULT_BLOCK_OPTIONS,
    decode_data_sheet,
    decode_multi_sheet,
    decode_options_sheet,
    encode_library_document,
    encode_multi_sheet,
    encode_sheet,
    is_flat_sheet,
    is_multi_sheet,
    library_document_encoder,
    parse_multi_sheet,
)
from da_library.sheets.models import (
    LIBRARY_TYPE_SPECS,
    LibraryType,
    LibraryTypeSpec,
    MultiSheetDocument,
    Row,
    Sheet,
    library_type_spec,
    resolve_library_type,
)
from da_library.sheets.rows import remove_row, row_exists, upsert_row

__all__ = [
    "DEFAULT_BLOCK_OPTIONS",
    "LIBRARY_TYPE_SPECS",
    "LibraryType",
    "LibraryTypeSpec",
    "MultiSheetDocument",
    "Row",
    "Sheet",
    "decode_data_sheet",
    "decode_multi_sheet",
    "decode_options_sheet",
    "encode_library_document",
    "encode_multi_sheet",
    "encode_sheet",
    "is_flat_sheet",
    "is_multi_sheet",
    "library_document_encoder",
    "library_type_spec",
    "parse_multi_sheet",
    "remove_row",
    "resolve_library_type",
    "row_exists",
    "upsert_row",
]
