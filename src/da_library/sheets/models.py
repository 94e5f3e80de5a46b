"""Models for the tabular JSON documents stored in DA and the library type table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UnknownLibraryTypeError

Row = dict[str, Any]

SHEET_TYPE = "sheet"
MULTI_SHEET_TYPE = "multi-sheet"
MULTI_SHEET_VERSION = 3

DATA_SHEET = "data"
OPTIONS_SHEET = "options"
LIBRARY_SHEET = "library"


class Sheet(BaseModel):
    """A single table: ``{total, limit, offset, data}``.

    Members other than the four counters and ``:type`` (for example
    ``:colWidths``) are kept as extras and written back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    total: int = 0
    limit: int = 0
    offset: int = 0
    data: list[Row] = Field(default_factory=list)
    sheet_type: str | None = Field(default=None, alias=":type")

    @classmethod
    def from_rows(cls, rows: list[Row], *, tagged: bool = False, **extra: Any) -> "Sheet":
        """Build a sheet whose counters match ``rows``."""
        rows = list(rows)
        values: dict[str, Any] = {
            "total": len(rows),
            "limit": len(rows),
            "offset": 0,
            "data": rows,
            **extra,
        }
        if tagged:
            values[":type"] = SHEET_TYPE
        return cls.model_validate(values)

    @classmethod
    def from_json(cls, value: dict[str, Any] | None) -> "Sheet | None":
        if not isinstance(value, dict):
            return None
        return cls.model_validate(value)

    @property
    def rows(self) -> list[Row]:
        return self.data

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def with_rows(self, rows: list[Row]) -> "Sheet":
        """Return a copy holding ``rows`` with recomputed counters."""
        tagged = self.sheet_type == SHEET_TYPE
        return Sheet.from_rows(rows, tagged=tagged, **self.extras)

    def to_json(self) -> dict[str, Any]:
        out = self.model_dump(by_alias=True)
        if out.get(":type") is None:
            out.pop(":type", None)
        return out


class MultiSheetDocument(BaseModel):
    """Several named sheets plus the ordered list of their names."""

    sheets: dict[str, Sheet] = Field(default_factory=dict)
    names: list[str] = Field(default_factory=list)
    version: int = MULTI_SHEET_VERSION

    def get(self, name: str) -> Sheet | None:
        return self.sheets.get(name)

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name in self.names:
            sheet = self.sheets[name]
            out[name] = Sheet.from_rows(sheet.data, tagged=True, **sheet.extras).to_json()
        out[":version"] = self.version
        out[":names"] = list(self.names)
        out[":type"] = MULTI_SHEET_TYPE
        return out


class LibraryType(str, Enum):
    """Kinds of library sheets that can be managed."""
    BLOCKS = "blocks"
    TEMPLATES = "templates"
    ICONS = "icons"
    PLACEHOLDERS = "placeholders"


@dataclass(frozen=True)
class LibraryTypeSpec:
    """How documents of one library type are shaped and keyed."""
    is_multi_sheet: bool
    has_options_default: bool
    key_field: str


LIBRARY_TYPE_SPECS: dict[LibraryType, LibraryTypeSpec] = {
    LibraryType.BLOCKS: LibraryTypeSpec(is_multi_sheet=True, has_options_default=True, key_field="name"),
    LibraryType.TEMPLATES: LibraryTypeSpec(is_multi_sheet=False, has_options_default=False, key_field="key"),
    LibraryType.ICONS: LibraryTypeSpec(is_multi_sheet=False, has_options_default=False, key_field="key"),
    LibraryType.PLACEHOLDERS: LibraryTypeSpec(is_multi_sheet=False, has_options_default=False, key_field="Key"),
}

_missing_specs = set(LibraryType) - set(LIBRARY_TYPE_SPECS)
if _missing_specs:
    raise RuntimeError(f"Library types without a spec: {sorted(t.value for t in _missing_specs)}")


def resolve_library_type(value: str | LibraryType) -> LibraryType:
    """Return the LibraryType for ``value`` or raise UnknownLibraryTypeError."""
    if isinstance(value, LibraryType):
        return value
    try:
        return LibraryType(value)
    except ValueError:
        raise UnknownLibraryTypeError(value) from None


def library_type_spec(value: str | LibraryType) -> LibraryTypeSpec:
    return LIBRARY_TYPE_SPECS[resolve_library_type(value)]
