"""
Registration of library types in the site configuration.

The site config at ``/config/<org>/<repo>`` must hold a ``library`` sheet whose
rows map a library title to the URL of its sheet. The config is found in one of
four shapes; each is brought to a multi-sheet document with a ``library`` sheet
before a registration row is written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..sheets.codec import is_flat_sheet, is_multi_sheet
from ..sheets.models import DATA_SHEET, LIBRARY_SHEET, MultiSheetDocument, Row, Sheet
from .models import RegistrationResult, RegistrationStatus

if TYPE_CHECKING:
    from ..clients.store import DocumentStoreClient

logger = logging.getLogger("da-library")

TITLE_COLUMN = "title"
PATH_COLUMN = "path"


class ConfigShape(str, Enum):
    """Shape of the site config document before registration."""
    FLAT = "flat"
    MULTI_NO_LIBRARY = "multi_no_library"
    MULTI_WITH_LIBRARY = "multi_with_library"
    MISSING = "missing"


def _is_untagged_sheet(config: dict[str, Any] | None) -> bool:
    return isinstance(config, dict) and ":type" not in config and isinstance(config.get("data"), list)


def classify_config(config: dict[str, Any] | None) -> ConfigShape:
    # Untagged documents holding a row list are migrated like flat sheets.
    if is_flat_sheet(config) or _is_untagged_sheet(config):
        return ConfigShape.FLAT
    if is_multi_sheet(config):
        return ConfigShape.MULTI_WITH_LIBRARY if config.get(LIBRARY_SHEET) else ConfigShape.MULTI_NO_LIBRARY
    return ConfigShape.MISSING


@dataclass
class LibrarySheetPlan:
    """A config brought to multi-sheet form, ready to take a new library sheet.

    Configs that are already multi-sheet keep their raw members in ``base_config``
    and have no decoded ``document``; only the ``library`` member is rewritten.
    """
    shape: ConfigShape
    document: MultiSheetDocument | None
    library_sheet: Sheet
    preserved_rows: int = 0
    base_config: dict[str, Any] = field(default_factory=dict)

    @property
    def sheet_existed(self) -> bool:
        return self.shape is ConfigShape.MULTI_WITH_LIBRARY

    @property
    def converted_to_multi_sheet(self) -> bool:
        return self.shape is ConfigShape.FLAT

    def build(self, library_sheet: Sheet) -> dict[str, Any]:
        """Return the full config document with ``library_sheet`` in place."""
        if self.base_config:
            # Keep every other member of the stored config exactly as it was.
            config = dict(self.base_config)
            config[LIBRARY_SHEET] = Sheet.from_rows(
                library_sheet.data, tagged=True, **library_sheet.extras
            ).to_json()
            names = list(config.get(":names") or [])
            if LIBRARY_SHEET not in names:
                config[":names"] = [*names, LIBRARY_SHEET]
            return config

        sheets = dict(self.document.sheets)
        sheets[LIBRARY_SHEET] = library_sheet
        names = list(self.document.names)
        if LIBRARY_SHEET not in names:
            names.append(LIBRARY_SHEET)
        return MultiSheetDocument(sheets=sheets, names=names, version=self.document.version).to_json()


def ensure_library_sheet(config: dict[str, Any] | None) -> LibrarySheetPlan:
    """Bring ``config`` to multi-sheet form with a ``library`` sheet.

    A flat config has its rows moved, unchanged and in order, under ``data``.
    """
    shape = classify_config(config)
    empty = Sheet.from_rows([])

    if shape is ConfigShape.FLAT:
        rows = list(config.get("data") or [])
        extras: dict[str, Any] = {}
        if ":colWidths" in config:
            extras[":colWidths"] = config[":colWidths"]
        data_sheet = Sheet.from_rows(rows, **extras)
        document = MultiSheetDocument(
            sheets={DATA_SHEET: data_sheet, LIBRARY_SHEET: empty},
            names=[DATA_SHEET, LIBRARY_SHEET],
        )
        return LibrarySheetPlan(shape, document, empty, preserved_rows=len(rows))

    if shape is ConfigShape.MULTI_NO_LIBRARY:
        return LibrarySheetPlan(shape, None, empty, base_config=dict(config))

    if shape is ConfigShape.MULTI_WITH_LIBRARY:
        library_sheet = Sheet.from_json(config[LIBRARY_SHEET]) or empty
        return LibrarySheetPlan(shape, None, library_sheet, base_config=dict(config))

    document = MultiSheetDocument(sheets={LIBRARY_SHEET: empty}, names=[LIBRARY_SHEET])
    return LibrarySheetPlan(shape, document, empty)


def _columns(rows: list[Row]) -> list[str]:
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def register_in_sheet(library_sheet: Sheet, type_name: str, path: str) -> tuple[Sheet, bool]:
    """Set the path for ``type_name`` in a library sheet.

    Returns:
        The updated sheet and whether a row for ``type_name`` already existed
    """
    rows = [dict(row) for row in library_sheet.data]

    for row in rows:
        if row.get(TITLE_COLUMN) == type_name:
            row[PATH_COLUMN] = path
            return library_sheet.with_rows(rows), True

    new_row: Row = {TITLE_COLUMN: type_name, PATH_COLUMN: path}
    for column in _columns(rows):
        new_row.setdefault(column, "")
    rows.append(new_row)
    return library_sheet.with_rows(rows), False


class SiteConfigRegistrar:
    """Reads and updates the ``library`` sheet of a site's configuration."""

    def __init__(self, store: "DocumentStoreClient"):
        self.store = store

    async def get_config(self, org: str, repo: str) -> dict[str, Any] | None:
        return await self.store.get_config(org, repo)

    async def get_library_sheet(self, org: str, repo: str) -> dict[str, Any] | None:
        """Return the raw ``library`` sheet, or None if absent or unreadable."""
        try:
            config = await self.get_config(org, repo)
        except Exception as e:
            logger.warning(f"Could not read site config for {org}/{repo}: {e}")
            return None
        return (config or {}).get(LIBRARY_SHEET) or None

    async def register_type(self, org: str, repo: str, type_name: str, path: str) -> RegistrationResult:
        """Register ``type_name`` → ``path``; failures are returned, not raised."""
        try:
            config = await self.get_config(org, repo)
            plan = ensure_library_sheet(config)
            library_sheet, existed = register_in_sheet(plan.library_sheet, type_name, path)
            await self.store.put_config(org, repo, plan.build(library_sheet))
        except Exception as e:
            logger.warning(f"Failed to register library type '{type_name}' for {org}/{repo}: {e}")
            return RegistrationResult(registered=False, error=str(e))

        if plan.converted_to_multi_sheet:
            logger.info(f"Converted site config of {org}/{repo} to multi-sheet ({plan.preserved_rows} rows kept)")

        return RegistrationResult(
            registered=True,
            existed=existed,
            created_sheet=not plan.sheet_existed,
            converted_to_multi_sheet=plan.converted_to_multi_sheet,
            library_entry_count=library_sheet.total,
        )

    async def check_registration(self, org: str, repo: str, type_name: str) -> RegistrationStatus:
        try:
            library_sheet = await self.get_library_sheet(org, repo)
            rows = (library_sheet or {}).get("data")
            if not rows:
                return RegistrationStatus(
                    registered=False,
                    reason="Library sheet does not exist or has no data",
                )

            for row in rows:
                if row.get(TITLE_COLUMN) == type_name:
                    return RegistrationStatus(
                        registered=True,
                        config_path=row.get(PATH_COLUMN),
                        total_library_entries=len(rows),
                    )

            return RegistrationStatus(
                registered=False,
                reason=f"'{type_name}' not found in library sheet",
                available_types=[str(row.get(TITLE_COLUMN, "")) for row in rows],
            )
        except Exception as e:
            return RegistrationStatus(registered=False, error=str(e))
