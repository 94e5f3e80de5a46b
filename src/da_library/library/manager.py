"""
Read-modify-write of library sheet documents.

Each operation fetches the current document, applies one keyed row change and
persists the whole re-encoded document. There is no compare-and-swap on the
remote store, so batches run item by item to let later writes see earlier ones.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from ..sheets.codec import decode_data_sheet
from ..sheets.models import Row
from ..sheets.rows import remove_row, row_exists, upsert_row
from .models import BatchItemResult, BatchResult, RemoveResult, UpsertResult

if TYPE_CHECKING:
    from ..clients.store import DocumentStoreClient

logger = logging.getLogger("da-library")

Encoder = Callable[[list[Row]], dict[str, Any]]


class LibrarySheetManager:
    """Keyed row operations against sheet documents stored in DA."""

    def __init__(self, store: "DocumentStoreClient"):
        self.store = store

    async def fetch_document(self, org: str, repo: str, path: str) -> dict[str, Any] | None:
        return await self.store.get_json(org, repo, path)

    async def save_document(self, org: str, repo: str, path: str, document: dict[str, Any]) -> None:
        await self.store.put_json(org, repo, path, document)
        logger.debug(f"Saved sheet {org}/{repo}{path}")

    async def read_items(self, org: str, repo: str, path: str) -> list[Row]:
        """Return the rows of the document's data sheet, or [] if there is no document."""
        document = await self.fetch_document(org, repo, path)
        if not document:
            return []
        data_sheet = decode_data_sheet(document)
        return list(data_sheet.data) if data_sheet else []

    async def upsert_item(
        self,
        org: str,
        repo: str,
        entry: Row,
        key_field: str,
        path: str,
        encode: Encoder,
    ) -> UpsertResult:
        """Add ``entry`` or replace the row sharing its key, then persist."""
        document = await self.fetch_document(org, repo, path)
        data_sheet = decode_data_sheet(document)

        existed = row_exists(data_sheet, entry.get(key_field), key_field)
        updated = upsert_row(data_sheet, entry, key_field)

        await self.save_document(org, repo, path, encode(updated.data))
        return UpsertResult(existed=existed, path=path, entry=entry)

    async def remove_item(
        self,
        org: str,
        repo: str,
        key: Any,
        key_field: str,
        path: str,
        encode: Encoder,
    ) -> RemoveResult:
        """Remove the row keyed ``key``; a missing document is reported, not raised."""
        document = await self.fetch_document(org, repo, path)
        if not document:
            return RemoveResult(removed=False, error="Sheet not found")

        data_sheet = decode_data_sheet(document)
        if data_sheet is None:
            return RemoveResult(removed=False, error="Data sheet not found")

        updated = remove_row(data_sheet, key, key_field)
        await self.save_document(org, repo, path, encode(updated.data))
        return RemoveResult(removed=True, path=path)

    async def batch_upsert(
        self,
        org: str,
        repo: str,
        items: Sequence[dict[str, Any]],
        key_field: str,
        path: str,
        encode: Encoder,
        to_row: Callable[[dict[str, Any]], Row],
    ) -> BatchResult:
        """Upsert ``items`` one after another.

        A failing item is recorded and the batch continues; rows written by
        earlier items stay in place.
        """
        result = BatchResult()
        result.summary.total = len(items)

        for index, item in enumerate(items, start=1):
            try:
                entry = to_row(item)
                outcome = await self.upsert_item(org, repo, entry, key_field, path, encode)
            except Exception as e:
                label = item.get(key_field) or item.get("key") or item.get("name") or f"item {index}"
                logger.warning(f"Failed to upsert {label!r} into {path}: {e}")
                result.items.append(BatchItemResult(item=dict(item), success=False, error=str(e)))
                result.summary.failed += 1
                result.errors.append(f"{label}: {e}")
                continue

            result.items.append(BatchItemResult(item=dict(item), success=True, existed=outcome.existed))
            if outcome.existed:
                result.summary.updated += 1
            else:
                result.summary.added += 1

        result.success = result.summary.failed == 0
        return result
