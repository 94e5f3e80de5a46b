"""
Block library sheet and block documentation pages.

The blocks sheet is a multi-sheet document: ``data`` lists blocks as
``{name, path}`` rows and ``options`` holds the style picker catalog. Every
mutation writes the options sheet back unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..sheets.codec import decode_data_sheet, decode_options_sheet, encode_library_document
from ..sheets.models import LibraryType, Row, library_type_spec
from ..sheets.rows import remove_row, row_exists, upsert_row
from ..validation import require_valid, validate_block_name
from .manager import LibrarySheetManager
from .models import BlockLibraryResult, DocResult
from .paths import DEFAULT_BASE_FOLDER, build_public_url, build_storage_path, capitalize_name

if TYPE_CHECKING:
    from ..clients.store import DocumentStoreClient

logger = logging.getLogger("da-library")

BLOCK_KEY_FIELD = library_type_spec(LibraryType.BLOCKS).key_field


def blocks_sheet_path(base_folder: str = DEFAULT_BASE_FOLDER) -> str:
    return build_storage_path(LibraryType.BLOCKS, base_folder)


def block_entry(
    org: str,
    repo: str,
    block_name: str,
    display_name: str | None = None,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> Row:
    """Row for a block: display name and the public URL of its doc page."""
    doc_path = build_storage_path(LibraryType.BLOCKS, base_folder, block_name)
    return {
        "name": display_name or capitalize_name(block_name),
        "path": build_public_url(org, repo, doc_path),
    }


async def list_blocks(manager: LibrarySheetManager, org: str, repo: str, base_folder: str = DEFAULT_BASE_FOLDER) -> list[Row]:
    return await manager.read_items(org, repo, blocks_sheet_path(base_folder))


async def add_block(
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    block_name: str,
    display_name: str | None = None,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> BlockLibraryResult:
    """Add or update a block row, keeping the existing options sheet."""
    path = blocks_sheet_path(base_folder)
    document = await manager.fetch_document(org, repo, path)

    data_sheet = decode_data_sheet(document)
    options_sheet = decode_options_sheet(document)

    entry = block_entry(org, repo, block_name, display_name, base_folder)
    existed = row_exists(data_sheet, entry[BLOCK_KEY_FIELD], BLOCK_KEY_FIELD)
    updated = upsert_row(data_sheet, entry, BLOCK_KEY_FIELD)

    await manager.save_document(org, repo, path, encode_library_document(LibraryType.BLOCKS, updated.data, options_sheet))
    return BlockLibraryResult(
        path=path,
        added=True,
        existed=existed,
        options_preserved=options_sheet is not None,
        entry=entry,
    )


async def remove_block(
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    block_name: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> BlockLibraryResult:
    """Remove the row whose ``name`` is ``block_name``, keeping the options sheet."""
    path = blocks_sheet_path(base_folder)
    document = await manager.fetch_document(org, repo, path)

    if not document:
        return BlockLibraryResult(path=path, removed=False, error="blocks.json not found")

    data_sheet = decode_data_sheet(document)
    options_sheet = decode_options_sheet(document)
    if data_sheet is None:
        return BlockLibraryResult(path=path, removed=False, error="Data sheet not found in blocks.json")

    # Rows are keyed by display name, which defaults to the capitalised block name.
    key = block_name
    if not row_exists(data_sheet, key, BLOCK_KEY_FIELD):
        key = capitalize_name(block_name)
    updated = remove_row(data_sheet, key, BLOCK_KEY_FIELD)
    await manager.save_document(org, repo, path, encode_library_document(LibraryType.BLOCKS, updated.data, options_sheet))
    return BlockLibraryResult(path=path, removed=True, options_preserved=options_sheet is not None)


async def create_blocks_document(
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    blocks: list[Row],
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> dict:
    """Write a fresh blocks sheet holding ``blocks`` and the default options."""
    path = blocks_sheet_path(base_folder)
    await manager.save_document(org, repo, path, encode_library_document(LibraryType.BLOCKS, blocks))
    return {"created": True, "path": path, "total_blocks": len(blocks)}


async def create_block_doc(
    store: "DocumentStoreClient",
    org: str,
    repo: str,
    block_name: str,
    html: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> DocResult:
    """Upload a block documentation page to ``/<base>/blocks/<name>``."""
    require_valid(validate_block_name(block_name))

    doc_path = build_storage_path(LibraryType.BLOCKS, base_folder, block_name)
    await store.put_html(org, repo, doc_path, html)
    logger.info(f"Created block doc {org}/{repo}{doc_path}")
    return DocResult(path=doc_path, url=build_public_url(org, repo, doc_path), created=True)


async def check_block_doc_exists(
    store: "DocumentStoreClient",
    org: str,
    repo: str,
    block_name: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> DocResult:
    require_valid(validate_block_name(block_name))

    doc_path = build_storage_path(LibraryType.BLOCKS, base_folder, block_name)
    exists = await store.exists(org, repo, doc_path, "html")
    return DocResult(path=doc_path, url=build_public_url(org, repo, doc_path), exists=exists)
