"""Tests for read-modify-write of library sheets."""

import pytest

from da_library.library.items import (
    ICON_KEY_FIELD,
    PLACEHOLDER_KEY_FIELD,
    encode_icons,
    encode_placeholders,
    icon_entry,
    icons_sheet_path,
    placeholder_entry,
    placeholders_sheet_path,
)
from da_library.sheets import encode_sheet

ORG, REPO = "adobe", "site"
ICONS = icons_sheet_path()


class TestUpsertItem:
    """Test single-row upserts."""

    @pytest.mark.anyio
    async def test_creates_missing_document(self, store, manager):
        """Upserting into a missing sheet writes a new flat document."""
        entry = {"key": "search", "icon": "/icons/search.svg"}
        result = await manager.upsert_item(ORG, REPO, entry, ICON_KEY_FIELD, ICONS, encode_icons)

        assert result.added is True
        assert result.existed is False
        assert result.path == "/library/icons"
        assert store.documents[(ORG, REPO, ICONS)] == encode_sheet([entry])

    @pytest.mark.anyio
    async def test_replaces_existing_row(self, store, manager):
        """An existing key is replaced and reported as existed."""
        store.documents[(ORG, REPO, ICONS)] = encode_sheet([
            {"key": "search", "icon": "/old.svg"},
            {"key": "home", "icon": "/home.svg"},
        ])

        entry = {"key": "search", "icon": "/new.svg"}
        result = await manager.upsert_item(ORG, REPO, entry, ICON_KEY_FIELD, ICONS, encode_icons)

        assert result.existed is True
        rows = await manager.read_items(ORG, REPO, ICONS)
        assert rows == [{"key": "search", "icon": "/new.svg"}, {"key": "home", "icon": "/home.svg"}]

    @pytest.mark.anyio
    async def test_placeholders_keyed_by_capital_key(self, store, manager):
        """Placeholders use the Key column."""
        path = placeholders_sheet_path()
        entry = placeholder_entry({"key": "site-title", "text": "Hello"})
        await manager.upsert_item(ORG, REPO, entry, PLACEHOLDER_KEY_FIELD, path, encode_placeholders)

        assert path == "/placeholders/placeholders"
        assert await manager.read_items(ORG, REPO, path) == [{"Key": "site-title", "Text": "Hello"}]


class TestRemoveItem:
    """Test single-row removal."""

    @pytest.mark.anyio
    async def test_removes_row(self, store, manager):
        store.documents[(ORG, REPO, ICONS)] = encode_sheet([{"key": "search"}, {"key": "home"}])

        result = await manager.remove_item(ORG, REPO, "search", ICON_KEY_FIELD, ICONS, encode_icons)

        assert result.removed is True
        assert await manager.read_items(ORG, REPO, ICONS) == [{"key": "home"}]

    @pytest.mark.anyio
    async def test_missing_document_is_reported(self, store, manager):
        """A missing sheet is reported, not raised, and nothing is written."""
        result = await manager.remove_item(ORG, REPO, "search", ICON_KEY_FIELD, ICONS, encode_icons)

        assert result.removed is False
        assert result.error == "Sheet not found"
        assert store.json_writes == []

    @pytest.mark.anyio
    async def test_document_without_data_is_reported(self, store, manager):
        store.documents[(ORG, REPO, ICONS)] = {"foo": "bar"}

        result = await manager.remove_item(ORG, REPO, "search", ICON_KEY_FIELD, ICONS, encode_icons)

        assert result.removed is False
        assert result.error == "Data sheet not found"


class TestBatchUpsert:
    """Test sequential batch upserts."""

    @pytest.mark.anyio
    async def test_malformed_item_does_not_stop_batch(self, store, manager):
        """One bad item fails alone; the others are persisted."""
        items = [
            {"key": "search", "icon": "/icons/search.svg"},
            {"key": "", "icon": "/icons/broken.svg"},
            {"key": "home", "icon": "/icons/home.svg"},
        ]

        result = await manager.batch_upsert(ORG, REPO, items, ICON_KEY_FIELD, ICONS, encode_icons, icon_entry)

        assert result.summary.total == 3
        assert result.summary.failed == 1
        assert result.summary.added == 2
        assert result.success is False
        assert [item.success for item in result.items] == [True, False, True]
        assert result.errors[0].startswith("item 2:")

        rows = await manager.read_items(ORG, REPO, ICONS)
        assert [row["key"] for row in rows] == ["search", "home"]

    @pytest.mark.anyio
    async def test_later_items_see_earlier_writes(self, store, manager):
        """A repeated key in one batch counts as an update."""
        items = [
            {"key": "search", "icon": "/a.svg"},
            {"key": "search", "icon": "/b.svg"},
        ]

        result = await manager.batch_upsert(ORG, REPO, items, ICON_KEY_FIELD, ICONS, encode_icons, icon_entry)

        assert result.success is True
        assert result.summary.added == 1
        assert result.summary.updated == 1
        assert await manager.read_items(ORG, REPO, ICONS) == [{"key": "search", "icon": "/b.svg"}]

    @pytest.mark.anyio
    async def test_write_failures_are_recorded(self, store, manager):
        """Store errors are recorded per item without rolling back."""
        store.fail_writes.add(ICONS)
        items = [{"key": "search", "icon": "/a.svg"}]

        result = await manager.batch_upsert(ORG, REPO, items, ICON_KEY_FIELD, ICONS, encode_icons, icon_entry)

        assert result.success is False
        assert result.summary.failed == 1
        assert "search: API 500" in result.errors[0]


class TestReadItems:
    """Test listing rows."""

    @pytest.mark.anyio
    async def test_missing_document_is_empty(self, manager):
        assert await manager.read_items(ORG, REPO, ICONS) == []
