"""Tests for keyed row operations on sheets."""

import pytest

from da_library.errors import LibraryValidationError
from da_library.sheets import Sheet, remove_row, row_exists, upsert_row


@pytest.fixture
def icons():
    return Sheet.from_rows(
        [{"key": "search", "icon": "/icons/search.svg"}, {"key": "home", "icon": "/icons/home.svg"}],
        tagged=True,
    )


class TestUpsertRow:
    """Test inserting and replacing rows."""

    def test_appends_new_key(self, icons):
        """A new key is appended at the end."""
        updated = upsert_row(icons, {"key": "mail", "icon": "/icons/mail.svg"}, "key")
        assert [row["key"] for row in updated.data] == ["search", "home", "mail"]
        assert updated.total == 3
        assert updated.limit == 3

    def test_replaces_existing_key_in_place(self, icons):
        """An existing key keeps its position and takes the new values."""
        updated = upsert_row(icons, {"key": "search", "icon": "/icons/find.svg"}, "key")
        assert updated.data[0] == {"key": "search", "icon": "/icons/find.svg"}
        assert updated.total == 2

    def test_is_idempotent(self, icons):
        """Upserting the same row twice equals upserting it once."""
        row = {"key": "mail", "icon": "/icons/mail.svg"}
        once = upsert_row(icons, row, "key")
        twice = upsert_row(once, row, "key")
        assert twice.to_json() == once.to_json()

    def test_does_not_modify_input(self, icons):
        """The sheet passed in is left untouched."""
        before = icons.to_json()
        upsert_row(icons, {"key": "search", "icon": "/changed.svg"}, "key")
        assert icons.to_json() == before

    def test_into_missing_sheet(self):
        """Upserting into no sheet creates one with the row."""
        updated = upsert_row(None, {"name": "Hero", "path": "/hero"})
        assert updated.data == [{"name": "Hero", "path": "/hero"}]
        assert updated.total == 1

    @pytest.mark.parametrize("row", [{"icon": "/x.svg"}, {"key": "", "icon": "/x.svg"}, {"key": "  "}])
    def test_rejects_missing_key(self, icons, row):
        """Rows without a usable key are rejected."""
        with pytest.raises(LibraryValidationError):
            upsert_row(icons, row, "key")

    def test_keeps_tag_and_extra_members(self):
        """The sheet tag and members like :colWidths carry over."""
        sheet = Sheet.from_rows([{"key": "a"}], tagged=True, **{":colWidths": [50]})
        updated = upsert_row(sheet, {"key": "b"}, "key")
        document = updated.to_json()
        assert document[":type"] == "sheet"
        assert document[":colWidths"] == [50]


class TestRemoveRow:
    """Test removing rows."""

    def test_removes_matching_row(self, icons):
        """The row with the key is removed and counters drop."""
        updated = remove_row(icons, "search", "key")
        assert [row["key"] for row in updated.data] == ["home"]
        assert updated.total == 1

    def test_absent_key_is_noop(self, icons):
        """Removing a key that is not there changes nothing."""
        updated = remove_row(icons, "missing", "key")
        assert updated.to_json() == icons.to_json()

    def test_missing_sheet(self):
        """Removing from no sheet gives an empty sheet."""
        assert remove_row(None, "x").data == []


class TestRowExists:
    """Test key lookups."""

    def test_exists(self, icons):
        """Lookups compare the key column exactly."""
        assert row_exists(icons, "home", "key")
        assert not row_exists(icons, "Home", "key")
        assert not row_exists(None, "home", "key")
