"""Tests for library storage paths and public URLs."""

import pytest

from da_library.errors import UnknownLibraryTypeError
from da_library.library.paths import (
    build_library_config_url,
    build_public_url,
    build_storage_path,
    capitalize_name,
    clean_path,
    template_slug,
)


class TestStoragePath:
    """Test building /<base>/<type>[/<item>] paths."""

    def test_type_folder(self):
        assert build_storage_path("blocks", "library") == "/library/blocks"

    def test_item_path(self):
        assert build_storage_path("templates", "library", "blog-post") == "/library/templates/blog-post"

    def test_base_folder_slashes_are_normalised(self):
        """Leading and trailing slashes on the base folder are ignored."""
        assert build_storage_path("icons", "/docs/library/") == "/docs/library/icons"

    def test_unknown_type_raises(self):
        """Unknown types fail before any path is built."""
        with pytest.raises(UnknownLibraryTypeError):
            build_storage_path("widgets", "library")


class TestPublicUrls:
    """Test content URLs."""

    def test_public_url(self):
        url = build_public_url("adobe", "site", "/library/blocks/hero")
        assert url == "https://content.da.live/adobe/site/library/blocks/hero"

    def test_library_config_url_defaults_to_blocks(self):
        """The registered URL points at the sheet's JSON."""
        assert build_library_config_url("adobe", "site") == "https://content.da.live/adobe/site/library/blocks.json"

    def test_library_config_url_for_type(self):
        url = build_library_config_url("adobe", "site", "lib", "templates")
        assert url == "https://content.da.live/adobe/site/lib/templates.json"


class TestNames:
    """Test name helpers."""

    def test_clean_path(self):
        assert clean_path("/a/b") == "a/b"
        assert clean_path("a/b") == "a/b"

    def test_template_slug(self):
        assert template_slug("Blog  Post") == "blog-post"
        assert template_slug("Landing Page Template") == "landing-page-template"

    def test_capitalize_name(self):
        assert capitalize_name("hero") == "Hero"
        assert capitalize_name("cards-grid") == "Cards-grid"
        assert capitalize_name("") == ""
