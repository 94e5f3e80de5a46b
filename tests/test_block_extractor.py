"""Tests for extracting block markup from authored pages."""

import pytest

from da_library.extraction import extract_block_content, parse_block_instances
from da_library.extraction.extractor import block_variant, find_closing_div


class TestParseBlockInstances:
    """Test finding block instances in page HTML."""

    def test_variants_are_extracted(self):
        """Each variant maps to the inner markup of its block div."""
        html = '<div class="hero dark"><div class="inner">X</div></div><div class="hero light">Y</div>'
        assert parse_block_instances(html, "hero") == {
            "dark": '<div class="inner">X</div>',
            "light": "Y",
        }

    def test_default_instance_uses_empty_key(self):
        """A block without a variant class is stored under the empty string."""
        assert parse_block_instances('<div class="hero">Z</div>', "hero") == {"": "Z"}

    def test_first_instance_of_a_variant_wins(self):
        html = '<div class="cards dark">first</div><div class="cards dark">second</div>'
        assert parse_block_instances(html, "cards") == {"dark": "first"}

    def test_unclosed_instance_is_skipped(self):
        """A block whose closing tag is missing is dropped silently."""
        html = '<div class="hero light">ok</div><div class="hero dark"><div>never closed'
        assert parse_block_instances(html, "hero") == {"light": "ok"}

    def test_class_names_match_whole_tokens(self):
        """hero-banner is not an instance of hero."""
        html = '<div class="hero-banner">no</div><div class="superhero">no</div>'
        assert parse_block_instances(html, "hero") == {}

    def test_deeply_nested_content(self):
        html = (
            '<main><div><div class="columns">'
            "<div><div><p>A</p></div><div><p>B</p></div></div>"
            "</div></div></main>"
        )
        assert parse_block_instances(html, "columns") == {
            "": "<div><div><p>A</p></div><div><p>B</p></div></div>",
        }

    def test_block_absent(self):
        assert parse_block_instances("<div><p>text</p></div>", "hero") == {}


class TestHelpers:
    """Test variant selection and tag balancing."""

    def test_block_variant_skips_block_prefixed_classes(self):
        assert block_variant(["hero", "hero-wrapper", "dark"], "hero") == "dark"
        assert block_variant(["hero"], "hero") == ""

    def test_find_closing_div(self):
        html = '<div class="a"><div>x</div></div>tail'
        start = len('<div class="a">')
        assert html[find_closing_div(html, start):] == "</div>tail"

    def test_find_closing_div_unbalanced(self):
        assert find_closing_div("<div><div>x</div>", 5) is None


class TestExtractBlockContent:
    """Test fetching and extracting in one step."""

    @pytest.mark.anyio
    async def test_extracts_from_fetched_page(self, store):
        store.pages[("adobe", "site", "/drafts/hero")] = '<div class="hero">Z</div>'

        content = await extract_block_content(store, "adobe", "site", "/drafts/hero", "hero")

        assert content == {"": "Z"}

    @pytest.mark.anyio
    async def test_fetch_failure_returns_none(self, store):
        """A page that cannot be fetched gives None."""
        assert await extract_block_content(store, "adobe", "site", "/missing", "hero") is None

    @pytest.mark.anyio
    async def test_no_source_path_returns_none(self, store):
        assert await extract_block_content(store, "adobe", "site", None, "hero") is None
        assert await extract_block_content(store, "adobe", "site", "", "hero") is None
