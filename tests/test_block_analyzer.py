"""Tests for static analysis of block sources."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from da_library.clients import AccessCheck
from da_library.errors import AccessError, NotFoundError
from da_library.extraction import analyze_block, analyze_sources
from da_library.extraction.analyzer import css_variants, detect_structure_features


HERO_JS = """/**
 * Full-width banner with a background image.
 */
export default async function decorate(block) {
  block.classList.add('hero-image');
}
"""

HERO_CSS = """
.hero { min-height: 300px; }
.hero.dark { background: #000; }
.hero.dark .hero-title { color: #fff; }
.hero.centered .hero-button { margin: auto; }
"""


class TestAnalyzeSources:
    """Test analysis of already-fetched source text."""

    def test_description_and_function_name(self):
        analysis = analyze_sources("hero", HERO_JS, None)
        assert analysis.has_js is True
        assert analysis.has_css is False
        assert analysis.description == "Full-width banner with a background image."
        assert analysis.structure.function_name == "decorate"

    def test_variants_and_structure(self):
        analysis = analyze_sources("hero", None, HERO_CSS)
        assert analysis.variants == ["dark", "centered"]
        assert analysis.structure.has_heading is True
        assert analysis.structure.has_button is True
        assert analysis.structure.has_image is False
        assert "hero-title" in analysis.structure.classes

    def test_no_sources(self):
        analysis = analyze_sources("hero", None, None)
        assert analysis.description is None
        assert analysis.variants == []


class TestHelpers:
    def test_css_variants_are_unique(self):
        assert css_variants(".cards.dark{} .cards.dark li{} .cards.grid{}", "cards") == ["dark", "grid"]

    def test_bem_detection(self):
        assert detect_structure_features(["card__item"])["is_bem"] is True
        assert detect_structure_features(["card-item"])["is_bem"] is False


class TestAnalyzeBlock:
    """Test fetching and analysing a block on GitHub."""

    @pytest.mark.anyio
    async def test_missing_css_is_tolerated(self):
        github = MagicMock()
        github.check_access = AsyncMock(return_value=AccessCheck(True))

        async def get_file_content(owner, repo, path, ref):
            if path.endswith(".js"):
                return HERO_JS
            raise NotFoundError(f"File '{path}' not found", status=404)

        github.get_file_content = AsyncMock(side_effect=get_file_content)

        analysis = await analyze_block(github, "adobe", "site", "hero")

        assert analysis.has_js is True
        assert analysis.has_css is False
        github.get_file_content.assert_any_await("adobe", "site", "blocks/hero/hero.js", "main")

    @pytest.mark.anyio
    async def test_inaccessible_repository_raises(self):
        github = MagicMock()
        github.check_access = AsyncMock(return_value=AccessCheck(False, "Repository adobe/site not found or not accessible"))

        with pytest.raises(AccessError) as exc_info:
            await analyze_block(github, "adobe", "site", "hero")
        assert "not found or not accessible" in str(exc_info.value)
