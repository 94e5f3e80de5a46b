"""
Static analysis of a block's source files on GitHub.

Reads ``<blocks>/<name>/<name>.js`` and ``.css`` to derive a description,
the default export name, CSS classes, style variants and structure flags.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ..errors import AccessError, TransportError

if TYPE_CHECKING:
    from ..clients.github import GitHubClient

logger = logging.getLogger("da-library")

STRUCTURE_PATTERNS: dict[str, list[str]] = {
    "has_image": ["image", "img", "picture", "photo"],
    "has_heading": ["title", "heading", "headline"],
    "has_button": ["button", "btn", "cta", "action"],
    "has_multiple_items": ["item", "card", "column"],
}

JSDOC_FIRST_LINE = re.compile(r"/\*\*\s*\n\s*\*\s*(.+?)\s*\n")
DEFAULT_EXPORT = re.compile(r"export\s+default\s+(?:async\s+)?function\s+(\w+)")
CSS_CLASS = re.compile(r"\.([a-zA-Z0-9_-]+)")


class BlockStructure(BaseModel):
    classes: list[str] = Field(default_factory=list)
    has_image: bool = False
    has_heading: bool = False
    has_button: bool = False
    has_multiple_items: bool = False
    is_bem: bool = False
    function_name: str | None = None


class BlockAnalysis(BaseModel):
    """What could be learned about a block from its JS and CSS."""
    block_name: str
    description: str | None = None
    variants: list[str] = Field(default_factory=list)
    has_js: bool = False
    has_css: bool = False
    structure: BlockStructure = Field(default_factory=BlockStructure)


def block_file_path(blocks_path: str, block_name: str, file_name: str) -> str:
    return f"{blocks_path.strip('/')}/{block_name}/{file_name}"


def detect_structure_features(classes: list[str]) -> dict[str, bool]:
    features = {
        feature: any(pattern in cls for cls in classes for pattern in patterns)
        for feature, patterns in STRUCTURE_PATTERNS.items()
    }
    features["is_bem"] = any("__" in cls or "--" in cls for cls in classes)
    return features


def css_variants(css: str, block_name: str) -> list[str]:
    """Classes chained directly onto the block class, e.g. ``.hero.dark``."""
    pattern = re.compile(rf"\.{re.escape(block_name)}\.(\w+)")
    variants: list[str] = []
    for match in pattern.finditer(css):
        variant = match.group(1)
        if variant != block_name and variant not in variants:
            variants.append(variant)
    return variants


def analyze_sources(block_name: str, js: str | None, css: str | None) -> BlockAnalysis:
    """Build an analysis from already-fetched source text."""
    analysis = BlockAnalysis(block_name=block_name)

    if js is not None:
        analysis.has_js = True
        if match := JSDOC_FIRST_LINE.search(js):
            analysis.description = match.group(1)
        if match := DEFAULT_EXPORT.search(js):
            analysis.structure.function_name = match.group(1)

    if css is not None:
        analysis.has_css = True
        classes = list(dict.fromkeys(CSS_CLASS.findall(css)))
        analysis.variants = css_variants(css, block_name)
        analysis.structure = analysis.structure.model_copy(
            update={"classes": classes, **detect_structure_features(classes)}
        )

    return analysis


async def _try_get_file(github: "GitHubClient", owner: str, repo: str, path: str, ref: str) -> str | None:
    try:
        return await github.get_file_content(owner, repo, path, ref)
    except TransportError as e:
        logger.debug(f"Skipping {owner}/{repo}/{path}@{ref}: {e}")
        return None


async def analyze_block(
    github: "GitHubClient",
    org: str,
    repo: str,
    block_name: str,
    branch: str = "main",
    blocks_path: str = "blocks",
) -> BlockAnalysis:
    """Fetch a block's JS and CSS concurrently and analyse them.

    Raises:
        AccessError: If the repository or branch cannot be read
    """
    access = await github.check_access(org, repo, branch)
    if not access.accessible:
        raise AccessError(access.error)

    js, css = await asyncio.gather(
        _try_get_file(github, org, repo, block_file_path(blocks_path, block_name, f"{block_name}.js"), branch),
        _try_get_file(github, org, repo, block_file_path(blocks_path, block_name, f"{block_name}.css"), branch),
    )
    return analyze_sources(block_name, js, css)
