"""
Block content extraction from authored pages.

Finds top-level ``<div>`` elements carrying a block's class and returns the
inner markup of the first instance of each style variant. Nesting is tracked
with a single depth counter over ``<div>`` open/close tags; no markup tree is
built. An instance whose closing tag cannot be found is skipped.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..clients.store import DocumentStoreClient

logger = logging.getLogger("da-library")

DIV_OPEN = re.compile(r"<div\b[^>]*>", re.IGNORECASE)
DIV_CLOSE = re.compile(r"</div\s*>", re.IGNORECASE)
DIV_WITH_CLASS = re.compile(
    r"""<div\b[^>]*?(?<![\w-])class\s*=\s*(?P<quote>["'])(?P<classes>.*?)(?P=quote)[^>]*>""",
    re.IGNORECASE | re.DOTALL,
)


def block_variant(classes: list[str], block_name: str) -> str:
    """First class that is neither the block name nor ``<block>-*``; "" if none."""
    for cls in classes:
        if cls != block_name and not cls.startswith(f"{block_name}-"):
            return cls
    return ""


def find_closing_div(html: str, start: int) -> int | None:
    """Return the index of the ``</div>`` closing an element opened just before ``start``."""
    depth = 1
    pos = start
    while pos < len(html):
        next_open = DIV_OPEN.search(html, pos)
        next_close = DIV_CLOSE.search(html, pos)
        if next_close is None:
            return None

        if next_open is not None and next_open.start() < next_close.start():
            depth += 1
            pos = next_open.end()
            continue

        depth -= 1
        if depth == 0:
            return next_close.start()
        pos = next_close.end()
    return None


def parse_block_instances(html: str, block_name: str) -> dict[str, str]:
    """Map each variant of ``block_name`` found in ``html`` to its inner markup.

    The default (unvaried) instance is stored under ``""``. Only the first
    instance of each variant is kept.
    """
    instances: dict[str, str] = {}

    for match in DIV_WITH_CLASS.finditer(html):
        classes = match.group("classes").split()
        if block_name not in classes:
            continue

        variant = block_variant(classes, block_name)
        if variant in instances:
            continue

        start = match.end()
        end = find_closing_div(html, start)
        if end is None:
            logger.debug(f"No closing tag for '{block_name}' block at offset {match.start()}")
            continue
        instances[variant] = html[start:end].strip()

    return instances


async def extract_block_content(
    store: "DocumentStoreClient",
    org: str,
    repo: str,
    source_path: str | None,
    block_name: str,
) -> dict[str, str] | None:
    """Fetch ``source_path`` and extract ``block_name`` instances from it.

    Returns None when no source page is given or it cannot be fetched.
    """
    if not source_path:
        return None

    try:
        html = await store.get_html(org, repo, source_path)
    except Exception as e:
        logger.warning(f"Could not fetch {org}/{repo}{source_path} for block extraction: {e}")
        return None

    return parse_block_instances(html, block_name)
