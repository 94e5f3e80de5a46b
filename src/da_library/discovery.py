"""
Discovery of blocks in a site's GitHub repository.

Blocks live in ``<blocks_path>/<name>/`` with optional ``<name>.js``,
``<name>.css`` and README files. Per-block lookups run concurrently.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from .errors import AccessError, TransportError
from .extraction.analyzer import block_file_path

if TYPE_CHECKING:
    from .clients.github import GitHubClient

logger = logging.getLogger("da-library")

README_NAMES = ("README.md", "readme.md", "README.MD")


async def _require_access(github: "GitHubClient", org: str, repo: str, branch: str) -> None:
    access = await github.check_access(org, repo, branch)
    if not access.accessible:
        raise AccessError(access.error)


async def _try_get_file(github: "GitHubClient", org: str, repo: str, path: str, branch: str) -> str | None:
    try:
        return await github.get_file_content(org, repo, path, branch)
    except TransportError:
        return None


async def _block_summary(
    github: "GitHubClient", org: str, repo: str, blocks_path: str, block_name: str, branch: str
) -> dict[str, Any]:
    has_js, has_css = await asyncio.gather(
        github.file_exists(org, repo, block_file_path(blocks_path, block_name, f"{block_name}.js"), branch),
        github.file_exists(org, repo, block_file_path(blocks_path, block_name, f"{block_name}.css"), branch),
    )
    return {
        "name": block_name,
        "path": f"{blocks_path.strip('/')}/{block_name}",
        "has_js": has_js,
        "has_css": has_css,
        "type": "dir",
    }


async def list_blocks(
    github: "GitHubClient",
    org: str,
    repo: str,
    branch: str = "main",
    blocks_path: str = "blocks",
) -> list[dict[str, Any]]:
    """List block folders with whether each has a JS and a CSS file.

    Raises:
        AccessError: If the repository or branch cannot be read
        NotFoundError: If ``blocks_path`` does not exist
    """
    await _require_access(github, org, repo, branch)

    directories = await github.list_directories(org, repo, blocks_path, branch)
    logger.debug(f"Found {len(directories)} block folders in {org}/{repo}/{blocks_path}")
    return list(await asyncio.gather(*(
        _block_summary(github, org, repo, blocks_path, directory["name"], branch)
        for directory in directories
    )))


async def _try_get_readme(
    github: "GitHubClient", org: str, repo: str, blocks_path: str, block_name: str, branch: str
) -> str | None:
    for readme in README_NAMES:
        content = await _try_get_file(github, org, repo, block_file_path(blocks_path, block_name, readme), branch)
        if content:
            return content
    return None


async def get_block_files(
    github: "GitHubClient",
    org: str,
    repo: str,
    block_name: str,
    branch: str = "main",
    blocks_path: str = "blocks",
) -> dict[str, Any]:
    """Fetch a block's JS, CSS and README; missing files come back as None."""
    await _require_access(github, org, repo, branch)

    js, css, readme = await asyncio.gather(
        _try_get_file(github, org, repo, block_file_path(blocks_path, block_name, f"{block_name}.js"), branch),
        _try_get_file(github, org, repo, block_file_path(blocks_path, block_name, f"{block_name}.css"), branch),
        _try_get_readme(github, org, repo, blocks_path, block_name, branch),
    )
    return {
        "block_name": block_name,
        "has_js": js is not None,
        "has_css": css is not None,
        "has_readme": readme is not None,
        "js_content": js,
        "css_content": css,
        "readme_content": readme,
    }
