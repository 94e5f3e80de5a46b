"""
DA Library MCP Server
Manages the block, template, icon and placeholder libraries of a DA site and
generates block documentation from live pages, built with FastMCP.
"""

import logging
from typing import Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from pydantic import BaseModel, Field

from .clients import DocumentStoreClient, GitHubClient
from .config import Settings
from .discovery import get_block_files, list_blocks as list_github_blocks
from .extraction import analyze_block, extract_block_content, generate_block_template
from .library import LibrarySheetManager, SiteConfigRegistrar, build_library_config_url
from .library import blocks as block_library
from .library import templates as template_library
from .library.items import (
    ICON_KEY_FIELD,
    PLACEHOLDER_KEY_FIELD,
    encode_icons,
    encode_placeholders,
    icon_entry,
    icons_sheet_path,
    placeholder_entry,
    placeholders_sheet_path,
)
from .validation import validate_prerequisites

logger = logging.getLogger("da-library")

logging.basicConfig(
    level=logging.INFO,
    )

if not load_dotenv():
    logger.debug("No .env file found, reading settings from the environment only")

settings = Settings.from_env()
store = DocumentStoreClient(settings)
github = GitHubClient(settings)
manager = LibrarySheetManager(store)
registrar = SiteConfigRegistrar(store)

if not settings.da_token:
    logger.warning("DA_ADMIN_API_TOKEN is not set; DA admin requests will be anonymous")

mcp = FastMCP(
    name="da-library-mcp",
    instructions="""
        Tools for the https://da.live Document Authoring platform and its admin API.
        org is an organization name, repo a repository (site) name and path a path to
        a file or folder inside the site's content; <org>/<repo>/<path> refers to one item.

        Library types:
        - Blocks: multi-sheet JSON with name/path rows and an options sheet, at /<base>/blocks
        - Templates: single-sheet JSON with key/value rows, at /<base>/templates
        - Icons: single-sheet JSON with key/icon rows, at /<base>/icons
        - Placeholders: single-sheet JSON with Key/Text rows, at /<config_path>/placeholders

        The site config at /config/<org>/<repo> holds a "library" sheet registering
        each library type (title/path columns). GitHub org/repo names match DA names.
    """,
)

OrgArg = Annotated[str, Field(description="The organization name")]
RepoArg = Annotated[str, Field(description="The repository name")]
BaseFolderArg = Annotated[str, Field(description="Base folder for library (default: library)")]
BranchArg = Annotated[str, Field(description="The branch name (default: main)")]
BlocksPathArg = Annotated[str, Field(description="Path to blocks folder (e.g. blocks, aemedge/blocks)")]
PlaceholdersPathArg = Annotated[str, Field(description="Folder holding placeholders.json (default: placeholders)")]


class BlockRow(BaseModel):
    name: str
    path: str


class TemplateSource(BaseModel):
    name: str = Field(description="Template display name")
    source_page: str = Field(description="Source page path")


class IconItem(BaseModel):
    key: str = Field(description="Icon key")
    icon: str = Field(description="Icon URL")


class PlaceholderItem(BaseModel):
    key: str = Field(description="Placeholder key")
    text: str = Field(description="Placeholder text")


class BlockStructureArg(BaseModel):
    has_image: bool = False
    has_heading: bool = False
    has_button: bool = False
    has_multiple_items: bool = False
    classes: list[str] = Field(default_factory=list)


# ----------------------------------------------------------------------
# Sources and site config
# ----------------------------------------------------------------------

@mcp.tool
async def da_admin_list_sources(
    org: OrgArg,
    repo: RepoArg,
    path: Annotated[str, Field(description="Path to the folder")],
) -> dict:
    """Return the sources inside a folder of a site."""
    return {"org": org, "repo": repo, "path": path, "sources": await store.list_sources(org, repo, path)}


@mcp.tool
async def da_config_get(org: OrgArg, repo: RepoArg) -> dict:
    """Get the site-level configuration of org/repo."""
    return {"org": org, "repo": repo, "config": await registrar.get_config(org, repo)}


@mcp.tool
async def da_config_get_library_sheet(org: OrgArg, repo: RepoArg) -> dict:
    """Get the library sheet from the site configuration."""
    library_sheet = await registrar.get_library_sheet(org, repo)
    return {"org": org, "repo": repo, "exists": library_sheet is not None, "library_sheet": library_sheet}


@mcp.tool
async def da_config_check_registration(
    org: OrgArg,
    repo: RepoArg,
    library_type: Annotated[str, Field(description='Library entry title to check (e.g. "Blocks")')],
) -> dict:
    """Check whether a library type is registered in the site config library sheet."""
    status = await registrar.check_registration(org, repo, library_type)
    return {"org": org, "repo": repo, "library_type": library_type, **status.model_dump()}


@mcp.tool
async def da_config_register_library_type(
    org: OrgArg,
    repo: RepoArg,
    library_type: Annotated[str, Field(description='Library entry title (e.g. "Blocks", "Templates")')],
    config_path: Annotated[str | None, Field(description="Full URL of the library sheet (defaults to https://content.da.live/<org>/<repo>/<base_folder>/<type>.json)")] = None,
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Register a library type in the site config library sheet, creating the sheet if needed."""
    if not config_path:
        config_path = build_library_config_url(org, repo, base_folder, library_type.lower())
    result = await registrar.register_type(org, repo, library_type, config_path)
    return {"org": org, "repo": repo, "library_type": library_type, "config_path": config_path, **result.model_dump()}


# ----------------------------------------------------------------------
# GitHub block discovery
# ----------------------------------------------------------------------

@mcp.tool
async def da_gh_blocks_list(
    org: Annotated[str, Field(description="The GitHub organization/owner name")],
    repo: Annotated[str, Field(description="The GitHub repository name")],
    branch: BranchArg = "main",
    blocks_path: BlocksPathArg = "blocks",
) -> dict:
    """List blocks in the GitHub repository with whether each has .js/.css files."""
    blocks = await list_github_blocks(github, org, repo, branch, blocks_path)
    return {
        "org": org,
        "repo": repo,
        "branch": branch,
        "blocks_path": blocks_path,
        "total_blocks": len(blocks),
        "blocks": blocks,
    }


@mcp.tool
async def da_gh_blocks_get_files(
    org: Annotated[str, Field(description="The GitHub organization/owner name")],
    repo: Annotated[str, Field(description="The GitHub repository name")],
    block_name: Annotated[str, Field(description="The block name (folder name)")],
    branch: BranchArg = "main",
    blocks_path: BlocksPathArg = "blocks",
) -> dict:
    """Get a block's source files (.js, .css, README) from GitHub."""
    files = await get_block_files(github, org, repo, block_name, branch, blocks_path)
    return {"org": org, "repo": repo, "branch": branch, "blocks_path": blocks_path, **files}


# ----------------------------------------------------------------------
# Block documentation
# ----------------------------------------------------------------------

@mcp.tool
async def da_blocks_analyze(
    org: OrgArg,
    repo: RepoArg,
    block_name: Annotated[str, Field(description="The block name to analyze")],
    branch: BranchArg = "main",
    blocks_path: BlocksPathArg = "blocks",
) -> dict:
    """Analyze a block's code for description, variants and structure."""
    analysis = await analyze_block(github, org, repo, block_name, branch, blocks_path)
    return {"org": org, "repo": repo, "blocks_path": blocks_path, **analysis.model_dump()}


@mcp.tool
async def da_blocks_generate_template(
    block_name: Annotated[str, Field(description="The block name")],
    description: Annotated[str | None, Field(description="Description of the block")] = None,
    variants: Annotated[list[str] | None, Field(description="Variant names")] = None,
    structure: Annotated[BlockStructureArg | None, Field(description="Structure flags from block analysis")] = None,
    org: Annotated[str | None, Field(description="Organization of the sample page")] = None,
    repo: Annotated[str | None, Field(description="Repository of the sample page")] = None,
    source_path: Annotated[str | None, Field(description="Page to extract live block markup from")] = None,
) -> dict:
    """Generate an HTML documentation page for a block with library metadata.

    When org, repo and source_path are given, the markup of each variant is
    copied from that page.
    """
    block_content = None
    if org and repo and source_path:
        block_content = await extract_block_content(store, org, repo, source_path, block_name)

    template = generate_block_template(
        block_name,
        description,
        variants,
        structure.model_dump() if structure else None,
        block_content,
    )
    return {
        "block_name": block_name,
        "template": template,
        "used_structure": structure is not None,
        "extracted_variants": sorted(block_content) if block_content else [],
    }


@mcp.tool
async def da_blocks_create_doc(
    org: OrgArg,
    repo: RepoArg,
    block_name: Annotated[str, Field(description="The block name")],
    html_content: Annotated[str, Field(description="The HTML content for the documentation")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Create block documentation at /<base_folder>/blocks/<block_name>."""
    result = await block_library.create_block_doc(store, org, repo, block_name, html_content, base_folder)
    return {"org": org, "repo": repo, "block_name": block_name, "base_folder": base_folder, **result.model_dump()}


@mcp.tool
async def da_blocks_check_doc_exists(
    org: OrgArg,
    repo: RepoArg,
    block_name: Annotated[str, Field(description="The block name")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Check whether block documentation exists."""
    result = await block_library.check_block_doc_exists(store, org, repo, block_name, base_folder)
    return {"org": org, "repo": repo, "block_name": block_name, "base_folder": base_folder, **result.model_dump()}


# ----------------------------------------------------------------------
# Blocks sheet
# ----------------------------------------------------------------------

@mcp.tool
async def da_library_blocks_list(org: OrgArg, repo: RepoArg, base_folder: BaseFolderArg = "library") -> dict:
    """List all blocks in the library blocks sheet."""
    blocks = await block_library.list_blocks(manager, org, repo, base_folder)
    return {"org": org, "repo": repo, "base_folder": base_folder, "total_blocks": len(blocks), "blocks": blocks}


@mcp.tool
async def da_library_blocks_add(
    org: OrgArg,
    repo: RepoArg,
    block_name: Annotated[str, Field(description="The block name")],
    display_name: Annotated[str | None, Field(description="Display name (defaults to the capitalized block name)")] = None,
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Add or update a block entry in the blocks sheet. Preserves the options sheet."""
    result = await block_library.add_block(manager, org, repo, block_name, display_name, base_folder)
    return {"org": org, "repo": repo, "base_folder": base_folder, "block_name": block_name, **result.model_dump()}


@mcp.tool
async def da_library_blocks_remove(
    org: OrgArg,
    repo: RepoArg,
    block_name: Annotated[str, Field(description="The block name to remove")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Remove a block entry from the blocks sheet. Preserves the options sheet."""
    result = await block_library.remove_block(manager, org, repo, block_name, base_folder)
    return {"org": org, "repo": repo, "base_folder": base_folder, "block_name": block_name, **result.model_dump()}


@mcp.tool
async def da_library_blocks_create(
    org: OrgArg,
    repo: RepoArg,
    blocks: Annotated[list[BlockRow], Field(description="Block entries")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Create a new blocks sheet with the given entries and the default options."""
    rows = [block.model_dump() for block in blocks]
    result = await block_library.create_blocks_document(manager, org, repo, rows, base_folder)
    return {"org": org, "repo": repo, "base_folder": base_folder, **result}


# ----------------------------------------------------------------------
# Templates
# ----------------------------------------------------------------------

@mcp.tool
async def da_library_templates_list(org: OrgArg, repo: RepoArg, base_folder: BaseFolderArg = "library") -> dict:
    """List all templates in the library templates sheet."""
    templates = await template_library.list_templates(manager, org, repo, base_folder)
    return {"org": org, "repo": repo, "base_folder": base_folder, "total_templates": len(templates), "templates": templates}


@mcp.tool
async def da_library_add_template(
    org: OrgArg,
    repo: RepoArg,
    template_name: Annotated[str, Field(description='The template name (e.g. "Blog Template")')],
    source_page: Annotated[str, Field(description="Source page to copy content from (e.g. /drafts/demo)")],
    base_folder: BaseFolderArg = "library",
    preview: Annotated[bool, Field(description="Only plan the steps")] = False,
) -> dict:
    """Copy a source page into the template library and add it to the templates sheet."""
    result = await template_library.add_template(
        store, manager, org, repo, template_name, source_page, base_folder, preview
    )
    return {"org": org, "repo": repo, **result.model_dump()}


@mcp.tool
async def da_library_templates_remove(
    org: OrgArg,
    repo: RepoArg,
    template_name: Annotated[str, Field(description="The template name to remove")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Remove a template entry from the templates sheet."""
    result = await template_library.remove_template(manager, org, repo, template_name, base_folder)
    return {"org": org, "repo": repo, "template_name": template_name, "base_folder": base_folder, **result.model_dump()}


@mcp.tool
async def da_library_setup_templates(
    org: OrgArg,
    repo: RepoArg,
    templates: Annotated[list[TemplateSource], Field(description="Templates to create")],
    base_folder: BaseFolderArg = "library",
    preview: Annotated[bool, Field(description="Only plan the steps")] = False,
) -> dict:
    """Create several templates from source pages and record them in the templates sheet."""
    result = await template_library.setup_templates(
        store, manager, org, repo, [t.model_dump() for t in templates], base_folder, preview
    )
    return {"org": org, "repo": repo, **result.model_dump()}


# ----------------------------------------------------------------------
# Icons
# ----------------------------------------------------------------------

@mcp.tool
async def da_library_icons_list(org: OrgArg, repo: RepoArg, base_folder: BaseFolderArg = "library") -> dict:
    """List all icons in the library icons sheet."""
    icons = await manager.read_items(org, repo, icons_sheet_path(base_folder))
    return {"org": org, "repo": repo, "base_folder": base_folder, "total_icons": len(icons), "icons": icons}


@mcp.tool
async def da_library_add_icon(
    org: OrgArg,
    repo: RepoArg,
    key: Annotated[str, Field(description='Icon key (e.g. "search")')],
    icon: Annotated[str, Field(description="Icon URL")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Add or update an icon in the icons sheet."""
    result = await manager.upsert_item(
        org, repo, icon_entry({"key": key, "icon": icon}), ICON_KEY_FIELD, icons_sheet_path(base_folder), encode_icons
    )
    return {"org": org, "repo": repo, "base_folder": base_folder, **result.model_dump()}


@mcp.tool
async def da_library_icons_remove(
    org: OrgArg,
    repo: RepoArg,
    key: Annotated[str, Field(description="Icon key to remove")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Remove an icon from the icons sheet."""
    result = await manager.remove_item(org, repo, key, ICON_KEY_FIELD, icons_sheet_path(base_folder), encode_icons)
    return {"org": org, "repo": repo, "base_folder": base_folder, "key": key, **result.model_dump()}


@mcp.tool
async def da_library_setup_icons(
    org: OrgArg,
    repo: RepoArg,
    icons: Annotated[list[IconItem], Field(description="Icons to create or update")],
    base_folder: BaseFolderArg = "library",
) -> dict:
    """Create or update several icons in the icons sheet."""
    result = await manager.batch_upsert(
        org,
        repo,
        [item.model_dump() for item in icons],
        ICON_KEY_FIELD,
        icons_sheet_path(base_folder),
        encode_icons,
        icon_entry,
    )
    return {"org": org, "repo": repo, "base_folder": base_folder, **result.model_dump()}


# ----------------------------------------------------------------------
# Placeholders
# ----------------------------------------------------------------------

@mcp.tool
async def da_library_placeholders_list(org: OrgArg, repo: RepoArg, config_path: PlaceholdersPathArg = "placeholders") -> dict:
    """List all placeholders in placeholders.json."""
    placeholders = await manager.read_items(org, repo, placeholders_sheet_path(config_path))
    return {
        "org": org,
        "repo": repo,
        "config_path": config_path,
        "total_placeholders": len(placeholders),
        "placeholders": placeholders,
    }


@mcp.tool
async def da_library_add_placeholder(
    org: OrgArg,
    repo: RepoArg,
    key: Annotated[str, Field(description='Placeholder key (e.g. "site-title")')],
    text: Annotated[str, Field(description="Placeholder text")],
    config_path: PlaceholdersPathArg = "placeholders",
) -> dict:
    """Add or update a placeholder in placeholders.json."""
    result = await manager.upsert_item(
        org,
        repo,
        placeholder_entry({"key": key, "text": text}),
        PLACEHOLDER_KEY_FIELD,
        placeholders_sheet_path(config_path),
        encode_placeholders,
    )
    return {"org": org, "repo": repo, "config_path": config_path, **result.model_dump()}


@mcp.tool
async def da_library_placeholders_remove(
    org: OrgArg,
    repo: RepoArg,
    key: Annotated[str, Field(description="Placeholder key to remove")],
    config_path: PlaceholdersPathArg = "placeholders",
) -> dict:
    """Remove a placeholder from placeholders.json."""
    result = await manager.remove_item(
        org, repo, key, PLACEHOLDER_KEY_FIELD, placeholders_sheet_path(config_path), encode_placeholders
    )
    return {"org": org, "repo": repo, "config_path": config_path, "key": key, **result.model_dump()}


@mcp.tool
async def da_library_setup_placeholders(
    org: OrgArg,
    repo: RepoArg,
    placeholders: Annotated[list[PlaceholderItem], Field(description="Placeholders to create or update")],
    config_path: PlaceholdersPathArg = "placeholders",
) -> dict:
    """Create or update several placeholders in placeholders.json."""
    result = await manager.batch_upsert(
        org,
        repo,
        [item.model_dump() for item in placeholders],
        PLACEHOLDER_KEY_FIELD,
        placeholders_sheet_path(config_path),
        encode_placeholders,
        placeholder_entry,
    )
    return {"org": org, "repo": repo, "config_path": config_path, **result.model_dump()}


# ----------------------------------------------------------------------
# Setup checks
# ----------------------------------------------------------------------

@mcp.tool
async def da_library_validate_setup(
    org: OrgArg,
    repo: RepoArg,
    base_folder: BaseFolderArg = "library",
    block_name: Annotated[str | None, Field(description="Block name to validate as well")] = None,
    branch: BranchArg = "main",
) -> dict:
    """Validate identifiers and check that both GitHub and DA are reachable."""
    report = await validate_prerequisites(github, store, org, repo, base_folder, block_name, branch)
    return {"org": org, "repo": repo, "valid": report.valid, "errors": report.errors}


logger.debug("✅ All tools registered")


def main() -> None:
    """Main entry point for the DA Library MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
