"""
Template pages and the templates sheet.

Adding a template copies a source page's HTML to
``/<base>/templates/<slug>`` and records ``{key: name, value: url}`` in the
templates sheet. With ``preview`` the steps are planned but nothing is read or
written.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..sheets.codec import library_document_encoder
from ..sheets.models import LibraryType, Row, library_type_spec
from .manager import LibrarySheetManager
from .models import RemoveResult, TemplateResult, TemplatesSetupResult, TemplateStep
from .paths import DEFAULT_BASE_FOLDER, build_public_url, build_storage_path, template_slug

if TYPE_CHECKING:
    from ..clients.store import DocumentStoreClient

logger = logging.getLogger("da-library")

TEMPLATE_KEY_FIELD = library_type_spec(LibraryType.TEMPLATES).key_field
encode_templates = library_document_encoder(LibraryType.TEMPLATES)


def templates_sheet_path(base_folder: str = DEFAULT_BASE_FOLDER) -> str:
    return build_storage_path(LibraryType.TEMPLATES, base_folder)


def template_entry(name: str, doc_url: str) -> Row:
    return {"key": name, "value": doc_url}


async def list_templates(manager: LibrarySheetManager, org: str, repo: str, base_folder: str = DEFAULT_BASE_FOLDER) -> list[Row]:
    return await manager.read_items(org, repo, templates_sheet_path(base_folder))


async def remove_template(
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    template_name: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
) -> RemoveResult:
    return await manager.remove_item(
        org, repo, template_name, TEMPLATE_KEY_FIELD, templates_sheet_path(base_folder), encode_templates
    )


async def add_template(
    store: "DocumentStoreClient",
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    template_name: str,
    source_page: str,
    base_folder: str = DEFAULT_BASE_FOLDER,
    preview: bool = False,
) -> TemplateResult:
    """Copy ``source_page`` into the template library and register it.

    Failures are recorded in ``errors`` and the step that failed; nothing is raised.
    """
    result = TemplateResult(
        template_name=template_name,
        source_page=source_page,
        base_folder=base_folder,
        preview=preview,
    )
    planned = "planned" if preview else "in_progress"

    fetch = TemplateStep(step=1, action="Fetching source page content", status=planned)
    result.steps.append(fetch)

    html: str | None = None
    if not preview:
        try:
            html = await store.get_html(org, repo, source_page)
        except Exception as e:
            logger.warning(f"Failed to fetch template source {org}/{repo}{source_page}: {e}")
            fetch.status = "failed"
            fetch.error = str(e)
            result.errors.append(f"Failed to fetch source page: {e}")
            return result
        fetch.status = "completed"
        fetch.details["source_length"] = len(html)

    try:
        doc_path = build_storage_path(LibraryType.TEMPLATES, base_folder, template_slug(template_name))
        doc_url = build_public_url(org, repo, doc_path)

        upload = TemplateStep(
            step=2,
            action="Would create template document" if preview else "Creating template document",
            status=planned,
            details={"doc_path": doc_path, "doc_url": doc_url},
        )
        result.steps.append(upload)
        if not preview:
            await store.put_html(org, repo, doc_path, html)
            upload.status = "completed"

        register = TemplateStep(
            step=3,
            action="Would add to templates.json" if preview else "Adding to templates.json",
            status=planned,
        )
        result.steps.append(register)
        if not preview:
            outcome = await manager.upsert_item(
                org,
                repo,
                template_entry(template_name, doc_url),
                TEMPLATE_KEY_FIELD,
                templates_sheet_path(base_folder),
                encode_templates,
            )
            register.status = "completed"
            register.details["existed"] = outcome.existed
    except Exception as e:
        logger.warning(f"Failed to add template '{template_name}': {e}")
        result.steps[-1].status = "failed"
        result.steps[-1].error = str(e)
        result.errors.append(str(e))
        return result

    result.success = True
    result.doc_path = doc_path
    result.doc_url = doc_url
    return result


async def setup_templates(
    store: "DocumentStoreClient",
    manager: LibrarySheetManager,
    org: str,
    repo: str,
    templates: list[dict[str, Any]],
    base_folder: str = DEFAULT_BASE_FOLDER,
    preview: bool = False,
) -> TemplatesSetupResult:
    """Add each template in turn; one failure does not stop the rest."""
    result = TemplatesSetupResult(base_folder=base_folder, preview=preview)
    result.summary.total_templates = len(templates)

    for template in templates:
        outcome = await add_template(
            store,
            manager,
            org,
            repo,
            template["name"],
            template["source_page"],
            base_folder,
            preview,
        )
        result.templates.append(outcome)
        if outcome.success:
            result.summary.created += 1
        else:
            result.summary.failed += 1
            result.errors.extend(outcome.errors)

    result.success = result.summary.failed == 0
    return result
