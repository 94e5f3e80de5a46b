"""Structured results returned by library operations and MCP tools."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..sheets.models import Row


class UpsertResult(BaseModel):
    """Outcome of adding or updating a single sheet row."""
    added: bool = True
    existed: bool = Field(description="True when a row with the same key was replaced")
    path: str
    entry: Row


class RemoveResult(BaseModel):
    """Outcome of removing a sheet row."""
    removed: bool
    path: str | None = None
    error: str | None = None


class BatchSummary(BaseModel):
    total: int = 0
    added: int = 0
    updated: int = 0
    failed: int = 0


class BatchItemResult(BaseModel):
    """Per-item outcome in a batch; the original item fields are kept alongside."""
    item: dict[str, Any]
    success: bool
    existed: bool | None = None
    error: str | None = None


class BatchResult(BaseModel):
    """Aggregate outcome of a sequential batch upsert."""
    success: bool = True
    summary: BatchSummary = Field(default_factory=BatchSummary)
    items: list[BatchItemResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class RegistrationResult(BaseModel):
    """Outcome of registering a library type in the site config."""
    registered: bool
    existed: bool = False
    created_sheet: bool = False
    converted_to_multi_sheet: bool = False
    library_entry_count: int | None = None
    error: str | None = None


class RegistrationStatus(BaseModel):
    """Read-only view of one library type's registration."""
    registered: bool
    config_path: str | None = None
    total_library_entries: int | None = None
    reason: str | None = None
    available_types: list[str] | None = None
    error: str | None = None


class BlockLibraryResult(BaseModel):
    """Outcome of a blocks sheet mutation; the options sheet is always kept."""
    path: str
    added: bool | None = None
    removed: bool | None = None
    existed: bool | None = None
    options_preserved: bool = False
    entry: Row | None = None
    error: str | None = None


class DocResult(BaseModel):
    """Location of a documentation page in DA."""
    path: str
    url: str
    created: bool | None = None
    exists: bool | None = None


class TemplateStep(BaseModel):
    step: int
    action: str
    status: str
    details: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class TemplateResult(BaseModel):
    """Step-by-step outcome of adding one template."""
    template_name: str
    source_page: str
    base_folder: str
    preview: bool = False
    success: bool = False
    doc_path: str | None = None
    doc_url: str | None = None
    steps: list[TemplateStep] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class TemplatesSummary(BaseModel):
    total_templates: int = 0
    created: int = 0
    failed: int = 0


class TemplatesSetupResult(BaseModel):
    base_folder: str
    preview: bool = False
    success: bool = True
    summary: TemplatesSummary = Field(default_factory=TemplatesSummary)
    templates: list[TemplateResult] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
