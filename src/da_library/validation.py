"""
Validation of org/repo, folder, block and branch identifiers.

The ``validate_*`` helpers never raise: they return a ValidationResult so the
checks can be collected and reported together. ``require_valid`` turns a
failed result into a LibraryValidationError.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import LibraryValidationError

if TYPE_CHECKING:
    from .clients.github import GitHubClient
    from .clients.store import DocumentStoreClient

INVALID_CHARS = re.compile(r'[<>:"|?*\\]')
INVALID_PATH_CHARS = re.compile(r'[<>:"|?*]')
INVALID_BRANCH_CHARS = re.compile(r"[\s~^:?*\[\\]")
PATH_TRAVERSAL = ".."


@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None


@dataclass
class PrerequisiteReport:
    """All problems found before a library setup run."""
    valid: bool
    errors: list[str] = field(default_factory=list)


def _check_string(value: object, field_name: str) -> ValidationResult | None:
    if not isinstance(value, str) or not value.strip():
        return ValidationResult(False, f"{field_name} must be a non-empty string")
    return None


def validate_org_repo(org: str, repo: str) -> ValidationResult:
    failed = _check_string(org, "Organization name") or _check_string(repo, "Repository name")
    if failed:
        return failed
    if INVALID_CHARS.search(org):
        return ValidationResult(False, "Organization name contains invalid characters")
    if INVALID_CHARS.search(repo):
        return ValidationResult(False, "Repository name contains invalid characters")
    return ValidationResult(True)


def validate_base_folder(base_folder: str) -> ValidationResult:
    failed = _check_string(base_folder, "Base folder")
    if failed:
        return failed

    clean = base_folder.strip("/")
    if not clean:
        return ValidationResult(False, "Base folder cannot be empty")
    if INVALID_PATH_CHARS.search(clean):
        return ValidationResult(False, "Base folder contains invalid characters")
    if PATH_TRAVERSAL in clean:
        return ValidationResult(False, "Base folder cannot contain path traversal (..)")
    return ValidationResult(True)


def validate_block_name(block_name: str) -> ValidationResult:
    failed = _check_string(block_name, "Block name")
    if failed:
        return failed

    trimmed = block_name.strip()
    if "/" in trimmed or "\\" in trimmed:
        return ValidationResult(False, "Block name cannot contain slashes")
    if PATH_TRAVERSAL in trimmed:
        return ValidationResult(False, "Block name cannot contain path traversal (..)")
    if INVALID_PATH_CHARS.search(trimmed):
        return ValidationResult(False, "Block name contains invalid characters")
    return ValidationResult(True)


def validate_branch(branch: str) -> ValidationResult:
    failed = _check_string(branch, "Branch name")
    if failed:
        return failed

    trimmed = branch.strip()
    if trimmed.startswith(".") or trimmed.endswith("."):
        return ValidationResult(False, "Branch name cannot start or end with a dot")
    if PATH_TRAVERSAL in trimmed:
        return ValidationResult(False, "Branch name cannot contain consecutive dots")
    if INVALID_BRANCH_CHARS.search(trimmed):
        return ValidationResult(False, "Branch name contains invalid characters")
    return ValidationResult(True)


def require_valid(result: ValidationResult) -> None:
    """Raise LibraryValidationError if ``result`` is not valid."""
    if not result.valid:
        raise LibraryValidationError(result.error)


async def validate_prerequisites(
    github: "GitHubClient",
    store: "DocumentStoreClient",
    org: str,
    repo: str,
    base_folder: str,
    block_name: str | None = None,
    branch: str = "main",
) -> PrerequisiteReport:
    """Validate identifiers, then check GitHub and DA access concurrently.

    Access checks are skipped when any identifier is invalid.
    """
    checks = [
        validate_org_repo(org, repo),
        validate_base_folder(base_folder),
        validate_branch(branch),
    ]
    if block_name:
        checks.append(validate_block_name(block_name))

    errors = [check.error for check in checks if not check.valid]
    if errors:
        return PrerequisiteReport(valid=False, errors=errors)

    github_access, da_access = await asyncio.gather(
        github.check_access(org, repo, branch),
        store.check_access(org, repo),
    )
    for access in (github_access, da_access):
        if not access.accessible:
            errors.append(access.error)

    return PrerequisiteReport(valid=not errors, errors=errors)
