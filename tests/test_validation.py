"""Tests for identifier validation and prerequisite checks."""

import pytest

from da_library.clients import AccessCheck
from da_library.errors import LibraryValidationError
from da_library.validation import (
    require_valid,
    validate_base_folder,
    validate_block_name,
    validate_branch,
    validate_org_repo,
    validate_prerequisites,
)


class TestIdentifiers:
    """Test the individual validators."""

    def test_org_repo(self):
        assert validate_org_repo("adobe", "site").valid
        assert validate_org_repo("", "site").error == "Organization name must be a non-empty string"
        assert validate_org_repo("adobe", "si|te").error == "Repository name contains invalid characters"

    def test_base_folder(self):
        assert validate_base_folder("/library/").valid
        assert validate_base_folder("/").error == "Base folder cannot be empty"
        assert validate_base_folder("../etc").error == "Base folder cannot contain path traversal (..)"

    def test_block_name(self):
        assert validate_block_name("hero").valid
        assert validate_block_name("blocks/hero").error == "Block name cannot contain slashes"
        assert validate_block_name("hero?").error == "Block name contains invalid characters"

    def test_branch(self):
        assert validate_branch("feature/new-hero").valid
        assert validate_branch(".hidden").error == "Branch name cannot start or end with a dot"
        assert validate_branch("a..b").error == "Branch name cannot contain consecutive dots"
        assert validate_branch("my branch").error == "Branch name contains invalid characters"

    def test_require_valid(self):
        with pytest.raises(LibraryValidationError) as exc_info:
            require_valid(validate_block_name(""))
        assert "Block name must be a non-empty string" in str(exc_info.value)


class FakeGitHub:
    def __init__(self, access):
        self.access = access
        self.calls = 0

    async def check_access(self, owner, repo, branch="main"):
        self.calls += 1
        return self.access


class TestValidatePrerequisites:
    """Test the combined pre-flight check."""

    @pytest.mark.anyio
    async def test_all_good(self, store):
        report = await validate_prerequisites(FakeGitHub(AccessCheck(True)), store, "adobe", "site", "library")
        assert report.valid is True
        assert report.errors == []

    @pytest.mark.anyio
    async def test_invalid_identifiers_skip_access_checks(self, store):
        github = FakeGitHub(AccessCheck(True))

        report = await validate_prerequisites(github, store, "adobe", "site", "..", block_name="a/b")

        assert report.valid is False
        assert len(report.errors) == 2
        assert github.calls == 0

    @pytest.mark.anyio
    async def test_access_errors_are_collected(self, store):
        store.access = AccessCheck(False, "Repository adobe/site not found in DA")
        github = FakeGitHub(AccessCheck(False, "Repository adobe/site not found or not accessible"))

        report = await validate_prerequisites(github, store, "adobe", "site", "library")

        assert report.valid is False
        assert report.errors == [
            "Repository adobe/site not found or not accessible",
            "Repository adobe/site not found in DA",
        ]
