"""
Pytest configuration and fixtures for da-library tests.
"""

import copy
import sys
from pathlib import Path

import pytest

# Add src directory to Python path to allow importing da_library
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from da_library.clients.store import AccessCheck  # noqa: E402
from da_library.errors import NotFoundError, TransportError  # noqa: E402
from da_library.library import LibrarySheetManager, SiteConfigRegistrar  # noqa: E402


class FakeDocumentStore:
    """In-memory stand-in for DocumentStoreClient.

    Documents are keyed by ``(org, repo, path)``; the site config by ``(org, repo)``.
    Values are deep-copied in and out so callers cannot share state with the store.
    """

    def __init__(self):
        self.documents: dict[tuple[str, str, str], dict] = {}
        self.pages: dict[tuple[str, str, str], str] = {}
        self.configs: dict[tuple[str, str], dict] = {}
        self.json_writes: list[tuple[str, dict]] = []
        self.html_writes: list[tuple[str, str]] = []
        self.fail_writes: set[str] = set()
        self.fail_config_writes = False
        self.access = AccessCheck(True)

    # Sources

    async def get_json(self, org, repo, path):
        document = self.documents.get((org, repo, path))
        return copy.deepcopy(document) if document is not None else None

    async def put_json(self, org, repo, path, document):
        if path in self.fail_writes:
            raise TransportError(f"API 500 Internal Server Error: write to {path} failed", status=500)
        self.documents[(org, repo, path)] = copy.deepcopy(document)
        self.json_writes.append((path, copy.deepcopy(document)))
        return {}

    async def get_html(self, org, repo, path):
        if (org, repo, path) not in self.pages:
            raise NotFoundError(f"API 404 Not Found: {path}", status=404)
        return self.pages[(org, repo, path)]

    async def put_html(self, org, repo, path, html):
        if path in self.fail_writes:
            raise TransportError(f"API 500 Internal Server Error: write to {path} failed", status=500)
        self.pages[(org, repo, path)] = html
        self.html_writes.append((path, html))
        return {}

    async def exists(self, org, repo, path, ext="html"):
        if ext == "html":
            return (org, repo, path) in self.pages
        return (org, repo, path) in self.documents

    # Site config

    async def get_config(self, org, repo):
        config = self.configs.get((org, repo))
        return copy.deepcopy(config) if config is not None else None

    async def put_config(self, org, repo, config):
        if self.fail_config_writes:
            raise TransportError("API 403 Forbidden: config is read-only", status=403)
        self.configs[(org, repo)] = copy.deepcopy(config)
        return {}

    async def check_access(self, org, repo):
        return self.access


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    return FakeDocumentStore()


@pytest.fixture
def manager(store):
    return LibrarySheetManager(store)


@pytest.fixture
def registrar(store):
    return SiteConfigRegistrar(store)
