"""HTTP clients for the DA admin API and GitHub."""

from da_library.clients.github import GitHubClient
from da_library.clients.store import AccessCheck, DocumentStoreClient

__all__ = ["AccessCheck", "DocumentStoreClient", "GitHubClient"]
