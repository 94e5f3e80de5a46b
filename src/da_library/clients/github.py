"""
GitHub REST client for reading block source code.

Only the contents, repository, branch and rate-limit endpoints are used.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from ..config import Settings
from ..errors import NotFoundError, TransportError
from .store import AccessCheck

logger = logging.getLogger("da-library")


class GitHubClient:
    """Async client for the GitHub contents API."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.base_url = settings.github_api_url.rstrip("/")
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": self.settings.user_agent,
        }
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"
        return headers

    async def _get(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """GET ``endpoint`` and return the decoded JSON body.

        Raises:
            NotFoundError: On HTTP 404
            TransportError: On any other failure
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"GET {url}")
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.timeout,
                headers=self._headers(),
            ) as client:
                response = await client.get(url, params=params)
        except httpx.RequestError as e:
            raise TransportError(f"Failed to connect to GitHub: {e}", url=url, method="GET") from e

        if response.status_code == 404:
            raise NotFoundError(f"GitHub 404: {endpoint}", status=404, url=url, method="GET")
        if not response.is_success:
            raise TransportError(
                f"GitHub returned HTTP {response.status_code}: {response.reason_phrase}",
                status=response.status_code,
                url=url,
                method="GET",
                body=response.text,
            )
        return response.json()

    # =========================================================================
    # Repositories
    # =========================================================================

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        try:
            return await self._get(f"/repos/{owner}/{repo}")
        except NotFoundError:
            raise NotFoundError(f"Repository {owner}/{repo} not found", status=404) from None

    async def get_branch(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        try:
            return await self._get(f"/repos/{owner}/{repo}/branches/{branch}")
        except NotFoundError:
            raise NotFoundError(f"Branch '{branch}' not found in {owner}/{repo}", status=404) from None

    async def get_rate_limit(self) -> dict[str, Any] | None:
        try:
            data = await self._get("/rate_limit")
        except TransportError as e:
            logger.warning(f"Could not read GitHub rate limit: {e}")
            return None
        return data.get("rate")

    async def check_access(self, owner: str, repo: str, branch: str = "main") -> AccessCheck:
        """Check that the repository and branch can be read."""
        try:
            await self.get_repository(owner, repo)
        except NotFoundError:
            return AccessCheck(False, f"Repository {owner}/{repo} not found or not accessible")
        except TransportError as e:
            if e.status == 401:
                return AccessCheck(False, "GitHub authentication failed. Check GITHUB_TOKEN environment variable")
            if e.status == 403:
                message = "GitHub API rate limit exceeded or access forbidden"
                rate = await self.get_rate_limit()
                if rate and "remaining" in rate:
                    message += f" ({rate['remaining']}/{rate.get('limit')} requests remaining)"
                return AccessCheck(False, message)
            return AccessCheck(False, f"GitHub API error: {e}")

        try:
            await self.get_branch(owner, repo, branch)
        except TransportError as e:
            return AccessCheck(False, f"Branch '{branch}' not found in {owner}/{repo}. {e}")

        return AccessCheck(True)

    # =========================================================================
    # Contents
    # =========================================================================

    async def list_contents(self, owner: str, repo: str, path: str, ref: str = "main") -> list[dict[str, Any]]:
        """List a directory (or wrap a single file entry in a list).

        Raises:
            NotFoundError: If the path does not exist on ``ref``
        """
        try:
            data = await self._get(f"/repos/{owner}/{repo}/contents/{path.strip('/')}", {"ref": ref})
        except NotFoundError:
            raise NotFoundError(
                f"Path '{path}' not found in {owner}/{repo} (branch: {ref})", status=404
            ) from None
        return data if isinstance(data, list) else [data]

    async def list_directories(self, owner: str, repo: str, path: str, ref: str = "main") -> list[dict[str, Any]]:
        return [item for item in await self.list_contents(owner, repo, path, ref) if item.get("type") == "dir"]

    async def get_file_content(self, owner: str, repo: str, path: str, ref: str = "main") -> str:
        """Return a file's decoded UTF-8 content.

        Raises:
            NotFoundError: If the file does not exist on ``ref``
            TransportError: If the response carries no content
        """
        try:
            data = await self._get(f"/repos/{owner}/{repo}/contents/{path.strip('/')}", {"ref": ref})
        except NotFoundError:
            raise NotFoundError(
                f"File '{path}' not found in {owner}/{repo} (branch: {ref})", status=404
            ) from None

        content = data.get("content") if isinstance(data, dict) else None
        if not content:
            raise TransportError(f"No content in response for '{path}'")
        return base64.b64decode(content).decode("utf-8")

    async def file_exists(self, owner: str, repo: str, path: str, ref: str = "main") -> bool:
        try:
            await self._get(f"/repos/{owner}/{repo}/contents/{path.strip('/')}", {"ref": ref})
        except NotFoundError:
            return False
        return True
