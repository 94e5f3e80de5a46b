"""
Client for the DA admin API, the remote store holding library sheets and pages.

Reads return decoded JSON (or text for HTML sources). Writes are multipart
uploads. Non-success statuses raise TransportError; 404 raises NotFoundError,
which the ``get_*`` helpers map to ``None`` where absence is a normal outcome.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..config import Settings
from ..errors import NotFoundError, TransportError
from ..library.paths import clean_path

logger = logging.getLogger("da-library")


@dataclass
class AccessCheck:
    """Outcome of a reachability check against a remote service."""
    accessible: bool
    error: str | None = None


def _decode_body(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            # empty body or invalid JSON
            return {}
    return response.text


class DocumentStoreClient:
    """Async client for ``admin.da.live`` source, config and list endpoints."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.base_url = settings.admin_api_url.rstrip("/")
        self._transport = transport

    # =========================================================================
    # URLs
    # =========================================================================

    def format_url(self, api: str, org: str, repo: str, path: str = "", ext: str | None = None) -> str:
        url = f"{self.base_url}/{api}/{org}/{repo}/{clean_path(path)}"
        return f"{url}.{ext}" if ext else url

    def source_url(self, org: str, repo: str, path: str, ext: str) -> str:
        return self.format_url("source", org, repo, path, ext)

    def config_url(self, org: str, repo: str) -> str:
        return self.format_url("config", org, repo).rstrip("/")

    # =========================================================================
    # HTTP
    # =========================================================================

    def _headers(self, multipart: bool) -> dict[str, str]:
        headers: dict[str, str] = {}
        if not multipart:
            headers["User-Agent"] = self.settings.user_agent
        if self.settings.da_token:
            headers["Authorization"] = f"Bearer {self.settings.da_token}"
        return headers

    async def request(self, method: str, url: str, *, files: dict[str, Any] | None = None) -> Any:
        """Send a request and return the decoded body.

        Raises:
            NotFoundError: On HTTP 404
            TransportError: On any other non-success status or connection failure
        """
        logger.debug(f"{method} {url}")
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.settings.timeout,
                headers=self._headers(files is not None),
            ) as client:
                response = await client.request(method, url, files=files)
        except httpx.RequestError as e:
            raise TransportError(
                f"Failed to connect to DA admin API: {e}", url=url, method=method
            ) from e

        body = _decode_body(response)

        if not response.is_success:
            message = body if isinstance(body, str) else json.dumps(body)
            error_cls = NotFoundError if response.status_code == 404 else TransportError
            raise error_cls(
                f"API {response.status_code} {response.reason_phrase}: {message}",
                status=response.status_code,
                url=url,
                method=method,
                body=body,
            )

        return body

    # =========================================================================
    # Sources
    # =========================================================================

    async def get_json(self, org: str, repo: str, path: str) -> dict[str, Any] | None:
        """Fetch a JSON sheet document, or None if it does not exist."""
        url = self.source_url(org, repo, path, "json")
        try:
            body = await self.request("GET", url)
        except NotFoundError:
            return None

        if isinstance(body, str):
            try:
                body = json.loads(body)
            except ValueError:
                raise TransportError(f"Expected a JSON document at {url}", url=url, method="GET", body=body) from None
        if not isinstance(body, dict):
            raise TransportError(f"Expected a JSON object at {url}", url=url, method="GET", body=body)
        return body

    async def put_json(self, org: str, repo: str, path: str, document: dict[str, Any]) -> Any:
        payload = json.dumps(document).encode("utf-8")
        files = {"data": ("data.json", payload, "application/json")}
        return await self.request("POST", self.source_url(org, repo, path, "json"), files=files)

    async def get_html(self, org: str, repo: str, path: str) -> str:
        """Fetch an HTML source page.

        Raises:
            NotFoundError: If the page does not exist
        """
        body = await self.request("GET", self.source_url(org, repo, path, "html"))
        return body if isinstance(body, str) else json.dumps(body)

    async def put_html(self, org: str, repo: str, path: str, html: str) -> Any:
        files = {"data": ("data.html", html.encode("utf-8"), "text/html")}
        return await self.request("POST", self.source_url(org, repo, path, "html"), files=files)

    async def exists(self, org: str, repo: str, path: str, ext: str = "html") -> bool:
        try:
            await self.request("GET", self.source_url(org, repo, path, ext))
        except NotFoundError:
            return False
        return True

    async def list_sources(self, org: str, repo: str, path: str) -> Any:
        return await self.request("GET", self.format_url("list", org, repo, path))

    # =========================================================================
    # Site config
    # =========================================================================

    async def get_config(self, org: str, repo: str) -> dict[str, Any] | None:
        """Fetch the site configuration document, or None if the site has none."""
        try:
            config = await self.request("GET", self.config_url(org, repo))
        except NotFoundError:
            return None
        return config if isinstance(config, dict) else None

    async def put_config(self, org: str, repo: str, config: dict[str, Any]) -> Any:
        files = {"config": (None, json.dumps(config).encode("utf-8"))}
        return await self.request("PUT", self.config_url(org, repo), files=files)

    # =========================================================================
    # Access
    # =========================================================================

    async def check_access(self, org: str, repo: str) -> AccessCheck:
        """Check that the site exists and the token is accepted."""
        try:
            await self.request("GET", self.format_url("list", org, repo))
        except NotFoundError:
            return AccessCheck(False, f"Repository {org}/{repo} not found in DA")
        except TransportError as e:
            if e.status == 401:
                return AccessCheck(
                    False,
                    "DA Admin API authentication failed. Check DA_ADMIN_API_TOKEN environment variable",
                )
            if e.status is None:
                return AccessCheck(False, f"DA Admin API connection error: {e}")
            return AccessCheck(False, f"DA Admin API error: {e.status}")
        return AccessCheck(True)
