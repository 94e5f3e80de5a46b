"""
Server configuration.

Settings are read from the environment once, when the server starts, and
passed explicitly into the DA admin and GitHub clients.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

DEFAULT_VERSION = "0.1.0"


class Settings(BaseModel):
    """Connection settings for the remote services used by the library tools."""

    admin_api_url: str = Field(
        default="https://admin.da.live",
        description="Base URL of the DA admin API",
    )
    da_token: str | None = Field(
        default=None,
        description="Bearer token for the DA admin API",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    github_token: str | None = Field(
        default=None,
        description="GitHub token, required for private repositories",
    )
    timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request timeout in seconds",
    )
    version: str = Field(
        default=DEFAULT_VERSION,
        description="Server version reported in the User-Agent header",
    )

    @property
    def user_agent(self) -> str:
        return f"da-library-mcp/v{self.version} (python-httpx)"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings with every unset variable falling back to its default
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        mapping = {
            "admin_api_url": "DA_ADMIN_API_URL",
            "da_token": "DA_ADMIN_API_TOKEN",
            "github_api_url": "GITHUB_API_URL",
            "github_token": "GITHUB_TOKEN",
            "timeout": "DA_LIBRARY_TIMEOUT",
            "version": "VERSION",
        }
        for field_name, env_name in mapping.items():
            value = env.get(env_name)
            if value:
                values[field_name] = value

        return cls(**values)
