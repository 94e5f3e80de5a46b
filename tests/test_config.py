"""Tests for server settings."""

import pytest
from pydantic import ValidationError

from da_library.config import DEFAULT_VERSION, Settings


class TestSettingsFromEnv:
    """Test reading settings from environment variables."""

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.admin_api_url == "https://admin.da.live"
        assert settings.github_api_url == "https://api.github.com"
        assert settings.da_token is None
        assert settings.timeout == 30.0
        assert settings.version == DEFAULT_VERSION

    def test_values_from_environment(self):
        settings = Settings.from_env({
            "DA_ADMIN_API_URL": "https://admin.example.test",
            "DA_ADMIN_API_TOKEN": "da-secret",
            "GITHUB_TOKEN": "gh-secret",
            "DA_LIBRARY_TIMEOUT": "5",
            "VERSION": "2.1.0",
        })
        assert settings.admin_api_url == "https://admin.example.test"
        assert settings.da_token == "da-secret"
        assert settings.github_token == "gh-secret"
        assert settings.timeout == 5.0
        assert settings.user_agent == "da-library-mcp/v2.1.0 (python-httpx)"

    def test_empty_values_fall_back_to_defaults(self):
        settings = Settings.from_env({"DA_ADMIN_API_TOKEN": ""})
        assert settings.da_token is None

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            Settings.from_env({"DA_LIBRARY_TIMEOUT": "0"})
