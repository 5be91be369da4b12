"""Unit tests for configuration loading."""

from pathlib import Path

import pydantic
import pytest

from prompt_mcp.config import get_settings
from prompt_mcp.config import reset_settings


class TestSettings:
    def test_defaults(self, make_settings):
        settings = make_settings()

        assert settings.prompts_root_path == "/"
        assert settings.storage_provider == "auto"
        assert settings.webdav_recursive is False
        assert settings.request_timeout == 30.0

    def test_root_path_normalized(self, make_settings):
        assert make_settings(prompts_root_path="Prompts/").prompts_root_path == "/Prompts"

    def test_legacy_dropbox_root_variable(self, monkeypatch, make_settings):
        monkeypatch.setenv("DROPBOX_ROOT_PATH", "/Apps/Prompts")

        assert make_settings().prompts_root_path == "/Apps/Prompts"

    def test_prompts_root_variable(self, monkeypatch, make_settings):
        monkeypatch.setenv("PROMPTS_ROOT_PATH", "/Library/")

        assert make_settings().prompts_root_path == "/Library"

    def test_provider_lowercased(self, make_settings):
        assert make_settings(storage_provider=" WebDAV ").storage_provider == "webdav"

    def test_unknown_provider_rejected(self, make_settings):
        with pytest.raises(pydantic.ValidationError, match="storage_provider"):
            make_settings(storage_provider="dropbx")

    def test_provider_env_variable(self, monkeypatch, make_settings):
        monkeypatch.setenv("STORAGE_PROVIDER", "None")

        assert make_settings().storage_provider == "none"

    def test_webdav_needs_full_bundle(self, make_settings):
        partial = make_settings(webdav_url="https://dav.example.com", webdav_username="me")
        full = make_settings(webdav_url="https://dav.example.com", webdav_username="me", webdav_password="pw")

        assert not partial.webdav_configured
        assert full.webdav_configured

    def test_blank_token_is_not_configured(self, make_settings):
        assert not make_settings(dropbox_access_token="   ").dropbox_configured
        assert make_settings(dropbox_refresh_token="r").dropbox_configured

    def test_export_local_path_expanded(self, make_settings):
        settings = make_settings(export_local_dir="~/exports")

        assert settings.export_local_path == Path("~/exports").expanduser()


def test_get_settings_is_cached(monkeypatch):
    monkeypatch.setenv("PROMPTS_ROOT_PATH", "/First")
    first = get_settings()
    monkeypatch.setenv("PROMPTS_ROOT_PATH", "/Second")

    assert get_settings() is first

    reset_settings()
    # reading the environment again can still be overridden by a developer .env,
    # so only the identity is checked here
    assert get_settings() is not first
