"""The pytest configuration for Prompt MCP testing.

Log files go to a temporary folder and credentials from the developer's
environment never leak into a test.
"""

import os
import tempfile

os.environ.setdefault("PROMPT_MCP_LOG_DIR", tempfile.mkdtemp(prefix="prompt-mcp-test-logs-"))
os.environ.setdefault("MCP_METRICS_ENABLED", "false")

import datetime  # noqa: E402

import pytest  # noqa: E402

from prompt_mcp.config import Settings  # noqa: E402
from prompt_mcp.config import reset_settings  # noqa: E402
from prompt_mcp.library import PromptLibrary  # noqa: E402

from .shared.fake_storage import InMemoryStorageBackend  # noqa: E402

CREDENTIAL_VARS = (
    "DROPBOX_ACCESS_TOKEN",
    "DROPBOX_REFRESH_TOKEN",
    "DROPBOX_APP_KEY",
    "DROPBOX_APP_SECRET",
    "DROPBOX_ROOT_PATH",
    "PROMPTS_ROOT_PATH",
    "WEBDAV_URL",
    "WEBDAV_USERNAME",
    "WEBDAV_PASSWORD",
    "WEBDAV_RECURSIVE",
    "STORAGE_PROVIDER",
    "STORAGE_PROXY",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove storage credentials and reset the cached settings around each test."""
    for var in CREDENTIAL_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_settings():
    """Build Settings that ignore any .env file on disk."""

    def _make(**overrides) -> Settings:
        return Settings(_env_file=None, **overrides)

    return _make


class FixedClock:
    """Clock returning a fixed moment; ``advance`` moves it forward."""

    def __init__(self, moment: datetime.datetime | None = None):
        self.moment = moment or datetime.datetime(2024, 1, 15, 10, 30, 0, tzinfo=datetime.timezone.utc)

    def __call__(self) -> datetime.datetime:
        return self.moment

    def advance(self, seconds: int = 1) -> None:
        self.moment += datetime.timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def storage():
    """Empty in-memory store rooted at /Prompts."""
    return InMemoryStorageBackend(root_path="/Prompts")


@pytest.fixture
def library(storage, clock, tmp_path):
    return PromptLibrary(
        storage,
        export_dir=tmp_path / "exports",
        fallback_export_dir=tmp_path / "fallback",
        clock=clock,
    )


# Custom markers for pytest
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: tests that run the MCP server in-process")
