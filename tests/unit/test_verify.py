"""Unit tests for the storage connectivity check."""

import pytest

from prompt_mcp import verify
from prompt_mcp.exceptions import AuthenticationError
from prompt_mcp.verify import verify_storage
from tests.shared.fake_storage import InMemoryStorageBackend


@pytest.mark.asyncio
async def test_no_provider(make_settings):
    assert await verify_storage(make_settings()) == 1


@pytest.mark.asyncio
async def test_successful_listing(make_settings, mocker, caplog):
    storage = InMemoryStorageBackend(root_path="/Prompts", files={"/Prompts/a.md": "# A"})
    mocker.patch.object(verify, "create_storage_backend", return_value=storage)

    with caplog.at_level("INFO", logger="prompt_mcp.verify"):
        assert await verify_storage(make_settings(dropbox_access_token="t")) == 0

    assert "/Prompts/a.md" in caplog.text
    assert storage.closed


@pytest.mark.asyncio
async def test_failed_listing(make_settings, mocker):
    storage = InMemoryStorageBackend()
    mocker.patch.object(storage, "list_entries", side_effect=AuthenticationError("bad token", provider="dropbox"))
    mocker.patch.object(verify, "create_storage_backend", return_value=storage)

    assert await verify_storage(make_settings(dropbox_access_token="t")) == 1
    assert storage.closed
