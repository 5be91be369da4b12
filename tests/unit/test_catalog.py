"""Unit tests for prompt enumeration and sequential bulk reads."""

import pytest

from prompt_mcp.catalog import DocumentRef
from prompt_mcp.catalog import list_documents
from prompt_mcp.catalog import read_each
from prompt_mcp.exceptions import PromptNotFoundError
from prompt_mcp.exceptions import StorageError
from tests.shared.fake_storage import InMemoryStorageBackend


@pytest.mark.asyncio
async def test_list_documents_skips_reserved_and_outside_root():
    storage = InMemoryStorageBackend(
        root_path="/Prompts",
        files={
            "/Prompts/b.md": "B",
            "/Prompts/_archive/b_2024-01-15T10-30-00.md": "old",
            "/Prompts/_export/prompts_backup_x.md": "odd",
            "/Prompts/team/a.md": "A",
        },
    )

    documents = await list_documents(storage)

    assert documents == [
        DocumentRef(name="b", path="/Prompts/b.md"),
        DocumentRef(name="team/a", path="/Prompts/team/a.md"),
    ]


@pytest.mark.asyncio
async def test_read_each_reports_failures_without_stopping():
    storage = InMemoryStorageBackend(files={"/a.md": "A", "/b.md": "B"})
    storage.unreadable.add("/a.md")
    documents = [
        DocumentRef("a", "/a.md"),
        DocumentRef("gone", "/gone.md"),
        DocumentRef("b", "/b.md"),
    ]

    results = [result async for result in read_each(storage, documents)]

    assert [r.ok for r in results] == [False, False, True]
    assert isinstance(results[0].error, StorageError)
    assert isinstance(results[1].error, PromptNotFoundError)
    assert results[2].content == b"B"
