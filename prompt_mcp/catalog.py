"""Enumerate and read the prompts currently stored under the root.

Bulk operations (listing with summaries, content search, export) read each
prompt one after another. A failed read never aborts the sweep: it is
reported as a ``ReadResult`` carrying the error, and callers decide to skip.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from collections.abc import Iterable
from dataclasses import dataclass

from .exceptions import PromptMCPError
from .paths import is_reserved_path
from .paths import name_from_path
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentRef:
    """A live prompt: its short name and the path the backend reported."""

    name: str
    path: str


@dataclass(frozen=True)
class ReadResult:
    """Outcome of reading one prompt during a bulk sweep."""

    ref: DocumentRef
    content: bytes | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def list_documents(storage: StorageBackend) -> list[DocumentRef]:
    """List live prompts in backend order, leaving out the archive and export folders."""
    documents = []
    for entry in await storage.list_entries():
        if is_reserved_path(entry.path_display, storage.root_path):
            continue
        name = name_from_path(entry.path_display, storage.root_path)
        if name is None:
            logger.debug(f"Ignoring {entry.path_display}: outside root {storage.root_path}")
            continue
        documents.append(DocumentRef(name=name, path=entry.path_display))
    return documents


async def read_each(storage: StorageBackend, documents: Iterable[DocumentRef]) -> AsyncIterator[ReadResult]:
    """Read ``documents`` sequentially, yielding one result per prompt."""
    for ref in documents:
        try:
            content = await storage.read_file(ref.path)
        except PromptMCPError as e:
            logger.warning(f"Skipping unreadable prompt {ref.path}: {e}")
            yield ReadResult(ref=ref, error=e)
            continue
        yield ReadResult(ref=ref, content=content)
