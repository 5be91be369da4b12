"""The prompt library: every operation the MCP layer exposes.

``PromptLibrary`` composes one storage backend with the backup, search and
export components. Single-prompt operations raise ``PromptMCPError``
subclasses; bulk operations skip prompts that cannot be read and report
them in the result.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable
from pathlib import Path

from .backup import BackupCoordinator
from .backup import utc_now
from .catalog import DocumentRef
from .catalog import list_documents
from .catalog import read_each
from .export import FALLBACK_EXPORT_DIR
from .export import ExportArchiver
from .helpers import decode_content
from .helpers import summarize
from .models import BackupOutcome
from .models import ContentSearchResult
from .models import ExportOutcome
from .models import NameSearchResult
from .models import PromptContent
from .models import PromptInfo
from .models import PromptList
from .paths import name_from_path
from .paths import normalize_path
from .search import SearchEngine
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)

PROVIDER_LABELS = {
    "dropbox": "Dropbox",
    "webdav": "WebDAV",
    "none": "no storage",
}


class PromptLibrary:
    """Named prompts stored under one root of one storage backend."""

    def __init__(
        self,
        storage: StorageBackend,
        export_dir: Path | str | None = None,
        fallback_export_dir: Path | str = FALLBACK_EXPORT_DIR,
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        self.storage = storage
        self._backup = BackupCoordinator(storage, clock=clock)
        self._search = SearchEngine(storage)
        self._archiver = ExportArchiver(storage, local_dir=export_dir, fallback_dir=fallback_export_dir, clock=clock)

    @property
    def provider_label(self) -> str:
        return PROVIDER_LABELS.get(self.storage.backend_type, self.storage.backend_type)

    def describe(self, path: str) -> str:
        return f"Stored in {self.provider_label}: {path}"

    def path_for(self, name: str) -> str:
        return normalize_path(name, self.storage.root_path)

    async def documents(self) -> list[DocumentRef]:
        return await list_documents(self.storage)

    async def list_prompts(self, include_summary: bool = True) -> PromptList:
        """List live prompts in storage order.

        With ``include_summary`` each prompt is read to derive its summary;
        a prompt that cannot be read is left out and named in ``skipped``.
        """
        documents = await self.documents()
        prompts: list[PromptInfo] = []
        skipped: list[str] = []

        if include_summary:
            async for result in read_each(self.storage, documents):
                if not result.ok:
                    skipped.append(result.ref.name)
                    continue
                prompts.append(self._info(result.ref, summarize(decode_content(result.content))))
        else:
            prompts = [self._info(ref) for ref in documents]

        return PromptList(prompts=prompts, total=len(prompts), provider=self.storage.backend_type, skipped=skipped)

    def _info(self, ref: DocumentRef, summary: str | None = None) -> PromptInfo:
        return PromptInfo(name=ref.name, description=self.describe(ref.path), path=ref.path, summary=summary)

    async def get_prompt(self, name: str) -> PromptContent:
        path = self.path_for(name)
        raw = await self.storage.read_file(path)
        return PromptContent(
            name=name_from_path(path, self.storage.root_path) or name,
            path=path,
            content=decode_content(raw),
        )

    async def save_prompt(self, name: str, content: str, backup: bool = True) -> BackupOutcome:
        outcome = await self._backup.backup_then_write(name, content.encode("utf-8"), do_backup=backup)
        logger.info(f"Saved prompt {outcome.name} to {outcome.path}")
        return outcome

    async def delete_prompt(self, name: str) -> str:
        """Delete the prompt and return the path that was removed."""
        path = self.path_for(name)
        await self.storage.delete_file(path)
        logger.info(f"Deleted prompt at {path}")
        return path

    async def search_prompts(self, query: str) -> NameSearchResult:
        return await self._search.search_by_name(query)

    async def search_content(self, query: str) -> ContentSearchResult:
        return await self._search.search_by_content(query)

    async def export_prompts(self) -> ExportOutcome:
        return await self._archiver.export()

    async def aclose(self) -> None:
        await self.storage.aclose()
