"""Backup-before-overwrite for prompt saves.

Before a prompt is replaced, its previous content is copied to
``{root}/_archive/{name}_{timestamp}.md``. Archive snapshots are written
create-only, so two saves of the same prompt within one second collide
instead of clobbering the first snapshot. A failed snapshot never stops the
live write; the failure is recorded on the outcome.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable

from .exceptions import PromptMCPError
from .models import BackupOutcome
from .paths import archive_path
from .paths import format_timestamp
from .paths import name_from_path
from .paths import normalize_path
from .storage.base import StorageBackend
from .storage.base import WriteMode

logger = logging.getLogger(__name__)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class BackupCoordinator:
    """Writes prompts, snapshotting the previous version first when asked."""

    def __init__(self, storage: StorageBackend, clock: Callable[[], datetime.datetime] = utc_now):
        self._storage = storage
        self._clock = clock

    async def backup_then_write(self, name: str, new_content: bytes, do_backup: bool = True) -> BackupOutcome:
        path = normalize_path(name, self._storage.root_path)
        outcome = BackupOutcome(name=name_from_path(path, self._storage.root_path) or "", path=path)

        if do_backup:
            previous = await self._read_previous(path)
            if previous is not None:
                await self._archive(outcome, previous)

        await self._storage.write_file(path, new_content, WriteMode.OVERWRITE)
        return outcome

    async def _archive(self, outcome: BackupOutcome, previous: bytes) -> None:
        backup_path = archive_path(outcome.name, self._storage.root_path, format_timestamp(self._clock()))
        try:
            await self._storage.write_file(backup_path, previous, WriteMode.CREATE_ONLY)
        except PromptMCPError as e:
            logger.warning(f"Could not archive previous version of {outcome.path} to {backup_path}: {e}")
            outcome.backup_error = e.user_message
            outcome.backup_error_code = e.error_code
            return
        logger.info(f"Archived previous version of {outcome.path} to {backup_path}")
        outcome.backed_up = True
        outcome.backup_path = backup_path

    async def _read_previous(self, path: str) -> bytes | None:
        """Read the current version; any failure means there is nothing to back up."""
        try:
            return await self._storage.read_file(path)
        except PromptMCPError as e:
            logger.debug(f"No previous version of {path} to back up: {e}")
            return None
