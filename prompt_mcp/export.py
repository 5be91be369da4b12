"""Export every stored prompt as one zip archive.

The archive is written to ``{root}/_export/prompts_backup_{timestamp}.zip``.
When the backend can share files the result is a direct download link;
otherwise a copy is saved locally and a ``file://`` URI is returned.
"""

from __future__ import annotations

import datetime
import io
import logging
import tempfile
import zipfile
from collections.abc import Callable
from pathlib import Path
from urllib.parse import parse_qsl
from urllib.parse import urlencode
from urllib.parse import urlsplit
from urllib.parse import urlunsplit

from .backup import utc_now
from .catalog import list_documents
from .catalog import read_each
from .exceptions import StorageError
from .models import ExportOutcome
from .paths import PROMPT_EXTENSION
from .paths import export_path
from .paths import format_timestamp
from .storage.base import StorageBackend
from .storage.base import WriteMode

logger = logging.getLogger(__name__)

FALLBACK_EXPORT_DIR = Path(tempfile.gettempdir()) / "prompt-mcp-exports"


def build_archive(files: dict[str, bytes]) -> bytes:
    """Zip ``files`` (archive member name -> bytes) in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for member, content in files.items():
            archive.writestr(member, content)
    return buffer.getvalue()


def direct_download_url(url: str) -> str:
    """Rewrite a share link so that it downloads the file instead of previewing it."""
    parts = urlsplit(url)
    query = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != "dl"]
    query.append(("dl", "1"))
    return urlunsplit(parts._replace(query=urlencode(query)))


class ExportArchiver:
    """Bundles all live prompts and resolves a reference the caller can fetch."""

    def __init__(
        self,
        storage: StorageBackend,
        local_dir: Path | str | None = None,
        fallback_dir: Path | str = FALLBACK_EXPORT_DIR,
        clock: Callable[[], datetime.datetime] = utc_now,
    ):
        self._storage = storage
        self._local_dir = Path(local_dir).expanduser() if local_dir else None
        self._fallback_dir = Path(fallback_dir)
        self._clock = clock

    async def export(self) -> ExportOutcome:
        documents = await list_documents(self._storage)

        files: dict[str, bytes] = {}
        skipped: list[str] = []
        async for result in read_each(self._storage, documents):
            if result.ok:
                files[result.ref.name + PROMPT_EXTENSION] = result.content
            else:
                skipped.append(result.ref.name)

        if not files:
            logger.info("Nothing to export")
            return ExportOutcome(skipped=skipped)

        archive_bytes = build_archive(files)
        remote_path = export_path(self._storage.root_path, format_timestamp(self._clock()))
        await self._storage.write_file(remote_path, archive_bytes, WriteMode.OVERWRITE)
        logger.info(f"Exported {len(files)} prompts to {remote_path}")

        if self._storage.supports_shared_links:
            reference = direct_download_url(await self._storage.create_shared_link(remote_path))
        else:
            local_file = self._save_locally(Path(remote_path).name, archive_bytes)
            reference = local_file.resolve().as_uri()

        return ExportOutcome(
            reference=reference,
            archive_path=remote_path,
            document_count=len(files),
            skipped=skipped,
        )

    def _save_locally(self, filename: str, archive_bytes: bytes) -> Path:
        """Write the archive to the export folder, falling back to the temp folder."""
        candidates = [d for d in (self._local_dir, self._fallback_dir) if d is not None]
        last_error: OSError | None = None
        for directory in candidates:
            try:
                directory.mkdir(parents=True, exist_ok=True)
                target = directory / filename
                target.write_bytes(archive_bytes)
                return target
            except OSError as e:
                logger.warning(f"Cannot write export to {directory}: {e}")
                last_error = e
        raise StorageError(
            f"Cannot write export locally: {last_error}",
            path=filename,
            provider=self._storage.backend_type,
            user_message="The export archive was stored remotely but could not be saved to the local export folder.",
        ) from last_error
