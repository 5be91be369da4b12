"""Abstract Base Class for Storage Backends.

Defines the interface that every remote prompt store must implement.
Paths are absolute POSIX-style paths as produced by ``prompt_mcp.paths``.
"""

from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..exceptions import StorageError


class WriteMode(Enum):
    """How a write treats an existing file at the target path."""

    OVERWRITE = "overwrite"
    CREATE_ONLY = "create_only"


@dataclass(frozen=True)
class StorageEntry:
    """A file found while listing the prompts root."""

    name: str  # File name as reported by the backend, e.g. "sql_expert.md"
    path_display: str  # Absolute path, e.g. "/Prompts/sql_expert.md"


class StorageBackend(ABC):
    """Abstract base class for storage backends.

    Every operation is a network round trip; implementations keep no cache
    and never retry. Missing files raise ``PromptNotFoundError``.
    """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Return the backend type identifier (e.g., 'dropbox', 'webdav')."""
        pass

    @property
    @abstractmethod
    def root_path(self) -> str:
        """Return the normalized prompts root."""
        pass

    @property
    def supports_shared_links(self) -> bool:
        """Whether ``create_shared_link`` is available."""
        return False

    # === File Operations ===

    @abstractmethod
    async def list_entries(self) -> list[StorageEntry]:
        """List the ``.md`` files under the root.

        Returns:
            Entries in the order reported by the backend

        Raises:
            StorageError: If the listing request fails
        """
        pass

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Read file content.

        Args:
            path: Absolute path (e.g., "/Prompts/sql_expert.md")

        Returns:
            Raw file bytes

        Raises:
            PromptNotFoundError: If the file does not exist
        """
        pass

    @abstractmethod
    async def write_file(self, path: str, content: bytes, mode: WriteMode = WriteMode.OVERWRITE) -> None:
        """Write content to a file.

        Args:
            path: Absolute path
            content: Bytes to store
            mode: ``OVERWRITE`` replaces unconditionally, ``CREATE_ONLY``
                fails with ``AlreadyExistsError`` if the path exists
        """
        pass

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        """Delete a file.

        Raises:
            PromptNotFoundError: If the file does not exist
        """
        pass

    async def create_shared_link(self, path: str) -> str:
        """Create (or reuse) a shareable URL for ``path``."""
        raise StorageError(
            f"{self.backend_type} does not support shared links",
            path=path,
            provider=self.backend_type,
        )

    async def aclose(self) -> None:
        """Release network resources held by the backend."""
        return None
