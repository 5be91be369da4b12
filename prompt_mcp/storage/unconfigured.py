"""Placeholder backend used when no storage credentials are configured.

Listing degrades to an empty result so discovery calls keep working;
every other operation raises NoProviderConfiguredError.
"""

from __future__ import annotations

from ..exceptions import NoProviderConfiguredError
from ..paths import normalize_root
from .base import StorageBackend
from .base import StorageEntry
from .base import WriteMode


class UnconfiguredStorageBackend(StorageBackend):
    """Storage backend that has nowhere to store anything."""

    def __init__(self, root_path: str = "/"):
        self._root = normalize_root(root_path)

    @property
    def backend_type(self) -> str:
        return "none"

    @property
    def root_path(self) -> str:
        return self._root

    async def list_entries(self) -> list[StorageEntry]:
        return []

    async def read_file(self, path: str) -> bytes:
        raise NoProviderConfiguredError(details={"path": path})

    async def write_file(self, path: str, content: bytes, mode: WriteMode = WriteMode.OVERWRITE) -> None:
        raise NoProviderConfiguredError(details={"path": path})

    async def delete_file(self, path: str) -> None:
        raise NoProviderConfiguredError(details={"path": path})

    async def create_shared_link(self, path: str) -> str:
        raise NoProviderConfiguredError(details={"path": path})
