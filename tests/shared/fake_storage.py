"""In-memory storage backend for tests.

Behaves like a remote backend without the network: listing returns every
``.md`` file under the root in insertion order, missing paths raise
``PromptNotFoundError`` and create-only writes refuse existing paths. Reads of
``unreadable`` paths and writes under ``unwritable_folders`` fail.
"""

from __future__ import annotations

from prompt_mcp.exceptions import AlreadyExistsError
from prompt_mcp.exceptions import NetworkUnavailableError
from prompt_mcp.exceptions import PromptNotFoundError
from prompt_mcp.exceptions import StorageError
from prompt_mcp.paths import PROMPT_EXTENSION
from prompt_mcp.paths import normalize_root
from prompt_mcp.storage.base import StorageBackend
from prompt_mcp.storage.base import StorageEntry
from prompt_mcp.storage.base import WriteMode


class InMemoryStorageBackend(StorageBackend):
    """Dictionary-backed storage keyed by absolute path."""

    def __init__(self, root_path: str = "/", files: dict[str, bytes | str] | None = None, shared_links: bool = False):
        self._root = normalize_root(root_path)
        self.files: dict[str, bytes] = {}
        self.unreadable: set[str] = set()
        self.unwritable_folders: set[str] = set()
        self.shared_links: dict[str, str] = {}
        self._shared_links_enabled = shared_links
        self.closed = False
        for path, content in (files or {}).items():
            self.files[path] = content.encode("utf-8") if isinstance(content, str) else content

    @property
    def backend_type(self) -> str:
        return "memory"

    @property
    def root_path(self) -> str:
        return self._root

    @property
    def supports_shared_links(self) -> bool:
        return self._shared_links_enabled

    def _under_root(self, path: str) -> bool:
        return self._root == "/" or path.lower().startswith(self._root.lower() + "/")

    async def list_entries(self) -> list[StorageEntry]:
        return [
            StorageEntry(name=path.rsplit("/", 1)[-1], path_display=path)
            for path in self.files
            if path.endswith(PROMPT_EXTENSION) and self._under_root(path)
        ]

    async def read_file(self, path: str) -> bytes:
        if path in self.unreadable:
            raise StorageError(f"Simulated read failure: {path}", path=path, provider=self.backend_type)
        if path not in self.files:
            raise PromptNotFoundError(path, provider=self.backend_type)
        return self.files[path]

    async def write_file(self, path: str, content: bytes, mode: WriteMode = WriteMode.OVERWRITE) -> None:
        if any(path.startswith(folder.rstrip("/") + "/") for folder in self.unwritable_folders):
            raise NetworkUnavailableError(f"Simulated write failure: {path}", path=path, provider=self.backend_type)
        if mode == WriteMode.CREATE_ONLY and path in self.files:
            raise AlreadyExistsError(path, provider=self.backend_type)
        self.files[path] = content

    async def delete_file(self, path: str) -> None:
        if path not in self.files:
            raise PromptNotFoundError(path, provider=self.backend_type)
        del self.files[path]

    async def create_shared_link(self, path: str) -> str:
        if not self._shared_links_enabled:
            return await super().create_shared_link(path)
        url = f"https://share.example.com/s/{len(self.shared_links)}{path}?dl=0"
        self.shared_links[path] = url
        return url

    async def aclose(self) -> None:
        self.closed = True

    def paths_under(self, folder: str) -> list[str]:
        prefix = folder.rstrip("/") + "/"
        return [path for path in self.files if path.startswith(prefix)]
