"""Storage Abstraction Layer for Prompt MCP.

Provides one interface over the remote stores prompts can live in:
- Dropbox: token based HTTP API, always lists recursively
- WebDAV: username/password, lists recursively only when configured

The backend is selected from the configured credentials.

Usage:
    from prompt_mcp.config import get_settings
    from prompt_mcp.storage import create_storage_backend

    storage = create_storage_backend(get_settings())
    content = await storage.read_file("/Prompts/sql_expert.md")
    await storage.write_file("/Prompts/sql_expert.md", b"# SQL Expert")
"""

from .base import StorageBackend
from .base import StorageEntry
from .base import WriteMode
from .factory import ProviderType
from .factory import create_storage_backend
from .factory import select_provider

__all__ = [
    "StorageBackend",
    "StorageEntry",
    "WriteMode",
    "ProviderType",
    "create_storage_backend",
    "select_provider",
]
