"""Storage Backend Factory.

Selects the storage backend from the credentials present in the settings:
- WebDAV: when WEBDAV_URL, WEBDAV_USERNAME and WEBDAV_PASSWORD are set
- Dropbox: when DROPBOX_ACCESS_TOKEN or DROPBOX_REFRESH_TOKEN is set
- Unconfigured: otherwise (listing is empty, everything else fails)

The server builds exactly one backend at startup and hands it to every
component; there is no module-level instance.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from ..config import Settings
    from .base import StorageBackend

logger = logging.getLogger(__name__)


class ProviderType(Enum):
    """Available storage providers."""

    DROPBOX = "dropbox"
    WEBDAV = "webdav"
    NONE = "none"


def select_provider(settings: Settings) -> ProviderType:
    """Decide which provider the credentials in ``settings`` select.

    Simple detection logic:
    1. STORAGE_PROVIDER (explicit override: "dropbox", "webdav" or "none")
    2. WebDAV credential bundle present -> WebDAV
    3. Dropbox token or refresh token present -> Dropbox
    4. Default -> None
    """
    explicit = settings.storage_provider
    if explicit == "dropbox":
        return ProviderType.DROPBOX
    elif explicit == "webdav":
        return ProviderType.WEBDAV
    elif explicit == "none":
        return ProviderType.NONE

    if settings.webdav_configured:
        return ProviderType.WEBDAV
    if settings.dropbox_configured:
        return ProviderType.DROPBOX
    return ProviderType.NONE


def create_storage_backend(
    settings: Settings,
    provider: ProviderType | None = None,
    client: httpx.AsyncClient | None = None,
) -> StorageBackend:
    """Create a storage backend instance.

    Args:
        settings: Credentials, root path and HTTP options
        provider: Explicit provider, or None to select from the credentials
        client: Optional pre-built httpx client shared with the backend

    Returns:
        Configured StorageBackend instance
    """
    if provider is None:
        provider = select_provider(settings)

    if provider == ProviderType.WEBDAV:
        from .webdav import WebDAVStorageBackend

        backend = WebDAVStorageBackend(
            url=settings.webdav_url or "",
            username=settings.webdav_username or "",
            password=settings.webdav_password or "",
            root_path=settings.prompts_root_path,
            recursive=settings.webdav_recursive,
            client=client,
            timeout=settings.request_timeout,
            proxy=settings.storage_proxy,
        )
    elif provider == ProviderType.DROPBOX:
        from .dropbox import DropboxStorageBackend

        backend = DropboxStorageBackend(
            access_token=settings.dropbox_access_token,
            root_path=settings.prompts_root_path,
            refresh_token=settings.dropbox_refresh_token,
            app_key=settings.dropbox_app_key,
            app_secret=settings.dropbox_app_secret,
            client=client,
            timeout=settings.request_timeout,
            proxy=settings.storage_proxy,
        )
    else:
        from .unconfigured import UnconfiguredStorageBackend

        logger.warning("No storage credentials configured; prompt operations will fail until they are set")
        backend = UnconfiguredStorageBackend(root_path=settings.prompts_root_path)

    logger.info(f"Using {backend.backend_type} storage rooted at {backend.root_path}")
    return backend


def get_storage_info(storage: StorageBackend, settings: Settings) -> dict:
    """Get information about the current storage configuration.

    Returns:
        Dict with storage backend info for debugging/monitoring
    """
    return {
        "backend_type": storage.backend_type,
        "detected_type": select_provider(settings).value,
        "root_path": storage.root_path,
        "supports_shared_links": storage.supports_shared_links,
        "storage_provider_env": settings.storage_provider,
    }
