"""WebDAV Storage Backend.

Implements the StorageBackend interface using plain WebDAV with HTTP Basic
authentication (Nextcloud, ownCloud, Jianguoyun, Apache mod_dav, ...).
Logical paths such as "/Prompts/sql_expert.md" are resolved against the
configured endpoint URL.
"""

from __future__ import annotations

import logging
import posixpath
import xml.etree.ElementTree as ET
from urllib.parse import quote
from urllib.parse import unquote
from urllib.parse import urlsplit

import httpx

from ..exceptions import AlreadyExistsError
from ..exceptions import PromptNotFoundError
from ..exceptions import StorageError
from ..paths import PROMPT_EXTENSION
from ..paths import normalize_root
from .base import StorageBackend
from .base import StorageEntry
from .base import WriteMode
from .http_client import build_http_client
from .http_client import raise_for_auth
from .http_client import send_request

logger = logging.getLogger(__name__)

PROVIDER = "webdav"

PROPFIND_BODY = b"""<?xml version="1.0" encoding="utf-8"?>
<d:propfind xmlns:d="DAV:">
  <d:prop>
    <d:resourcetype/>
    <d:getcontentlength/>
    <d:getlastmodified/>
  </d:prop>
</d:propfind>"""

DAV_NAMESPACES = {"d": "DAV:"}


class WebDAVStorageBackend(StorageBackend):
    """Storage backend using a WebDAV server.

    Args:
        url: WebDAV endpoint (e.g., "https://cloud.example.com/remote.php/dav/files/alice")
        username: Account name for Basic authentication
        password: Password or app token
        root_path: Folder holding the prompts, relative to the endpoint
        recursive: Descend into sub-folders when listing (top level only otherwise)
        client: Pre-built httpx client (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        root_path: str = "/",
        recursive: bool = False,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        proxy: str | None = None,
    ):
        if not url:
            raise ValueError("WebDAV URL required. Set WEBDAV_URL.")

        self._base_url = url.rstrip("/")
        self._base_path = unquote(urlsplit(self._base_url).path).rstrip("/")
        self._auth = httpx.BasicAuth(username, password)
        self._root = normalize_root(root_path)
        self._recursive = recursive
        self._client = client or build_http_client(timeout=timeout, proxy=proxy)

    @property
    def backend_type(self) -> str:
        return PROVIDER

    @property
    def root_path(self) -> str:
        return self._root

    @property
    def recursive(self) -> bool:
        return self._recursive

    def _url(self, path: str, collection: bool = False) -> str:
        """Convert a logical path to a full, percent-encoded WebDAV URL."""
        encoded = quote("/" + path.strip("/"))
        if collection and not encoded.endswith("/"):
            encoded += "/"
        return f"{self._base_url}{encoded}"

    def _logical_path(self, href: str) -> str:
        """Convert an href from a multistatus response back to a logical path."""
        href_path = unquote(urlsplit(href).path)
        if self._base_path and href_path.startswith(self._base_path):
            href_path = href_path[len(self._base_path) :]
        return "/" + href_path.strip("/")

    async def _request(self, method: str, path: str, collection: bool = False, **kwargs) -> httpx.Response:
        response = await send_request(
            self._client,
            PROVIDER,
            method,
            self._url(path, collection=collection),
            path=path,
            auth=self._auth,
            **kwargs,
        )
        raise_for_auth(response, PROVIDER, path)
        return response

    def _unexpected(self, action: str, path: str, response: httpx.Response) -> StorageError:
        return StorageError(
            f"Failed to {action} {path}: {response.status_code} {response.text[:200]}",
            path=path,
            provider=PROVIDER,
        )

    # === Listing ===

    async def _propfind(self, folder: str) -> list[tuple[str, bool]] | None:
        """Return ``(path, is_collection)`` for the children of ``folder``; None if it is missing."""
        response = await self._request(
            "PROPFIND",
            folder,
            collection=True,
            content=PROPFIND_BODY,
            headers={"Depth": "1", "Content-Type": "application/xml"},
        )
        if response.status_code == 404:
            return None
        if response.status_code != 207:
            raise self._unexpected("list", folder, response)

        try:
            root = ET.fromstring(response.content)
        except ET.ParseError as e:
            raise StorageError(f"Failed to parse PROPFIND response for {folder}: {e}", path=folder, provider=PROVIDER)

        children = []
        folder_key = folder.rstrip("/") or "/"
        for response_elem in root.findall(".//d:response", DAV_NAMESPACES):
            href_elem = response_elem.find("d:href", DAV_NAMESPACES)
            if href_elem is None or not href_elem.text:
                continue
            path = self._logical_path(href_elem.text)
            if path == folder_key:
                continue
            resourcetype = response_elem.find("d:propstat/d:prop/d:resourcetype", DAV_NAMESPACES)
            is_collection = resourcetype is not None and resourcetype.find("d:collection", DAV_NAMESPACES) is not None
            children.append((path, is_collection))
        return children

    async def list_entries(self) -> list[StorageEntry]:
        """List ``.md`` files under the root, descending only when recursive listing is enabled."""
        entries: list[StorageEntry] = []
        pending = [self._root]
        while pending:
            folder = pending.pop(0)
            children = await self._propfind(folder)
            if children is None:
                logger.info(f"WebDAV folder {folder} does not exist, skipping")
                continue
            for path, is_collection in children:
                if is_collection:
                    if self._recursive:
                        pending.append(path)
                    continue
                name = posixpath.basename(path)
                if name.endswith(PROMPT_EXTENSION):
                    entries.append(StorageEntry(name=name, path_display=path))
        return entries

    # === File Operations ===

    async def read_file(self, path: str) -> bytes:
        response = await self._request("GET", path)
        if response.status_code == 404:
            raise PromptNotFoundError(path, provider=PROVIDER)
        if response.status_code != 200:
            raise self._unexpected("download", path, response)
        return response.content

    async def write_file(self, path: str, content: bytes, mode: WriteMode = WriteMode.OVERWRITE) -> None:
        headers = {"Content-Type": "application/octet-stream"}
        if mode == WriteMode.CREATE_ONLY:
            # Not every server honours If-None-Match, so probe first as well
            probe = await self._request("HEAD", path)
            if probe.status_code == 200:
                raise AlreadyExistsError(path, provider=PROVIDER)
            headers["If-None-Match"] = "*"

        response = await self._request("PUT", path, content=content, headers=headers)
        if response.status_code == 409:
            # Parent collection missing
            await self._ensure_parents(path)
            response = await self._request("PUT", path, content=content, headers=headers)

        if response.status_code == 412:
            raise AlreadyExistsError(path, provider=PROVIDER)
        if response.status_code not in (200, 201, 204):
            raise self._unexpected("upload", path, response)
        logger.info(f"Uploaded {len(content)} bytes to WebDAV: {path}")

    async def _ensure_parents(self, path: str) -> None:
        """Create every missing collection above ``path`` with MKCOL."""
        segments = [segment for segment in posixpath.dirname(path).split("/") if segment]
        current = ""
        for segment in segments:
            current = f"{current}/{segment}"
            response = await self._request("MKCOL", current, collection=True)
            # 405: collection already exists
            if response.status_code not in (200, 201, 405):
                raise self._unexpected("create folder", current, response)

    async def delete_file(self, path: str) -> None:
        response = await self._request("DELETE", path)
        if response.status_code == 404:
            raise PromptNotFoundError(path, provider=PROVIDER)
        if response.status_code not in (200, 204):
            raise self._unexpected("delete", path, response)
        logger.info(f"Deleted WebDAV file: {path}")

    async def aclose(self) -> None:
        await self._client.aclose()
