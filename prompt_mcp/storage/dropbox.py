"""Dropbox Storage Backend.

Implements the StorageBackend interface on top of the Dropbox HTTP API v2.
Authenticates with a long-lived access token, or with a refresh token plus
app key/secret from which short-lived access tokens are obtained.
"""

from __future__ import annotations

import json
import logging
import time

import httpx

from ..exceptions import AlreadyExistsError
from ..exceptions import AuthenticationError
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

PROVIDER = "dropbox"


class DropboxStorageBackend(StorageBackend):
    """Storage backend using Dropbox.

    Args:
        access_token: Dropbox access token. Optional when a refresh token is given.
        root_path: Folder holding the prompts (e.g., "/Prompts")
        refresh_token: OAuth refresh token for obtaining access tokens
        app_key: App key, required together with ``refresh_token``
        app_secret: App secret (omit for PKCE apps)
        client: Pre-built httpx client (tests pass one with a MockTransport)
    """

    API_URL = "https://api.dropboxapi.com/2"
    CONTENT_URL = "https://content.dropboxapi.com/2"
    TOKEN_URL = "https://api.dropboxapi.com/oauth2/token"

    def __init__(
        self,
        access_token: str | None = None,
        root_path: str = "/",
        refresh_token: str | None = None,
        app_key: str | None = None,
        app_secret: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        proxy: str | None = None,
    ):
        if not access_token and not refresh_token:
            raise ValueError("Dropbox requires an access token or a refresh token.")
        if refresh_token and not app_key:
            raise ValueError("Dropbox token refresh requires DROPBOX_APP_KEY.")

        self._access_token = access_token
        self._refresh_token = refresh_token
        self._app_key = app_key
        self._app_secret = app_secret
        self._root = normalize_root(root_path)
        self._client = client or build_http_client(timeout=timeout, proxy=proxy)
        # None: expiry unknown, use the token as is. 0.0: refresh before next call.
        self._expires_at: float | None = None if access_token else 0.0

    @property
    def backend_type(self) -> str:
        return PROVIDER

    @property
    def root_path(self) -> str:
        return self._root

    @property
    def supports_shared_links(self) -> bool:
        return True

    # === Authentication ===

    async def _ensure_token_fresh(self) -> str:
        if self._refresh_token and self._expires_at is not None and time.time() >= self._expires_at:
            await self._refresh_access_token()
        return self._access_token

    async def _refresh_access_token(self) -> None:
        data = {
            "grant_type": "refresh_token",
            "refresh_token": self._refresh_token,
            "client_id": self._app_key,
        }
        if self._app_secret:
            data["client_secret"] = self._app_secret

        response = await send_request(self._client, PROVIDER, "POST", self.TOKEN_URL, data=data)
        if response.status_code in (400, 401):
            raise AuthenticationError(
                f"Dropbox refused to refresh the access token: {response.text[:200]}",
                provider=PROVIDER,
            )
        self._raise_for_status(response)

        payload = response.json()
        self._access_token = payload["access_token"]
        self._expires_at = time.time() + float(payload.get("expires_in", 14400)) - 60
        logger.info("Refreshed Dropbox access token")

    # === Request Helpers ===

    async def _rpc(self, endpoint: str, payload: dict, path: str | None = None) -> httpx.Response:
        token = await self._ensure_token_fresh()
        return await send_request(
            self._client,
            PROVIDER,
            "POST",
            f"{self.API_URL}/{endpoint}",
            path=path,
            json=payload,
            headers={"Authorization": f"Bearer {token}"},
        )

    async def _content(
        self, endpoint: str, arg: dict, path: str, content: bytes | None = None
    ) -> httpx.Response:
        token = await self._ensure_token_fresh()
        headers = {
            "Authorization": f"Bearer {token}",
            # json.dumps escapes non-ASCII, which the header requires
            "Dropbox-API-Arg": json.dumps(arg),
        }
        if content is not None:
            headers["Content-Type"] = "application/octet-stream"
        return await send_request(
            self._client,
            PROVIDER,
            "POST",
            f"{self.CONTENT_URL}/{endpoint}",
            path=path,
            content=content,
            headers=headers,
        )

    @staticmethod
    def _error_summary(response: httpx.Response) -> str:
        try:
            return response.json().get("error_summary", "")
        except ValueError:
            return response.text[:200]

    def _raise_for_status(self, response: httpx.Response, path: str | None = None) -> None:
        if response.status_code == 200:
            return
        if response.status_code == 401 and "expired_access_token" in response.text and self._refresh_token:
            # Next call fetches a fresh token
            self._expires_at = 0.0
        raise_for_auth(response, PROVIDER, path)

        if response.status_code == 409:
            summary = self._error_summary(response)
            if "not_found" in summary:
                raise PromptNotFoundError(path or "", provider=PROVIDER, details={"error_summary": summary})
            if "conflict" in summary:
                raise AlreadyExistsError(path or "", provider=PROVIDER, details={"error_summary": summary})
            raise StorageError(f"Dropbox API error: {summary}", path=path, provider=PROVIDER)

        raise StorageError(
            f"Dropbox request failed: {response.status_code} {response.text[:200]}",
            path=path,
            provider=PROVIDER,
        )

    # === File Operations ===

    async def list_entries(self) -> list[StorageEntry]:
        """List every ``.md`` file below the root, always recursively."""
        list_path = "" if self._root == "/" else self._root
        response = await self._rpc("files/list_folder", {"path": list_path, "recursive": True}, path=self._root)
        if response.status_code == 409 and "not_found" in self._error_summary(response):
            logger.info(f"Dropbox folder {self._root} does not exist yet, returning empty listing")
            return []
        self._raise_for_status(response, self._root)

        entries: list[StorageEntry] = []
        payload = response.json()
        while True:
            for entry in payload.get("entries", []):
                if entry.get(".tag") != "file" or not entry.get("name", "").endswith(PROMPT_EXTENSION):
                    continue
                entries.append(
                    StorageEntry(
                        name=entry["name"],
                        path_display=entry.get("path_display") or entry["path_lower"],
                    )
                )
            if not payload.get("has_more"):
                break
            response = await self._rpc("files/list_folder/continue", {"cursor": payload["cursor"]}, path=self._root)
            self._raise_for_status(response, self._root)
            payload = response.json()

        return entries

    async def read_file(self, path: str) -> bytes:
        response = await self._content("files/download", {"path": path}, path)
        self._raise_for_status(response, path)
        return response.content

    async def write_file(self, path: str, content: bytes, mode: WriteMode = WriteMode.OVERWRITE) -> None:
        arg = {
            "path": path,
            "mode": "overwrite" if mode == WriteMode.OVERWRITE else "add",
            "autorename": False,
            "mute": True,
            "strict_conflict": False,
        }
        response = await self._content("files/upload", arg, path, content=content)
        self._raise_for_status(response, path)
        logger.info(f"Uploaded {len(content)} bytes to Dropbox: {path}")

    async def delete_file(self, path: str) -> None:
        response = await self._rpc("files/delete_v2", {"path": path}, path=path)
        self._raise_for_status(response, path)
        logger.info(f"Deleted Dropbox file: {path}")

    async def create_shared_link(self, path: str) -> str:
        """Create a shared link, or return the existing one for ``path``."""
        response = await self._rpc("sharing/create_shared_link_with_settings", {"path": path}, path=path)
        if response.status_code == 409 and "shared_link_already_exists" in self._error_summary(response):
            existing = response.json().get("error", {}).get("shared_link_already_exists", {})
            url = existing.get("metadata", {}).get("url")
            if url:
                return url
            return await self._existing_shared_link(path)
        self._raise_for_status(response, path)
        return response.json()["url"]

    async def _existing_shared_link(self, path: str) -> str:
        response = await self._rpc("sharing/list_shared_links", {"path": path, "direct_only": True}, path=path)
        self._raise_for_status(response, path)
        links = response.json().get("links", [])
        if not links:
            raise StorageError("Dropbox reported an existing shared link but listed none", path=path, provider=PROVIDER)
        return links[0]["url"]

    async def aclose(self) -> None:
        await self._client.aclose()
