"""HTTP plumbing shared by the remote storage backends."""

from __future__ import annotations

import logging

import httpx

from ..exceptions import AuthenticationError
from ..exceptions import NetworkUnavailableError
from ..exceptions import PermissionDeniedError

logger = logging.getLogger(__name__)


def build_http_client(timeout: float = 30.0, proxy: str | None = None) -> httpx.AsyncClient:
    """Create the AsyncClient a backend uses for its whole lifetime.

    Without an explicit proxy httpx still honours HTTPS_PROXY / HTTP_PROXY.
    """
    if proxy:
        return httpx.AsyncClient(timeout=timeout, proxy=proxy)
    return httpx.AsyncClient(timeout=timeout)


async def send_request(
    client: httpx.AsyncClient,
    provider: str,
    method: str,
    url: str,
    path: str | None = None,
    **kwargs,
) -> httpx.Response:
    """Send one request, mapping connection failures and timeouts to NetworkUnavailableError."""
    logger.debug(f"{provider}: {method} {url}")
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TransportError as e:
        raise NetworkUnavailableError(
            f"{provider} request {method} {url} failed: {e!r}",
            path=path,
            provider=provider,
        ) from e


def raise_for_auth(response: httpx.Response, provider: str, path: str | None = None) -> None:
    """Raise the credential errors shared by every backend (401 and 403)."""
    if response.status_code == 401:
        raise AuthenticationError(
            f"{provider} rejected the credentials (401): {response.text[:200]}",
            path=path,
            provider=provider,
        )
    if response.status_code == 403:
        raise PermissionDeniedError(
            f"{provider} denied access (403): {response.text[:200]}",
            path=path,
            provider=provider,
        )
