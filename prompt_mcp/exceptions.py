"""Exception hierarchy for the Prompt MCP system.

Every error carries a technical ``message`` for logs and a stable
``user_message`` that the tool layer hands back to the agent. The
``error_code`` identifies the failure category independently of which
storage provider produced it.
"""

from __future__ import annotations

from typing import Any


class PromptMCPError(Exception):
    """Base class for all Prompt MCP errors."""

    default_error_code = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.user_message = user_message or message

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for structured logging and tool responses."""
        return {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


class ValidationError(PromptMCPError):
    """Invalid tool input (empty name, empty query, ...)."""

    default_error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, value: Any = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if field is not None:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]
        super().__init__(message, details=details, **kwargs)
        self.field = field


class StorageError(PromptMCPError):
    """A storage backend operation failed."""

    default_error_code = "STORAGE_ERROR"

    def __init__(self, message: str, path: str | None = None, provider: str | None = None, **kwargs):
        details = kwargs.pop("details", None) or {}
        if path is not None:
            details["path"] = path
        if provider is not None:
            details["provider"] = provider
        kwargs.setdefault("user_message", "The storage provider reported an error. Please try again later.")
        super().__init__(message, details=details, **kwargs)
        self.path = path
        self.provider = provider


class PromptNotFoundError(StorageError):
    """The requested document does not exist remotely."""

    default_error_code = "NOT_FOUND"

    def __init__(self, path: str, provider: str | None = None, **kwargs):
        kwargs.setdefault("user_message", f"Prompt not found: {path}")
        super().__init__(f"File not found: {path}", path=path, provider=provider, **kwargs)


class AuthenticationError(StorageError):
    """Credentials were missing, invalid or expired."""

    default_error_code = "UNAUTHORIZED"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "The storage provider rejected the configured credentials. "
            "Check the access token or WebDAV password.",
        )
        super().__init__(message, **kwargs)


class PermissionDeniedError(StorageError):
    """Credentials are valid but lack access to the path."""

    default_error_code = "FORBIDDEN"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "The configured credentials are not allowed to access this location. "
            "Check the app permissions and the prompts root path.",
        )
        super().__init__(message, **kwargs)


class NetworkUnavailableError(StorageError):
    """The backend could not be reached (connection failure or timeout)."""

    default_error_code = "NETWORK_UNAVAILABLE"

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault(
            "user_message",
            "Could not reach the storage provider. Check the network connection and proxy settings.",
        )
        super().__init__(message, **kwargs)


class AlreadyExistsError(StorageError):
    """A create-only write hit an existing path."""

    default_error_code = "ALREADY_EXISTS"

    def __init__(self, path: str, provider: str | None = None, **kwargs):
        kwargs.setdefault("user_message", f"A file already exists at {path}")
        super().__init__(f"File already exists: {path}", path=path, provider=provider, **kwargs)


class NoProviderConfiguredError(StorageError):
    """Neither Dropbox nor WebDAV credentials are configured."""

    default_error_code = "NO_PROVIDER_CONFIGURED"

    def __init__(self, message: str = "No storage provider configured", **kwargs):
        kwargs.setdefault(
            "user_message",
            "No storage provider is configured. Set DROPBOX_ACCESS_TOKEN (or DROPBOX_REFRESH_TOKEN) "
            "or WEBDAV_URL, WEBDAV_USERNAME and WEBDAV_PASSWORD.",
        )
        super().__init__(message, **kwargs)
