"""Pydantic models for the Prompt MCP system.

This module contains the data returned by the prompt library and the MCP
tools: prompt listings, search results, backup and export outcomes.
"""

from typing import Any

from pydantic import BaseModel

# === Core Operation Models ===


class OperationStatus(BaseModel):
    """Generic status for mutating operations."""

    success: bool
    message: str
    details: dict[str, Any] | None = None  # For extra info, e.g., stored path
    backup_created: str | None = None  # Path of the archive snapshot, if one was taken


# === Prompt Models ===


class PromptInfo(BaseModel):
    """A stored prompt as shown in listings."""

    name: str  # Short name, e.g. "sql_expert" or "team/sql_expert"
    description: str
    path: str
    summary: str | None = None  # First non-blank line of the content


class PromptList(BaseModel):
    """All prompts currently stored under the root."""

    prompts: list[PromptInfo]
    total: int
    provider: str
    skipped: list[str] = []  # Prompts whose content could not be read


class PromptContent(BaseModel):
    """Full content of a single prompt."""

    name: str
    path: str
    content: str


# === Backup Models ===


class BackupOutcome(BaseModel):
    """Result of a save with optional backup of the previous version."""

    name: str
    path: str
    backed_up: bool = False
    backup_path: str | None = None
    backup_error: str | None = None  # Why the snapshot could not be written
    backup_error_code: str | None = None


# === Search Models ===


class SearchMatch(BaseModel):
    """A prompt whose content contains the query."""

    name: str
    snippet: str


class NameSearchResult(BaseModel):
    """Prompts whose name contains the query."""

    query: str
    matches: list[str]
    total_matches: int


class ContentSearchResult(BaseModel):
    """Prompts whose content contains the query."""

    query: str
    matches: list[SearchMatch]
    total_matches: int
    skipped: list[str] = []


# === Export Models ===


class ExportOutcome(BaseModel):
    """Result of bundling every prompt into one zip archive.

    ``reference`` is a download URL, a ``file://`` URI, or ``""`` when there
    was nothing to export.
    """

    reference: str = ""
    archive_path: str | None = None
    document_count: int = 0
    skipped: list[str] = []

    @property
    def is_empty(self) -> bool:
        return not self.reference


class ExportResult(BaseModel):
    """Export outcome as returned to the agent."""

    success: bool
    message: str
    reference: str = ""  # Download URL or file:// URI; empty when nothing was exported
    archive_path: str | None = None
    document_count: int = 0
    skipped: list[str] = []
