"""Shared helper functions for the Prompt MCP system.

Input validation and text processing used by the library and the tools.
"""

import re

# Validation limits
MAX_PROMPT_NAME_LENGTH = 200
MAX_SEARCH_QUERY_LENGTH = 500
SUMMARY_MAX_LENGTH = 100

# Snippet window around a content match
SNIPPET_CHARS_BEFORE = 30
SNIPPET_CHARS_AFTER = 50
ELLIPSIS = "..."

_HEADING_MARKER = re.compile(r"^#+\s*")


# --- Input Validation Helpers ---


def validate_prompt_name(name: str) -> tuple[bool, str]:
    """Validate a prompt name supplied by the agent."""
    if not name or not name.strip():
        return False, "Prompt name cannot be empty"
    if len(name) > MAX_PROMPT_NAME_LENGTH:
        return False, f"Prompt name too long (max {MAX_PROMPT_NAME_LENGTH} characters)"
    if ".." in name.replace("\\", "/").split("/"):
        return False, "Prompt name cannot contain '..' path segments"
    return True, ""


def validate_content(content: str) -> tuple[bool, str]:
    """Validate prompt content for a save."""
    if content is None:
        return False, "Content cannot be None"
    if not isinstance(content, str):
        return False, "Content must be a string"
    if not content.strip():
        return False, "Content cannot be empty"
    return True, ""


def validate_search_query(query: str) -> tuple[bool, str]:
    """Validate a search query."""
    if not query or not query.strip():
        return False, "Search query cannot be empty"
    if len(query) > MAX_SEARCH_QUERY_LENGTH:
        return False, f"Search query too long (max {MAX_SEARCH_QUERY_LENGTH} characters)"
    return True, ""


# --- Text Processing ---


def summarize(content: str, max_length: int = SUMMARY_MAX_LENGTH) -> str | None:
    """Return the first non-blank line without heading markers, truncated."""
    for line in content.splitlines():
        stripped = _HEADING_MARKER.sub("", line.strip()).strip()
        if not stripped:
            continue
        if len(stripped) > max_length:
            return stripped[:max_length].rstrip() + ELLIPSIS
        return stripped
    return None


def extract_snippet(content: str, query: str) -> str | None:
    """Return a window of text around the first case-insensitive match of ``query``.

    Up to 30 characters precede the match and ``50 + len(query)`` follow its
    start; an ellipsis marks each side that was cut.
    """
    match = re.search(re.escape(query), content, re.IGNORECASE)
    if match is None:
        return None
    start = max(0, match.start() - SNIPPET_CHARS_BEFORE)
    end = min(len(content), match.end() + SNIPPET_CHARS_AFTER)
    snippet = content[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(content):
        snippet = snippet + ELLIPSIS
    return snippet


def decode_content(raw: bytes) -> str:
    """Decode stored bytes as UTF-8, replacing undecodable bytes."""
    return raw.decode("utf-8", errors="replace")
