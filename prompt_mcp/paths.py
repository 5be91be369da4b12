"""Path conventions for prompts stored under a remote root.

Live prompts:  ``{root}/{name}.md``
Backups:       ``{root}/_archive/{name}_{timestamp}.md``
Exports:       ``{root}/_export/prompts_backup_{timestamp}.zip``
"""

from __future__ import annotations

import datetime
import posixpath

PROMPT_EXTENSION = ".md"
ARCHIVE_FOLDER = "_archive"
EXPORT_FOLDER = "_export"
RESERVED_FOLDERS = (ARCHIVE_FOLDER, EXPORT_FOLDER)
EXPORT_PREFIX = "prompts_backup_"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


def normalize_root(root: str | None) -> str:
    """Return the root with one leading slash and no trailing slash ("/" for the bare root)."""
    cleaned = (root or "").strip().strip("/")
    if not cleaned:
        return "/"
    return "/" + cleaned


def strip_extension(name: str) -> str:
    """Remove a single trailing ``.md`` from a name, if present."""
    if name.endswith(PROMPT_EXTENSION):
        return name[: -len(PROMPT_EXTENSION)]
    return name


def normalize_path(name: str, root: str | None = "/") -> str:
    """Map a short prompt name to its canonical absolute path.

    Accepts any string. Applying it to its own output yields the same path.
    """
    root = normalize_root(root)
    clean = strip_extension(name.strip())
    clean = "/" + clean.lstrip("/")
    if root != "/" and not clean.startswith(root + "/"):
        clean = posixpath.join(root, clean.lstrip("/"))
    return clean + PROMPT_EXTENSION


def relative_to_root(path: str, root: str | None = "/") -> str | None:
    """Return ``path`` relative to ``root`` (no leading slash), or None when outside it.

    The comparison is case-insensitive because Dropbox paths are.
    """
    root = normalize_root(root)
    path = "/" + path.strip().lstrip("/")
    if root == "/":
        return path.lstrip("/")
    if not path.lower().startswith(root.lower() + "/"):
        return None
    return path[len(root) + 1 :]


def name_from_path(path: str, root: str | None = "/") -> str | None:
    """Derive the short prompt name from a stored path (inverse of ``normalize_path``)."""
    relative = relative_to_root(path, root)
    if not relative or not relative.endswith(PROMPT_EXTENSION):
        return None
    return strip_extension(relative)


def is_reserved_path(path: str, root: str | None = "/") -> bool:
    """True when the path lives in the archive or export namespace under root."""
    relative = relative_to_root(path, root)
    if relative is None:
        return False
    first_segment = relative.split("/", 1)[0]
    return first_segment in RESERVED_FOLDERS


def format_timestamp(moment: datetime.datetime) -> str:
    """Filesystem-safe ISO-like timestamp with second resolution."""
    return moment.strftime(TIMESTAMP_FORMAT)


def archive_path(name: str, root: str | None, timestamp: str) -> str:
    """Path of the backup snapshot for ``name`` taken at ``timestamp``."""
    root = normalize_root(root)
    clean = strip_extension(name.strip()).strip("/")
    return posixpath.join(root, ARCHIVE_FOLDER, f"{clean}_{timestamp}{PROMPT_EXTENSION}")


def export_path(root: str | None, timestamp: str) -> str:
    """Path of the export archive created at ``timestamp``."""
    root = normalize_root(root)
    return posixpath.join(root, EXPORT_FOLDER, f"{EXPORT_PREFIX}{timestamp}.zip")
