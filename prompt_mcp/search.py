"""Name and full-text search over stored prompts."""

from __future__ import annotations

import logging

from .catalog import list_documents
from .catalog import read_each
from .helpers import decode_content
from .helpers import extract_snippet
from .models import ContentSearchResult
from .models import NameSearchResult
from .models import SearchMatch
from .storage.base import StorageBackend

logger = logging.getLogger(__name__)


class SearchEngine:
    """Case-insensitive substring search, in listing order, without ranking."""

    def __init__(self, storage: StorageBackend):
        self._storage = storage

    async def search_by_name(self, query: str) -> NameSearchResult:
        needle = query.lower()
        matches = [ref.name for ref in await list_documents(self._storage) if needle in ref.name.lower()]
        return NameSearchResult(query=query, matches=matches, total_matches=len(matches))

    async def search_by_content(self, query: str) -> ContentSearchResult:
        """Read every prompt in turn and report a snippet around its first match.

        Prompts that cannot be read are left out of the matches and listed in
        ``skipped``; one bad prompt never fails the search.
        """
        documents = await list_documents(self._storage)
        matches: list[SearchMatch] = []
        skipped: list[str] = []
        async for result in read_each(self._storage, documents):
            if not result.ok:
                skipped.append(result.ref.name)
                continue
            snippet = extract_snippet(decode_content(result.content), query)
            if snippet is not None:
                matches.append(SearchMatch(name=result.ref.name, snippet=snippet))

        logger.info(
            f"Content search for {query!r}: {len(matches)} matches in {len(documents)} prompts"
            f" ({len(skipped)} unreadable)"
        )
        return ContentSearchResult(query=query, matches=matches, total_matches=len(matches), skipped=skipped)
