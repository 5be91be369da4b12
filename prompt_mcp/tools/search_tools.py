"""Prompt Search Tools.

- search_prompts: Find prompts whose name contains a query
- search_content: Find prompts whose content contains a query, with snippets
"""

from mcp.server import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from ..exceptions import PromptMCPError
from ..exceptions import ValidationError
from ..helpers import validate_search_query
from ..library import PromptLibrary
from ..logger_config import ErrorCategory
from ..logger_config import log_mcp_call
from ..logger_config import log_tool_failure
from ..models import ContentSearchResult
from ..models import NameSearchResult


def register_search_tools(mcp_server: FastMCP, library: PromptLibrary) -> None:
    """Register the search tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def search_prompts(query: str) -> NameSearchResult:
        """Search prompt names (case-insensitive substring match).

        Parameters:
            query (str): Text to look for in prompt names

        Returns:
            NameSearchResult: the ``query``, matching prompt names in storage
            order and ``total_matches``.

        Example Usage:
            ```json
            {
                "name": "search_prompts",
                "arguments": {"query": "sql"}
            }
            ```
        """
        is_valid, error = validate_search_query(query)
        if not is_valid:
            invalid = ValidationError(error, field="query", value=query)
            raise ToolError(log_tool_failure("search_prompts", invalid, category=ErrorCategory.WARNING))

        try:
            return await library.search_prompts(query)
        except PromptMCPError as e:
            raise ToolError(log_tool_failure("search_prompts", e, {"query": query})) from e

    @mcp_server.tool()
    @log_mcp_call
    async def search_content(query: str) -> ContentSearchResult:
        """Search the text of every prompt (case-insensitive).

        Each prompt is read in turn. For a match, the snippet shows up to 30
        characters before the first occurrence and 50 after it, with "..."
        where the text was cut. Prompts that cannot be read are skipped and
        named in ``skipped``.

        Parameters:
            query (str): Text to look for in prompt content

        Returns:
            ContentSearchResult: ``matches`` (name and snippet), ``total_matches``
            and ``skipped``.

        Example Response:
            ```json
            {
                "query": "token",
                "matches": [{"name": "api_helper", "snippet": "...send the auth token here..."}],
                "total_matches": 1,
                "skipped": []
            }
            ```
        """
        is_valid, error = validate_search_query(query)
        if not is_valid:
            invalid = ValidationError(error, field="query", value=query)
            raise ToolError(log_tool_failure("search_content", invalid, category=ErrorCategory.WARNING))

        try:
            return await library.search_content(query)
        except PromptMCPError as e:
            raise ToolError(log_tool_failure("search_content", e, {"query": query})) from e
