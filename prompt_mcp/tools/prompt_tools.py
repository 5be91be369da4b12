"""Prompt Management Tools.

This module contains MCP tools for managing stored prompts:
- save_prompt: Create or replace a prompt, archiving the previous version
- get_prompt: Read a prompt's full content
- list_prompts: List all stored prompts with their summaries
- delete_prompt: Delete a prompt
"""

from mcp.server import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from ..exceptions import PromptMCPError
from ..exceptions import ValidationError
from ..helpers import validate_content
from ..helpers import validate_prompt_name
from ..library import PromptLibrary
from ..logger_config import ErrorCategory
from ..logger_config import log_mcp_call
from ..logger_config import log_tool_failure
from ..models import OperationStatus
from ..models import PromptContent
from ..models import PromptList


def register_prompt_tools(mcp_server: FastMCP, library: PromptLibrary) -> None:
    """Register all prompt management tools with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def save_prompt(name: str, content: str, backup: bool = True) -> OperationStatus:
        """Save a prompt to cloud storage under a short name.

        The prompt is stored as ``{root}/{name}.md``. When ``backup`` is true and
        a prompt with this name already exists, its previous content is first
        copied to ``{root}/_archive/{name}_{timestamp}.md``.

        Parameters:
            name (str): Short prompt name without extension (e.g. "sql_expert").
                Sub-folders are allowed ("team/sql_expert").
            content (str): Full prompt text (Markdown)
            backup (bool): Archive the previous version before overwriting (default: True)

        Returns:
            OperationStatus: success flag, message, stored path in ``details``
            and the archive path in ``backup_created`` when a backup was taken.

        Example Usage:
            ```json
            {
                "name": "save_prompt",
                "arguments": {
                    "name": "sql_expert",
                    "content": "# SQL Expert\\nYou are an expert in SQL..."
                }
            }
            ```

        Example Response:
            ```json
            {
                "success": true,
                "message": "Prompt 'sql_expert' saved",
                "details": {"path": "/Prompts/sql_expert.md"},
                "backup_created": "/Prompts/_archive/sql_expert_2024-01-15T10-30-00.md"
            }
            ```
        """
        for field, value, (is_valid, error) in (
            ("name", name, validate_prompt_name(name)),
            ("content", content, validate_content(content)),
        ):
            if not is_valid:
                message = _reject("save_prompt", ValidationError(error, field=field, value=value))
                return OperationStatus(success=False, message=message)

        try:
            outcome = await library.save_prompt(name, content, backup=backup)
        except PromptMCPError as e:
            message = log_tool_failure("save_prompt", e, {"prompt_name": name})
            return OperationStatus(success=False, message=f"Error saving prompt '{name}': {message}")

        message = f"Prompt '{outcome.name}' saved"
        details = {"path": outcome.path}
        if outcome.backed_up:
            message += f" (previous version archived to {outcome.backup_path})"
        elif outcome.backup_error:
            message += f", but the previous version could not be archived: {outcome.backup_error}"
            details["backup_error"] = outcome.backup_error_code
        return OperationStatus(
            success=True,
            message=message,
            details=details,
            backup_created=outcome.backup_path,
        )

    @mcp_server.tool()
    @log_mcp_call
    async def get_prompt(name: str) -> PromptContent:
        """Retrieve the full content of a stored prompt.

        Parameters:
            name (str): Short prompt name, as returned by ``list_prompts``

        Returns:
            PromptContent: ``name``, stored ``path`` and the full ``content``.

        Raises an error if the prompt does not exist or cannot be read.

        Example Usage:
            ```json
            {
                "name": "get_prompt",
                "arguments": {"name": "sql_expert"}
            }
            ```
        """
        is_valid, error = validate_prompt_name(name)
        if not is_valid:
            raise ToolError(_reject("get_prompt", ValidationError(error, field="name", value=name)))

        try:
            return await library.get_prompt(name)
        except PromptMCPError as e:
            raise ToolError(log_tool_failure("get_prompt", e, {"prompt_name": name})) from e

    @mcp_server.tool()
    @log_mcp_call
    async def list_prompts(include_summary: bool = True) -> PromptList:
        """List all prompts stored under the configured root.

        Archived versions (``_archive``) and exports (``_export``) are never listed.

        Parameters:
            include_summary (bool): Read each prompt to include its first line as
                a summary (default: True). Prompts that cannot be read are left
                out and named in ``skipped``.

        Returns:
            PromptList: ``prompts`` (name, description, path, summary), ``total``,
            the storage ``provider`` and any ``skipped`` prompt names.

        Example Response:
            ```json
            {
                "prompts": [
                    {
                        "name": "sql_expert",
                        "description": "Stored in Dropbox: /Prompts/sql_expert.md",
                        "path": "/Prompts/sql_expert.md",
                        "summary": "SQL Expert"
                    }
                ],
                "total": 1,
                "provider": "dropbox",
                "skipped": []
            }
            ```
        """
        try:
            return await library.list_prompts(include_summary=include_summary)
        except PromptMCPError as e:
            raise ToolError(log_tool_failure("list_prompts", e)) from e

    @mcp_server.tool()
    @log_mcp_call
    async def delete_prompt(name: str) -> OperationStatus:
        """Delete a stored prompt. Archived versions are kept.

        Parameters:
            name (str): Short prompt name to delete

        Returns:
            OperationStatus: success flag and message; ``details.path`` holds the
            deleted path.
        """
        is_valid, error = validate_prompt_name(name)
        if not is_valid:
            message = _reject("delete_prompt", ValidationError(error, field="name", value=name))
            return OperationStatus(success=False, message=message)

        try:
            path = await library.delete_prompt(name)
        except PromptMCPError as e:
            message = log_tool_failure("delete_prompt", e, {"prompt_name": name})
            return OperationStatus(success=False, message=f"Error deleting prompt '{name}': {message}")

        return OperationStatus(success=True, message=f"Prompt '{name}' deleted", details={"path": path})


def _reject(operation: str, error: ValidationError) -> str:
    """Log rejected tool input and return the message for the agent."""
    return log_tool_failure(operation, error, {"field": error.field}, category=ErrorCategory.WARNING)
