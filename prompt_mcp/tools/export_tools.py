"""Prompt Export Tools.

- export_prompts: Bundle every stored prompt into one zip archive
"""

from mcp.server import FastMCP

from ..exceptions import PromptMCPError
from ..library import PromptLibrary
from ..logger_config import log_mcp_call
from ..logger_config import log_tool_failure
from ..models import ExportResult


def register_export_tools(mcp_server: FastMCP, library: PromptLibrary) -> None:
    """Register the export tool with the MCP server."""

    @mcp_server.tool()
    @log_mcp_call
    async def export_prompts() -> ExportResult:
        """Export all prompts as a single zip archive.

        The archive is stored at ``{root}/_export/prompts_backup_{timestamp}.zip``
        and contains one ``{name}.md`` entry per prompt. With Dropbox the result
        is a direct download link; with WebDAV a local copy is saved and its
        ``file://`` URI is returned.

        Returns:
            ExportResult: ``reference`` (download URL or file URI, empty when
            there are no prompts), ``archive_path``, ``document_count`` and
            ``skipped`` prompt names.

        Example Response:
            ```json
            {
                "success": true,
                "message": "Exported 2 prompts",
                "reference": "https://www.dropbox.com/s/abc/prompts_backup_2024-01-15T10-30-00.zip?dl=1",
                "archive_path": "/Prompts/_export/prompts_backup_2024-01-15T10-30-00.zip",
                "document_count": 2,
                "skipped": []
            }
            ```
        """
        try:
            outcome = await library.export_prompts()
        except PromptMCPError as e:
            return ExportResult(success=False, message=f"Error exporting prompts: {log_tool_failure('export_prompts', e)}")

        if outcome.is_empty:
            return ExportResult(success=True, message="No prompts to export", skipped=outcome.skipped)

        return ExportResult(
            success=True,
            message=f"Exported {outcome.document_count} prompts",
            reference=outcome.reference,
            archive_path=outcome.archive_path,
            document_count=outcome.document_count,
            skipped=outcome.skipped,
        )
