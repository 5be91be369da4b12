"""MCP Server for Prompt Management.

This module provides a FastMCP-based MCP server that stores, retrieves,
searches and exports prompts kept in the user's Dropbox or WebDAV storage.
Stored prompts are also served through the MCP prompts capability, so a
client can offer them directly to the user.
"""

import argparse
import json
import logging
import sys
from typing import Any

from mcp.server import FastMCP
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS
from mcp.types import ErrorData
from mcp.types import GetPromptResult
from mcp.types import Prompt as MCPPrompt
from mcp.types import PromptMessage
from mcp.types import TextContent
from starlette.requests import Request
from starlette.responses import Response

from .config import Settings
from .config import get_settings
from .exceptions import PromptMCPError
from .library import PromptLibrary
from .logger_config import log_tool_failure
from .metrics_config import METRICS_ENABLED
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import get_metrics_summary
from .storage import StorageBackend
from .storage import create_storage_backend
from .tools import register_export_tools
from .tools import register_prompt_tools
from .tools import register_search_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "PromptManagementTools"


class PromptMCPServer(FastMCP):
    """FastMCP server whose prompt list is the set of stored prompts."""

    def __init__(self, library: PromptLibrary, **kwargs: Any):
        self.library = library
        super().__init__(**kwargs)

    async def list_prompts(self) -> list[MCPPrompt]:
        documents = await self.library.documents()
        return [MCPPrompt(name=ref.name, description=self.library.describe(ref.path)) for ref in documents]

    async def get_prompt(self, name: str, arguments: dict[str, Any] | None = None) -> GetPromptResult:
        try:
            prompt = await self.library.get_prompt(name)
        except PromptMCPError as e:
            message = log_tool_failure("get_prompt", e, {"prompt_name": name})
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message=f"Prompt not found or error reading from storage: {message}")
            ) from e

        return GetPromptResult(
            description=self.library.describe(prompt.path),
            messages=[PromptMessage(role="user", content=TextContent(type="text", text=prompt.content))],
        )


def create_server(settings: Settings | None = None, storage: StorageBackend | None = None) -> PromptMCPServer:
    """Build the MCP server around one storage backend.

    Args:
        settings: Configuration; loaded from the environment when omitted
        storage: Backend to use; selected from the settings when omitted
    """
    settings = settings or get_settings()
    storage = storage or create_storage_backend(settings)
    library = PromptLibrary(storage, export_dir=settings.export_local_path)

    mcp_server = PromptMCPServer(library, name=SERVER_NAME, host=settings.sse_host, port=settings.sse_port)

    register_prompt_tools(mcp_server, library)
    register_search_tools(mcp_server, library)
    register_export_tools(mcp_server, library)
    _register_routes(mcp_server)
    return mcp_server


def _register_routes(mcp_server: FastMCP) -> None:
    @mcp_server.custom_route("/health", methods=["GET"], name="health")
    async def health_check(request: Request) -> Response:
        """Health check endpoint to verify server readiness."""
        return Response(status_code=200)

    @mcp_server.custom_route("/metrics", methods=["GET"], name="metrics")
    async def metrics_endpoint(request: Request) -> Response:
        """Prometheus metrics endpoint for monitoring MCP tool usage."""
        metrics_data, content_type = get_metrics_export()
        return Response(content=metrics_data, status_code=200, media_type=content_type)

    @mcp_server.custom_route("/metrics/summary", methods=["GET"], name="metrics_summary")
    async def metrics_summary_endpoint(request: Request) -> Response:
        """JSON summary of the metrics configuration."""
        return Response(
            content=json.dumps(get_metrics_summary(), indent=2),
            status_code=200,
            media_type="application/json",
        )


# --- Main Server Execution ---
def main():
    """Run the main entry point for the server with argument parsing."""
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Prompt MCP Server")
    parser.add_argument(
        "transport",
        choices=["sse", "stdio"],
        default="stdio",
        nargs="?",
        help="Transport: 'sse' for HTTP SSE or 'stdio' for standard I/O (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default=settings.sse_host,
        help=f"Host to bind to for SSE transport (default: {settings.sse_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.sse_port,
        help=f"Port to bind to for SSE transport (default: {settings.sse_port})",
    )
    args = parser.parse_args()

    # stdout carries the MCP stdio stream
    logging.basicConfig(
        stream=sys.stderr,
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ensure_metrics_initialized()
    mcp_server = create_server(settings)
    storage = mcp_server.library.storage
    logger.info(f"Prompt server starting with {storage.backend_type} storage rooted at {storage.root_path}")
    logger.info(f"Metrics: {'enabled' if METRICS_ENABLED else 'disabled'}")

    if args.transport == "stdio":
        logger.info("MCP server running with stdio transport. Waiting for client connection...")
        mcp_server.run(transport="stdio")
    else:
        logger.info(f"MCP server running with HTTP SSE transport on {args.host}:{args.port}")
        logger.info(f"SSE endpoint: http://{args.host}:{args.port}/sse")
        mcp_server.settings.host = args.host
        mcp_server.settings.port = args.port
        mcp_server.run(transport="sse")


if __name__ == "__main__":
    main()
