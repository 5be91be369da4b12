"""Tool category modules for the Prompt MCP system.

This package contains MCP tools organized by functional categories:
- prompt_tools: Prompt management (save, get, list, delete)
- search_tools: Name and content search
- export_tools: Zip export of every stored prompt
"""

from .export_tools import register_export_tools
from .prompt_tools import register_prompt_tools
from .search_tools import register_search_tools

__all__ = [
    "register_prompt_tools",
    "register_search_tools",
    "register_export_tools",
]
