"""Prompt MCP: store, search and export prompts in personal cloud storage."""

__version__ = "1.0.0"
