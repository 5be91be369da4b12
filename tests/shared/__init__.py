"""Shared testing utilities for the Prompt MCP project.

- fake_storage.py: in-memory ``StorageBackend`` used by component and tool tests
"""
