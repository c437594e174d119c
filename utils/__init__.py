"""Utility functions for the dashboard MCP server."""

from .json_handler import model_to_payload, read_storage_file, write_storage_file

__all__ = ["model_to_payload", "read_storage_file", "write_storage_file"]
