"""MCP tool registration modules, one per dashboard area."""
