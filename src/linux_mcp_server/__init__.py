"""MCP server exposing a remote Linux host over SSH."""

__version__ = "1.0.0"
