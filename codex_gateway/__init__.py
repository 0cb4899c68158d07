"""Codex gateway: run Codex CLI tasks behind an MCP/HTTP endpoint."""

__version__ = "1.0.0"
