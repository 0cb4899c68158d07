"""Agent adapters."""

from .base import AgentAdapter, StreamEvent
from .codex import CodexAdapter

__all__ = ["AgentAdapter", "CodexAdapter", "StreamEvent"]
