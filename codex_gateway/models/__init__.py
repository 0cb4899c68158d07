"""Models package for the Codex gateway."""

from .core import CommandSummary, Outcome, RunTaskRequest, TaskResult

__all__ = [
    "CommandSummary",
    "Outcome",
    "RunTaskRequest",
    "TaskResult",
]
