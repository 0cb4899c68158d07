"""AgentAdapter base contract for building invocations and classifying output.

Adapters keep agent-specific argument conventions and event shapes out of the
task runner, so the runner only deals with process lifecycle and framing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class StreamEvent:
    kind: str  # 'message' | 'command' | 'file_change'
    payload: Dict[str, Any]


class AgentAdapter:
    """Interface for agent adapters."""

    name: str = "base"

    def build_args(self, prompt: str, task_id: str) -> List[str]:
        """Return the arguments passed after the agent executable."""
        return [prompt]

    def classify(self, record: Any) -> Optional[StreamEvent]:
        """Map one decoded output record to an event, or None when it is not recognised."""
        return None
