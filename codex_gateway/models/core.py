"""Core models for the gateway's tool and API contracts."""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Outcome(str, Enum):
    """Caller-facing classification derived from the tests status."""
    SUCCESS = "success"
    FAILED = "failed"
    UNKNOWN = "unknown"


class CommandSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    command: str
    exit_code: Optional[int] = None


class RunTaskRequest(BaseModel):
    """Input of the run_codex_task operation."""

    model_config = ConfigDict(extra="forbid")

    taskId: str = Field(min_length=1, description="Task identifier from your plan (e.g. 'task-3').")
    codexPrompt: str = Field(
        min_length=1,
        description=(
            "Full natural-language instructions for Codex, including acceptance "
            "criteria and which tests/commands to run."
        ),
    )


class TaskResult(BaseModel):
    """Structured result of one Codex task run.

    Example:
        ```json
        {
            "taskId": "task-3",
            "outcome": "success",
            "summary": "Added test.",
            "filesChanged": ["tests/a.test.ts"],
            "testsStatus": "all_passed",
            "commands": [{"command": "npm test", "exit_code": 0}]
        }
        ```
    """

    model_config = ConfigDict(extra="forbid")

    taskId: str
    outcome: Outcome
    summary: str
    filesChanged: List[str] = Field(default_factory=list)
    testsStatus: Literal["all_passed", "some_failed", "not_run"]
    commands: List[CommandSummary] = Field(default_factory=list)
