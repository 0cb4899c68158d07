"""Fold classified agent events into one immutable TaskReport."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .adapters import AgentAdapter, CodexAdapter

NO_MESSAGE_SUMMARY = "Codex run completed but no final agent summary message was found."


class TestsStatus(str, Enum):
    """Test outcome inferred from the commands the agent ran."""

    __test__ = False  # not a pytest class

    ALL_PASSED = "all_passed"
    SOME_FAILED = "some_failed"
    NOT_RUN = "not_run"


@dataclass(frozen=True)
class CommandRecord:
    command: str
    exit_code: Optional[int]


@dataclass(frozen=True)
class TaskReport:
    task_id: str
    summary: str
    files_changed: Tuple[str, ...]
    commands: Tuple[CommandRecord, ...]
    tests_status: TestsStatus
    raw_events_count: int


def infer_tests_status(commands: Iterable[CommandRecord]) -> TestsStatus:
    """Derive the test outcome from commands whose text mentions "test".

    The match is a plain case-insensitive substring, so "latest" or
    "testing-lib" count as test commands. A command with an unknown exit code
    never upgrades the outcome to all_passed.
    """
    test_commands = [c for c in commands if "test" in c.command.lower()]
    if not test_commands:
        return TestsStatus.NOT_RUN
    if any(c.exit_code is not None and c.exit_code != 0 for c in test_commands):
        return TestsStatus.SOME_FAILED
    if all(c.exit_code == 0 for c in test_commands):
        return TestsStatus.ALL_PASSED
    return TestsStatus.NOT_RUN


def build_summary(message: Optional[str], exit_code: Optional[int]) -> str:
    summary = message if message is not None else NO_MESSAGE_SUMMARY
    if exit_code is not None and exit_code != 0:
        summary += f" (codex exited with code {exit_code})"
    return summary


class ReportBuilder:
    """Per-invocation accumulator state, consumed once by build()."""

    def __init__(self, task_id: str, adapter: Optional[AgentAdapter] = None) -> None:
        self.task_id = task_id
        self._adapter = adapter or CodexAdapter()
        self._message: Optional[str] = None
        self._commands: List[CommandRecord] = []
        # dict keys: set semantics with a stable order
        self._files: Dict[str, None] = {}
        self._raw_events = 0
        self._built = False

    @property
    def raw_events_count(self) -> int:
        return self._raw_events

    def observe(self, record: Any) -> None:
        """Count one decoded record and fold it into the accumulators."""
        if self._built:
            raise RuntimeError("Report already built")
        self._raw_events += 1
        event = self._adapter.classify(record)
        if event is None:
            return
        if event.kind == "message":
            self._message = event.payload["text"]
        elif event.kind == "command":
            self._commands.append(
                CommandRecord(command=event.payload["command"], exit_code=event.payload["exit_code"])
            )
        elif event.kind == "file_change":
            self._files.setdefault(event.payload["path"], None)

    def observe_all(self, records: Iterable[Any]) -> None:
        for record in records:
            self.observe(record)

    def build(self, exit_code: Optional[int]) -> TaskReport:
        if self._built:
            raise RuntimeError("Report already built")
        self._built = True
        commands = tuple(self._commands)
        return TaskReport(
            task_id=self.task_id,
            summary=build_summary(self._message, exit_code),
            files_changed=tuple(self._files),
            commands=commands,
            tests_status=infer_tests_status(commands),
            raw_events_count=self._raw_events,
        )
