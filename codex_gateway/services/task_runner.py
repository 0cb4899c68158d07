"""Run one task through the agent CLI and report on it.

Each call to TaskRunner.run() spawns its own `codex exec --json` process with
asyncio.create_subprocess_exec, streams stdout through a JsonLineParser into a
ReportBuilder, and resolves once the process has exited. stderr is inherited
so the agent's live logs land next to the gateway's own. A non-zero exit is
reported inside the TaskReport; only a failure to start the process raises.

Calls share no mutable state and may run concurrently on the same loop.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shlex
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from codex_gateway.config import Settings, get_settings
from codex_gateway.services.adapters import AgentAdapter, CodexAdapter
from codex_gateway.services.event_stream import JsonLineParser
from codex_gateway.services.report import ReportBuilder, TaskReport


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class ProcessSpawnError(RuntimeError):
    """The agent process could not be created."""

    def __init__(self, message: str, executable: str, cwd: str) -> None:
        super().__init__(message)
        self.executable = executable
        self.cwd = cwd


@dataclass(frozen=True)
class TaskInvocation:
    task_id: str
    prompt: str

    def __post_init__(self) -> None:
        if not self.task_id:
            raise ValueError("task_id must be a non-empty string")
        if not self.prompt:
            raise ValueError("prompt must be a non-empty string")


class RunState(str, Enum):
    SPAWNING = "spawning"
    STREAMING = "streaming"
    EXITED = "exited"
    FAILED = "failed"


_TRANSITIONS = {
    RunState.SPAWNING: {RunState.STREAMING, RunState.FAILED},
    RunState.STREAMING: {RunState.EXITED},
    RunState.EXITED: set(),
    RunState.FAILED: set(),
}


class _Lifecycle:
    """Single-direction process lifecycle for one invocation."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        self.state = RunState.SPAWNING

    def advance(self, new_state: RunState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid run state transition {self.state.value} -> {new_state.value} (task={self.task_id})"
            )
        logger.debug("[task %s] %s -> %s", self.task_id, self.state.value, new_state.value)
        self.state = new_state


class TaskRunner:
    """Spawn the agent for a task and build its report when it exits."""

    def __init__(
        self,
        adapter: Optional[AgentAdapter] = None,
        settings_provider: Callable[[], Settings] = get_settings,
    ) -> None:
        self._adapter = adapter or CodexAdapter()
        self._settings_provider = settings_provider

    def _build_command(self, invocation: TaskInvocation) -> List[str]:
        cfg = self._settings_provider().codex
        executable = shlex.split(cfg.executable) or ["codex"]
        return [*executable, *self._adapter.build_args(invocation.prompt, invocation.task_id)]

    def _resolve_cwd(self) -> Path:
        return self._settings_provider().codex.resolve_workspace()

    async def run(self, invocation: TaskInvocation) -> TaskReport:
        lifecycle = _Lifecycle(invocation.task_id)
        cmd = self._build_command(invocation)
        cwd = self._resolve_cwd()
        # Log everything but the prompt body
        logger.info(
            "[task %s] Starting agent: %s <prompt> (cwd=%s)",
            invocation.task_id,
            " ".join(shlex.quote(p) for p in cmd[:-1]),
            str(cwd),
        )
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=None,
                env=os.environ.copy(),
            )
        except OSError as e:
            lifecycle.advance(RunState.FAILED)
            logger.error("[task %s] Failed to start agent %s: %s", invocation.task_id, cmd[0], e)
            raise ProcessSpawnError(
                f"Failed to start agent '{cmd[0]}' in {cwd}: {e}", executable=cmd[0], cwd=str(cwd)
            ) from e

        lifecycle.advance(RunState.STREAMING)
        logger.debug("[task %s] Agent pid=%s", invocation.task_id, proc.pid)

        parser = JsonLineParser()
        builder = ReportBuilder(invocation.task_id, adapter=self._adapter)
        assert proc.stdout is not None
        while True:
            chunk = await proc.stdout.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            builder.observe_all(parser.feed(chunk))
        builder.observe_all(parser.close())

        returncode = await proc.wait()
        lifecycle.advance(RunState.EXITED)

        exit_code: Optional[int] = returncode
        if returncode is not None and returncode < 0:
            logger.warning("[task %s] Agent terminated by signal %s", invocation.task_id, -returncode)
            exit_code = None

        report = builder.build(exit_code)
        logger.info(
            "[task %s] Agent exited code=%s events=%s commands=%s files=%s tests=%s",
            invocation.task_id,
            exit_code,
            report.raw_events_count,
            len(report.commands),
            len(report.files_changed),
            report.tests_status.value,
        )
        return report


# Shared instance used by the MCP tool and REST routes
task_runner = TaskRunner()
