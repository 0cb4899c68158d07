"""Map TaskReports onto the run_codex_task result contract."""

from __future__ import annotations

import logging

from mcp.types import CallToolResult, TextContent

from codex_gateway.models import CommandSummary, Outcome, TaskResult
from codex_gateway.services.report import TaskReport, TestsStatus
from codex_gateway.services.task_runner import TaskInvocation, TaskRunner, task_runner

logger = logging.getLogger(__name__)

_OUTCOMES = {
    TestsStatus.SOME_FAILED: Outcome.FAILED,
    TestsStatus.ALL_PASSED: Outcome.SUCCESS,
    TestsStatus.NOT_RUN: Outcome.UNKNOWN,
}


def outcome_for(tests_status: TestsStatus) -> Outcome:
    return _OUTCOMES[TestsStatus(tests_status)]


def to_result(report: TaskReport) -> TaskResult:
    return TaskResult(
        taskId=report.task_id,
        outcome=outcome_for(report.tests_status),
        summary=report.summary,
        filesChanged=list(report.files_changed),
        testsStatus=report.tests_status.value,
        commands=[CommandSummary(command=c.command, exit_code=c.exit_code) for c in report.commands],
    )


def render_text(result: TaskResult) -> str:
    """Human-readable rendering of a result, built from the same fields."""
    files = ", ".join(result.filesChanged) or "(none)"
    return (
        f"Codex completed task {result.taskId} with outcome {result.outcome.value}.\n"
        f"Summary: {result.summary}\n"
        f"Files changed: {files}\n"
        f"Tests status: {result.testsStatus}"
    )


def to_call_tool_result(result: TaskResult) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=render_text(result))],
        structuredContent=result.model_dump(mode="json"),
    )


async def run_task(task_id: str, prompt: str, runner: TaskRunner | None = None) -> TaskResult:
    """Run one task and return its structured result.

    Raises ValueError for an empty task id or prompt and ProcessSpawnError when
    the agent cannot be started.
    """
    invocation = TaskInvocation(task_id=task_id, prompt=prompt)
    report = await (runner or task_runner).run(invocation)
    result = to_result(report)
    logger.info("[task %s] outcome=%s", result.taskId, result.outcome.value)
    return result
