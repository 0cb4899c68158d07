"""Task execution endpoints.

Endpoints:
- POST /api/v1/tasks/run

Mirrors the run_codex_task MCP tool for callers that speak plain HTTP.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from codex_gateway.models import RunTaskRequest, TaskResult
from codex_gateway.services import codex_tool
from codex_gateway.services.task_runner import ProcessSpawnError


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/run", response_model=TaskResult)
async def run_task(payload: RunTaskRequest) -> TaskResult:
    """Run one Codex task and return its structured report."""
    try:
        return await codex_tool.run_task(payload.taskId, payload.codexPrompt)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ProcessSpawnError as e:
        logger.error("[/tasks/run] %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
