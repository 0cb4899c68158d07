"""MCP server exposing the run_codex_task tool over streamable HTTP."""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from mcp.types import CallToolResult
from pydantic import Field

from codex_gateway.config import Settings, get_settings
from codex_gateway.models import TaskResult
from codex_gateway.services import codex_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "codex-runner"


def transport_security_for(app_settings: Settings) -> TransportSecuritySettings:
    """Host-header policy for /mcp.

    Without configured hosts any Host is accepted, so tunnels and LAN callers
    reach the endpoint; FastMCP would otherwise limit a 127.0.0.1 server to
    localhost Host headers.
    """
    allowed = list(app_settings.server.allowed_hosts)
    if not allowed:
        return TransportSecuritySettings(enable_dns_rebinding_protection=False)
    return TransportSecuritySettings(enable_dns_rebinding_protection=True, allowed_hosts=allowed)


def create_mcp_server(app_settings: Optional[Settings] = None) -> FastMCP:
    """Build a FastMCP instance with the gateway's tools registered.

    The server is stateless and answers with plain JSON, one request per
    HTTP POST; its ASGI app serves the protocol at /mcp.
    """
    app_settings = app_settings or get_settings()
    mcp = FastMCP(
        SERVER_NAME,
        host=app_settings.server.host,
        port=app_settings.server.port,
        stateless_http=True,
        json_response=True,
        transport_security=transport_security_for(app_settings),
    )

    @mcp.tool(
        name="run_codex_task",
        title="Run a Codex task in the local repo",
        description=(
            "Executes a single implementation task via Codex CLI in the "
            "configured CODEX_WORKSPACE repository."
        ),
    )
    async def run_codex_task(
        taskId: Annotated[
            str, Field(min_length=1, description="Task identifier from your plan (e.g. 'task-3').")
        ],
        codexPrompt: Annotated[
            str,
            Field(
                min_length=1,
                description=(
                    "Full natural-language instructions for Codex, including acceptance "
                    "criteria and which tests/commands to run."
                ),
            ),
        ],
    ) -> Annotated[CallToolResult, TaskResult]:
        logger.info("[mcp] run_codex_task task=%s", taskId)
        result = await codex_tool.run_task(taskId, codexPrompt)
        return codex_tool.to_call_tool_result(result)

    return mcp
