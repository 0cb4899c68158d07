"""Main FastAPI application for the Codex gateway."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from codex_gateway import __version__
from codex_gateway.config import Settings, settings
from codex_gateway.logging_config import setup_logging
from codex_gateway.mcp_server import create_mcp_server
from codex_gateway.routers import health_router, tasks_router

# Configure logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app with the MCP endpoint mounted at /mcp."""
    cfg = app_settings or settings
    mcp = create_mcp_server(cfg)
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events."""
        logger.info("Codex gateway starting up...")
        logger.info("Server config: %s:%s", cfg.server.host, cfg.server.port)
        if cfg.server.allowed_hosts:
            logger.info("MCP allowed hosts: %s", cfg.server.allowed_hosts)
        logger.info(
            "Codex config: executable=%s workspace=%s",
            cfg.codex.executable,
            cfg.codex.resolve_workspace(),
        )
        async with mcp.session_manager.run():
            logger.info(
                "Codex MCP Server running on http://%s:%s/mcp", cfg.server.host, cfg.server.port
            )
            yield
        logger.info("Codex gateway shutting down...")

    app = FastAPI(
        title="Codex Gateway",
        description="Runs Codex CLI tasks and reports on them over MCP and HTTP",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> JSONResponse:
        """Root endpoint."""
        return JSONResponse(
            status_code=200,
            content={
                "service": "codex-gateway",
                "version": __version__,
                "mcp": "/mcp",
                "health": "/health",
                "docs": "/docs",
            },
        )

    app.include_router(health_router, tags=["health"])
    app.include_router(tasks_router, prefix="/api/v1/tasks", tags=["tasks"])

    # Mounted last: the MCP app serves /mcp and everything the routes above do not
    app.mount("/", mcp_app)
    return app


app = create_app()


def main() -> None:
    try:
        uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_config=None)
    except Exception:
        logger.exception("Server error")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
