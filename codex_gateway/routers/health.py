"""Health endpoint: GET /health."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter

from codex_gateway import __version__
from codex_gateway.config import get_settings


router = APIRouter()


@router.get("/health")
async def get_health() -> Dict[str, Any]:
    cfg = get_settings().codex
    return {
        "status": "healthy",
        "service": "codex-gateway",
        "version": __version__,
        "workspace": str(cfg.resolve_workspace()),
        "codexExecutable": cfg.executable,
    }
