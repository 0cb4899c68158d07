import logging
import sys
from pathlib import Path


def setup_logging(level: str = "INFO"):
    # stdout is left to uvicorn; the agent's stderr is passed through next to ours
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    logs_dir = Path("logs")
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(logs_dir / "codex-gateway.log"), encoding="utf-8"))
    except OSError:
        pass
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )
