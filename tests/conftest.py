import json
import shlex
import sys
from pathlib import Path
from typing import Callable, Optional

import pytest

from codex_gateway.config import CodexConfig, Settings
from codex_gateway.services.task_runner import TaskRunner

FAKE_CODEX = Path(__file__).parent / "fixtures" / "fake_codex.py"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep host configuration out of the tests."""
    for name in ("PORT", "CODEX_WORKSPACE", "CODEX_BIN", "CODEX_GATEWAY_CONFIG", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "workspace"
    ws.mkdir()
    return ws


@pytest.fixture
def make_settings(workspace: Path) -> Callable[..., Settings]:
    def _make(executable: str, cwd: Optional[Path] = None) -> Settings:
        return Settings(codex=CodexConfig(executable=executable, workspace=str(cwd or workspace)))

    return _make


@pytest.fixture
def fake_codex(tmp_path: Path, make_settings):
    """Build a TaskRunner whose agent replays a scripted stdout.

    `output` is written verbatim to stdout in `chunk_size` pieces, `stderr` to
    stderr, then the process exits with `exit_code`. The argv and cwd the fake
    agent saw are recorded in `<tmp_path>/<name>_call.json`.
    """

    def _make(
        output: str,
        exit_code: int = 0,
        stderr: str = "",
        chunk_size: int = 0,
        name: str = "fake_codex",
    ) -> TaskRunner:
        spec_path = tmp_path / f"{name}_spec.json"
        spec_path.write_text(
            json.dumps(
                {
                    "output": output,
                    "exit_code": exit_code,
                    "stderr": stderr,
                    "chunk_size": chunk_size,
                    "record": str(tmp_path / f"{name}_call.json"),
                }
            ),
            encoding="utf-8",
        )
        executable = " ".join(shlex.quote(p) for p in (sys.executable, str(FAKE_CODEX), str(spec_path)))
        settings = make_settings(executable)
        return TaskRunner(settings_provider=lambda: settings)

    return _make


def jsonl(*events) -> str:
    return "".join(json.dumps(e) + "\n" for e in events)
