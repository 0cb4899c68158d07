import os
from pathlib import Path

from codex_gateway.config import CodexConfig, Settings, load_settings


def test_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    s = load_settings()
    assert s.server.host == "127.0.0.1"
    assert s.server.port == 3000
    assert s.codex.executable == "codex"
    assert s.codex.workspace is None
    assert s.codex.resolve_workspace() == Path(os.getcwd())


def test_flat_environment_variables(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PORT", "8123")
    monkeypatch.setenv("CODEX_WORKSPACE", str(tmp_path / "repo"))
    monkeypatch.setenv("CODEX_BIN", "/opt/codex/bin/codex")
    s = load_settings()
    assert s.server.port == 8123
    assert s.codex.resolve_workspace() == tmp_path / "repo"
    assert s.codex.executable == "/opt/codex/bin/codex"


def test_yaml_file_with_env_override(monkeypatch, tmp_path: Path):
    cfg = tmp_path / "gateway.yaml"
    cfg.write_text(
        "codex_gateway:\n"
        "  server:\n"
        "    host: 0.0.0.0\n"
        "    port: 9000\n"
        "  codex:\n"
        "    executable: npx codex\n"
        "    workspace: /srv/repo\n"
        "  log_level: DEBUG\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CODEX_GATEWAY_CONFIG", str(cfg))
    monkeypatch.setenv("CODEX__EXECUTABLE", "codex-nightly")

    s = load_settings()

    assert s.server.host == "0.0.0.0"
    assert s.server.port == 9000
    assert s.codex.workspace == "/srv/repo"
    assert s.codex.executable == "codex-nightly"
    assert s.log_level == "DEBUG"


def test_flat_port_overrides_yaml(monkeypatch, tmp_path: Path):
    cfg = tmp_path / "gateway.yaml"
    cfg.write_text("codex_gateway:\n  server:\n    port: 9000\n", encoding="utf-8")
    monkeypatch.setenv("CODEX_GATEWAY_CONFIG", str(cfg))
    monkeypatch.setenv("PORT", "4000")
    assert load_settings().server.port == 4000


def test_resolve_workspace_uses_configured_path(tmp_path: Path):
    s = Settings(codex=CodexConfig(workspace=str(tmp_path)))
    assert s.codex.resolve_workspace() == tmp_path


def test_allowed_hosts_from_yaml(monkeypatch, tmp_path: Path):
    cfg = tmp_path / "gateway.yaml"
    cfg.write_text(
        "codex_gateway:\n"
        "  server:\n"
        "    allowed_hosts:\n"
        "      - gateway.internal:*\n"
        "      - abc123.ngrok-free.app\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("CODEX_GATEWAY_CONFIG", str(cfg))
    s = load_settings()
    assert s.server.allowed_hosts == ["gateway.internal:*", "abc123.ngrok-free.app"]
    assert Settings().server.allowed_hosts == []
