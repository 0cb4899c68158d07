"""Configuration management for the Codex gateway."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """HTTP listener configuration."""

    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = 3000
    # Host headers accepted on /mcp ("host:*" matches any port); empty accepts any host
    allowed_hosts: List[str] = Field(default_factory=list)


class CodexConfig(BaseModel):
    """Agent invocation configuration."""

    model_config = ConfigDict(extra="forbid")

    # Split shell-style, so a wrapper such as "npx codex" works too
    executable: str = "codex"
    workspace: Optional[str] = None

    def resolve_workspace(self) -> Path:
        """Return the configured workspace, or the current directory when unset."""
        if self.workspace:
            return Path(self.workspace)
        return Path(os.getcwd())


class Settings(BaseSettings):
    """Main settings class with YAML and environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    codex: CodexConfig = Field(default_factory=CodexConfig)
    log_level: str = "INFO"

    # Flat environment variables kept for compatibility with existing deployments
    port: Optional[int] = Field(default=None, validation_alias=AliasChoices("PORT"))
    codex_workspace: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("CODEX_WORKSPACE")
    )
    codex_bin: Optional[str] = Field(default=None, validation_alias=AliasChoices("CODEX_BIN"))

    def model_post_init(self, __context: Any) -> None:
        if self.port is not None:
            self.server.port = self.port
        if self.codex_workspace:
            self.codex.workspace = self.codex_workspace
        if self.codex_bin:
            self.codex.executable = self.codex_bin


def _config_path() -> Path:
    override = os.environ.get("CODEX_GATEWAY_CONFIG")
    if override:
        return Path(override)
    return Path("config") / "settings.yaml"


def load_settings() -> Settings:
    """Load settings from the YAML file (if any); environment variables override it."""
    config_path = _config_path()
    yaml_config: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            full_config = yaml.safe_load(f) or {}
        if isinstance(full_config, dict):
            yaml_config = full_config.get("codex_gateway", {}) or {}

    # pydantic-settings gives init kwargs precedence over env vars, so only
    # pass YAML sections the environment does not override.
    env_keys = {k.lower() for k in os.environ}
    for section in ("server", "codex"):
        values = yaml_config.get(section)
        if not isinstance(values, dict):
            continue
        yaml_config[section] = {
            key: value
            for key, value in values.items()
            if f"{section}__{key}".lower() not in env_keys
        }
    if "log_level" in env_keys:
        yaml_config.pop("log_level", None)

    return Settings(**yaml_config)


# Global settings instance
settings = load_settings()


def get_settings() -> Settings:
    return settings
