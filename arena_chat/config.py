from __future__ import annotations

import os
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVER_URL = "https://code-arena.fly.dev"
DEFAULT_MODEL = "gpt-4"
DEFAULT_AVAILABLE_MODELS: tuple[str, ...] = (
    "gpt-4",
    "gpt-3.5-turbo",
    "claude-3-opus",
    "claude-3-sonnet",
    "deepseek-coder",
    "codestral",
)


class ServerApi(StrEnum):
    arena = "arena"
    openai = "openai"


class ServerConfig(BaseModel):
    url: str = DEFAULT_SERVER_URL
    api: ServerApi = ServerApi.arena
    api_key: str | None = None
    timeout_s: float = Field(default=60.0, gt=0)
    stream: bool = False
    """Only honored by the OpenAI-compatible client."""
    max_tokens: int | None = Field(default=None, ge=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)


class ContextConfig(BaseModel):
    max_chars: int = Field(default=10_000, gt=0)
    terminal_max_chars: int = Field(default=1000, gt=0)


class ModelsConfig(BaseModel):
    default: str = DEFAULT_MODEL
    available: list[str] = Field(default_factory=lambda: list(DEFAULT_AVAILABLE_MODELS))

    @model_validator(mode="after")
    def _validate_default_available(self) -> ModelsConfig:
        if not self.available:
            raise ValueError("models.available must not be empty")
        if self.default not in self.available:
            raise ValueError("models.default must be one of models.available")
        return self


class PromptConfig(BaseModel):
    path: Path | None = None
    template: str | None = None
    version: str | None = None
    variables: dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class TelemetryConfig(BaseModel):
    """OpenTelemetry tracing configuration; tracing is off without an endpoint."""

    endpoint: str | None = None
    env: str = "dev"


class ArenaSettings(BaseSettings):
    server: ServerConfig = Field(default_factory=ServerConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    model_config = SettingsConfigDict(
        env_prefix="ARENA_",
        env_nested_delimiter="__",
        extra="ignore",
    )


def _coerce_env_value(value: str) -> object:
    parsed = yaml.safe_load(value)
    return value if parsed is None else parsed


def _set_nested(mapping: dict[str, object], path: list[str], value: object) -> None:
    current = mapping
    for key in path[:-1]:
        existing = current.get(key)
        if not isinstance(existing, dict):
            existing = {}
            current[key] = existing
        current = existing
    current[path[-1]] = value


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    merged = dict(data)
    prefix = "ARENA_"
    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].lower().split("__")
        _set_nested(merged, path, _coerce_env_value(raw_value))
    return merged


def load_config(path: str | Path = "config/arena.yaml") -> ArenaSettings:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must contain a top-level mapping")

    raw = loaded.get("arena", loaded)
    if not isinstance(raw, dict):
        raise ValueError("arena config section must be a mapping")

    merged = _apply_env_overrides(raw)
    return ArenaSettings.model_validate(merged)


def load_settings(path: str | Path | None = None) -> ArenaSettings:
    """Load from ``path`` when given, else from defaults and ``ARENA_*`` env vars."""
    if path is None:
        return ArenaSettings()
    return load_config(path)


__all__ = [
    "DEFAULT_AVAILABLE_MODELS",
    "DEFAULT_MODEL",
    "DEFAULT_SERVER_URL",
    "ArenaSettings",
    "ContextConfig",
    "LoggingConfig",
    "ModelsConfig",
    "PromptConfig",
    "ServerApi",
    "ServerConfig",
    "TelemetryConfig",
    "load_config",
    "load_settings",
]
