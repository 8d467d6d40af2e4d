"""Runtime settings: environment defaults with an optional YAML overlay."""
from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_CHAT_MODEL = "llama3.1"
DEFAULT_EMBED_MODEL = "nomic-embed-text"
DEFAULT_TIMEOUT = 120.0

_YAML_KEYS = ("base_url", "chat_model", "embed_model", "timeout", "temperature", "log_level")


@dataclass(frozen=True)
class Settings:
    """Connection and model selection for the Ollama runtime."""
    base_url: str = DEFAULT_BASE_URL
    chat_model: str = DEFAULT_CHAT_MODEL
    embed_model: str = DEFAULT_EMBED_MODEL
    timeout: float = DEFAULT_TIMEOUT
    temperature: float | None = None
    log_level: str = "INFO"

    def chat_options(self) -> dict[str, Any]:
        """Sampling options forwarded to /api/chat; empty when nothing is set."""
        if self.temperature is None:
            return {}
        return {"temperature": self.temperature}


def _optional_float(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


def from_env(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    timeout = _optional_float(env.get("OLLAMA_TIMEOUT"))
    return Settings(
        base_url=env.get("OLLAMA_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        chat_model=env.get("OLLAMA_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        embed_model=env.get("OLLAMA_EMBED_MODEL", DEFAULT_EMBED_MODEL),
        timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
        temperature=_optional_float(env.get("OLLAMA_TEMPERATURE")),
        log_level=env.get("LOG_LEVEL", "INFO"),
    )


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: str | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """
    Build settings once at process start.

    Args:
        path: YAML file whose keys override the environment. Falls back to
            $OLLAMA_CONFIG when not given.
        env: Environment mapping, defaults to os.environ.

    Raises:
        FileNotFoundError: If a config path is given but does not exist.
    """
    env = os.environ if env is None else env
    settings = from_env(env)
    path = path or env.get("OLLAMA_CONFIG")
    if not path:
        return settings
    if not Path(path).exists():
        raise FileNotFoundError(f"Config file not found at {path}")

    cfg = load_cfg(path)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(cfg).__name__}")
    unknown = set(cfg) - set(_YAML_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

    overrides: dict[str, Any] = {}
    if "base_url" in cfg:
        overrides["base_url"] = str(cfg["base_url"]).rstrip("/")
    for key in ("chat_model", "embed_model", "log_level"):
        if key in cfg:
            overrides[key] = str(cfg[key])
    if "timeout" in cfg:
        overrides["timeout"] = float(cfg["timeout"])
    if "temperature" in cfg:
        t = cfg["temperature"]
        overrides["temperature"] = None if t is None else float(t)
    return replace(settings, **overrides)
