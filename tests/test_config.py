from __future__ import annotations

from pathlib import Path

import pytest

from ollama_local.common.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings, from_env, load_settings


def test_env_defaults() -> None:
    s = from_env({})
    assert s == Settings()
    assert s.base_url == DEFAULT_BASE_URL
    assert s.chat_options() == {}


def test_env_overrides() -> None:
    s = from_env(
        {
            "OLLAMA_BASE_URL": "http://gpu-box:11434/",
            "OLLAMA_CHAT_MODEL": "qwen2.5",
            "OLLAMA_EMBED_MODEL": "mxbai-embed-large",
            "OLLAMA_TIMEOUT": "30",
            "OLLAMA_TEMPERATURE": "0.7",
        }
    )
    assert s.base_url == "http://gpu-box:11434"
    assert s.chat_model == "qwen2.5"
    assert s.embed_model == "mxbai-embed-large"
    assert s.timeout == 30.0
    assert s.chat_options() == {"temperature": 0.7}


def test_yaml_overrides_env(tmp_path: Path) -> None:
    cfg = tmp_path / "ollama.yaml"
    cfg.write_text("chat_model: mistral\ntimeout: 5\n", encoding="utf-8")
    s = load_settings(str(cfg), env={"OLLAMA_CHAT_MODEL": "qwen2.5", "OLLAMA_EMBED_MODEL": "e5"})
    assert s.chat_model == "mistral"
    assert s.timeout == 5.0
    assert s.embed_model == "e5"


def test_config_path_from_env(tmp_path: Path) -> None:
    cfg = tmp_path / "c.yaml"
    cfg.write_text("embed_model: bge-m3\n", encoding="utf-8")
    s = load_settings(env={"OLLAMA_CONFIG": str(cfg)})
    assert s.embed_model == "bge-m3"


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "nope.yaml"), env={})


def test_unknown_config_key_raises(tmp_path: Path) -> None:
    cfg = tmp_path / "c.yaml"
    cfg.write_text("retries: 3\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(str(cfg), env={})


def test_repo_config_loads() -> None:
    path = Path(__file__).resolve().parent.parent / "configs" / "ollama.yaml"
    s = load_settings(str(path), env={})
    assert s.chat_model
    assert s.timeout > 0


def test_empty_env_values_fall_back_to_defaults() -> None:
    s = from_env({"OLLAMA_TIMEOUT": "", "OLLAMA_TEMPERATURE": " "})
    assert s.timeout == DEFAULT_TIMEOUT
    assert s.temperature is None


@pytest.mark.parametrize("body", ["just-a-string\n", "- chat_model: mistral\n"])
def test_non_mapping_config_raises(tmp_path: Path, body: str) -> None:
    cfg = tmp_path / "c.yaml"
    cfg.write_text(body, encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a mapping"):
        load_settings(str(cfg), env={})
