"""Smoke CLI: call the chat and embedding models directly, or run the server."""
from __future__ import annotations
import argparse
import logging

from ollama_local.client.ollama import OllamaChatModel, OllamaEmbeddingModel
from ollama_local.common.config import Settings, load_settings
from ollama_local.common.logging_setup import setup_logging

LOGGER = logging.getLogger("ollama_local.cli")


def build_prompt(text: str, instruction: str | None = None) -> str:
    """Prefix the text with an instruction, joined by ':'."""
    if instruction:
        return f"{instruction.strip()}:{text}"
    return text


def run_chat(settings: Settings, text: str, instruction: str | None = None) -> str:
    with OllamaChatModel(settings) as chat:
        return chat.call(build_prompt(text, instruction))


def run_embed(settings: Settings, text: str) -> list[float]:
    with OllamaEmbeddingModel(settings) as model:
        return model.embed(text)


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ollama-local", description="Talk to a local Ollama server")
    ap.add_argument("--config", default=None, help="YAML config path (overrides env)")
    sub = ap.add_subparsers(dest="command", required=True)

    chat = sub.add_parser("chat", help="Send one prompt to the chat model")
    chat.add_argument("--text", required=True, help="User input text")
    chat.add_argument("--instruction", default=None, help="Optional instruction prefixed to the text")

    embed = sub.add_parser("embed", help="Embed one string")
    embed.add_argument("--text", required=True, help="Text to embed")

    serve = sub.add_parser("serve", help="Run the HTTP facade")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    settings = load_settings(args.config)

    if args.command == "serve":
        from ollama_local.serve.app import main as serve_main
        serve_main(settings, host=args.host, port=args.port)
        return 0

    setup_logging(settings.log_level)
    if args.command == "chat":
        print(run_chat(settings, args.text, args.instruction))
    else:
        vec = run_embed(settings, args.text)
        LOGGER.info("Embedding model %s", settings.embed_model)
        print(f"Vector length: {len(vec)}")
        print(vec[:5], "...")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
