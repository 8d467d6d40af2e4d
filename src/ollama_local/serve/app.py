"""FastAPI facade in front of the Ollama chat model.

Endpoints:
- GET /health
- GET /ai?message=...   -> text/plain completion
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Protocol, Sequence

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ollama_local.client.ollama import OllamaChatModel, OllamaError, OllamaResponseError
from ollama_local.common.config import Settings, load_settings
from ollama_local.common.logging_setup import setup_logging
from ollama_local.common.schema import ChatMessage

LOGGER = logging.getLogger("ollama_local.serve.app")


class HealthOut(BaseModel):
    status: str
    model: str


class ChatCompleter(Protocol):
    def complete(self, turns: Sequence[ChatMessage]) -> str: ...


def _routes(chat: ChatCompleter, model_name: str) -> list[tuple[str, str, Callable[..., Any]]]:
    def health() -> HealthOut:
        return HealthOut(status="ok", model=model_name)

    def generation(message: str | None = None) -> PlainTextResponse:
        if not message:
            raise HTTPException(status_code=400, detail="Query parameter 'message' is required")
        try:
            text = chat.complete([ChatMessage.user(message)])
        except OllamaResponseError as e:
            LOGGER.error("Malformed response: %s", e)
            raise HTTPException(status_code=500, detail="Malformed Ollama response")
        except OllamaError as e:
            LOGGER.error("Ollama chat request failed: %s", e)
            raise HTTPException(status_code=502, detail="Upstream Ollama error")
        return PlainTextResponse(text)

    return [
        ("GET", "/health", health),
        ("GET", "/ai", generation),
    ]


def create_app(chat: ChatCompleter, model_name: str = "unknown") -> FastAPI:
    """
    Build the app around an already constructed chat collaborator.

    Args:
        chat: Object exposing complete(turns) -> str.
        model_name: Reported by /health.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        close = getattr(chat, "close", None)
        if callable(close):
            close()

    app = FastAPI(title="Ollama local", lifespan=lifespan)
    for method, path, endpoint in _routes(chat, model_name):
        app.add_api_route(path, endpoint, methods=[method])
    return app


def build_app(settings: Settings | None = None) -> FastAPI:
    """Factory for `uvicorn --factory`: settings -> chat model -> app."""
    settings = settings or load_settings()
    chat = OllamaChatModel(settings)
    LOGGER.info("Using chat model %s at %s", settings.chat_model, settings.base_url)
    return create_app(chat, model_name=settings.chat_model)


def main(settings: Settings | None = None, host: str = "127.0.0.1", port: int = 8080) -> None:
    settings = settings or load_settings()
    setup_logging(settings.log_level)
    uvicorn.run(build_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
