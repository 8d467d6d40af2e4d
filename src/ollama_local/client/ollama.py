"""Chat and embedding clients for an Ollama server.

Both clients are stateless from the caller's side: every call is a fresh
request, no history is kept and nothing is retried.
"""
from __future__ import annotations
import logging
import time
from typing import Any, Sequence

import httpx

from ollama_local.common.config import Settings
from ollama_local.common.schema import ChatMessage

LOGGER = logging.getLogger("ollama_local.client")


class OllamaError(RuntimeError):
    """Base class for failures talking to the Ollama runtime."""


class OllamaConnectionError(OllamaError):
    """Transport failure or non-2xx status from the runtime."""


class OllamaResponseError(OllamaError):
    """Runtime answered but the body lacks the expected fields."""


class _OllamaHTTP:
    def __init__(self, settings: Settings, http: httpx.Client | None = None) -> None:
        self.settings = settings
        self._owns_http = http is None
        if http is None:
            http = httpx.Client(base_url=settings.base_url, timeout=settings.timeout)
        self._http = http

    def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        start = time.time()
        try:
            r = self._http.post(path, json=payload)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPError as e:
            raise OllamaConnectionError(f"Ollama request to {path} failed: {e}") from e
        except ValueError as e:
            raise OllamaResponseError(f"Ollama returned non-JSON body from {path}") from e
        LOGGER.info("POST %s model=%s %sms", path, payload.get("model"), int((time.time() - start) * 1000))
        if not isinstance(data, dict):
            raise OllamaResponseError(f"Unexpected response type from {path}: {type(data).__name__}")
        return data

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()


class OllamaChatModel(_OllamaHTTP):
    """Chat completion via POST /api/chat."""

    def complete(self, turns: Sequence[ChatMessage]) -> str:
        """
        Send a stateless conversation and return the assistant's reply.

        Args:
            turns: Conversation turns, sent in order.

        Returns:
            The reply content exactly as the runtime produced it.
        """
        payload: dict[str, Any] = {
            "model": self.settings.chat_model,
            "messages": [t.to_dict() for t in turns],
            "stream": False,
        }
        options = self.settings.chat_options()
        if options:
            payload["options"] = options

        data = self._post("/api/chat", payload)
        try:
            content = data["message"]["content"]
        except (KeyError, TypeError) as e:
            raise OllamaResponseError("Malformed chat response: missing message.content") from e
        if not isinstance(content, str):
            raise OllamaResponseError(f"Malformed chat response: content is {type(content).__name__}")
        return content

    def call(self, prompt: str) -> str:
        return self.complete([ChatMessage.user(prompt)])


class OllamaEmbeddingModel(_OllamaHTTP):
    """Text embeddings via POST /api/embed."""

    def embed(self, text: str) -> list[float]:
        data = self._post("/api/embed", {"model": self.settings.embed_model, "input": text})
        try:
            vector = data["embeddings"][0]
            return [float(x) for x in vector]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise OllamaResponseError("Malformed embed response: missing embeddings") from e
