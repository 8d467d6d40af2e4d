"""
Ollama local demo package.

Provides:
- Thin chat and embedding clients for a locally running Ollama server
- FastAPI facade exposing GET /ai
- Smoke CLI calling the clients directly
"""
