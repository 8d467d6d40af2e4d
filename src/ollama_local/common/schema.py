"""Dataclasses for values passed to and from the model runtime."""
from __future__ import annotations
from dataclasses import asdict, dataclass

@dataclass(frozen=True)
class ChatMessage:
    """One conversation turn."""
    role: str
    content: str

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    def to_dict(self) -> dict[str, str]:
        return asdict(self)
