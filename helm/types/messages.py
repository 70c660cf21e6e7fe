"""Conversation turn types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["system", "user", "assistant"]


@dataclass
class ConversationTurn:
    role: Role
    content: str

    def render(self) -> str:
        return f"{self.role}: {self.content}"


def system_turn(content: str) -> ConversationTurn:
    return ConversationTurn(role="system", content=content)


def user_turn(content: str) -> ConversationTurn:
    return ConversationTurn(role="user", content=content)


def assistant_turn(content: str) -> ConversationTurn:
    return ConversationTurn(role="assistant", content=content)
