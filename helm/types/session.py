"""Orchestration session types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from .tools import Invocation, InvocationResult


class LoopState(StrEnum):
    AWAITING_RESPONSE = "awaiting_response"
    PARSING = "parsing"
    EXECUTING = "executing"
    APPENDING = "appending"
    DONE = "done"
    EXHAUSTED = "exhausted"


@dataclass
class OrchestrationTurn:
    iteration: int
    prompt: str
    raw_text: str = ""
    narrative: str = ""
    provider: str = ""
    model: str = ""
    invocations: list[Invocation] = field(default_factory=list)
    results: list[InvocationResult] = field(default_factory=list)


@dataclass
class SessionResult:
    final_text: str
    all_invocations: list[Invocation] = field(default_factory=list)
    all_results: list[InvocationResult] = field(default_factory=list)
    turns: list[OrchestrationTurn] = field(default_factory=list)
    state: LoopState = LoopState.DONE

    @property
    def exhausted(self) -> bool:
        return self.state == LoopState.EXHAUSTED

    @property
    def iterations(self) -> int:
        return len(self.turns)
