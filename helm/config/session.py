"""Orchestration loop configuration."""

from __future__ import annotations

from dataclasses import dataclass

FALLBACK_MESSAGE = (
    "I apologize, but I wasn't able to complete your request. "
    "Please try again or rephrase your question."
)

RESULTS_INSTRUCTION = "Please provide your response to the user based on these results."


@dataclass
class SessionConfig:
    use_case: str = "assistant-chat"
    max_iterations: int = 5
    fallback_message: str = FALLBACK_MESSAGE
    results_instruction: str = RESULTS_INSTRUCTION

    def __post_init__(self) -> None:
        if not 1 <= self.max_iterations <= 50:
            raise ValueError(f"max_iterations must be between 1 and 50, got {self.max_iterations}")
