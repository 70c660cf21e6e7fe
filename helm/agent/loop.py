"""
Orchestration Loop - model call, extraction, execution, repeat

Each iteration renders the whole conversation into one prompt, asks the
router for a completion and extracts embedded invocations. No invocations
means the narrative is the final answer. Otherwise the batch goes to the
caller's executor exactly once, and the assistant text plus a synthetic
"Tool results" user turn are appended before the next iteration.

The iteration ceiling is a hard stop: reaching it yields the fallback message
with state EXHAUSTED rather than an exception. Router exhaustion
(``ProviderExhaustedError``) is the only error that propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ..config.session import SessionConfig
from ..extraction import CommandExtractor
from ..types import (
    CallOverrides,
    CallSuccess,
    ConversationTurn,
    Invocation,
    InvocationResult,
    LoopState,
    OrchestrationTurn,
    SessionContext,
    SessionResult,
    ToolExecutor,
    ToolSpec,
    assistant_turn,
)
from .prompts import as_tool_spec, as_turn, render_prompt, render_results_turn

logger = logging.getLogger(__name__)


class CompletionRouter(Protocol):
    async def call(
        self, use_case: str, prompt: str, overrides: CallOverrides | None = None
    ) -> CallSuccess: ...


class OrchestrationLoop:
    def __init__(
        self,
        router: CompletionRouter,
        *,
        extractor: CommandExtractor | None = None,
        config: SessionConfig | None = None,
    ) -> None:
        self.router = router
        self.extractor = extractor or CommandExtractor()
        self.config = config or SessionConfig()

    async def run_session(
        self,
        system_prompt: str,
        history_turns: Sequence[ConversationTurn | Mapping[str, Any]],
        operations_catalog: Sequence[ToolSpec | Mapping[str, Any]],
        tool_executor: ToolExecutor,
        *,
        context: SessionContext | None = None,
    ) -> SessionResult:
        context = context or SessionContext()
        turns = [as_turn(t) for t in history_turns]
        catalog = [as_tool_spec(e) for e in operations_catalog]
        max_iterations = self.config.max_iterations

        all_invocations: list[Invocation] = []
        all_results: list[InvocationResult] = []
        log: list[OrchestrationTurn] = []

        for iteration in range(1, max_iterations + 1):
            logger.debug("Iteration %d/%d: %s", iteration, max_iterations, LoopState.AWAITING_RESPONSE)
            prompt = render_prompt(system_prompt, catalog, turns)
            response = await self.router.call(self.config.use_case, prompt)

            extraction = self.extractor.extract(response.text)
            turn = OrchestrationTurn(
                iteration=iteration,
                prompt=prompt,
                raw_text=response.text,
                narrative=extraction.narrative,
                provider=response.provider,
                model=response.model,
                invocations=list(extraction.invocations),
            )
            log.append(turn)

            if not extraction.invocations:
                logger.info("Session done after %d iteration(s)", iteration)
                return SessionResult(
                    final_text=extraction.narrative,
                    all_invocations=all_invocations,
                    all_results=all_results,
                    turns=log,
                    state=LoopState.DONE,
                )

            logger.info(
                "Iteration %d: executing %s",
                iteration, ", ".join(inv.name for inv in extraction.invocations),
            )
            results = await self._execute(tool_executor, extraction.invocations, context)
            turn.results = results
            all_invocations.extend(extraction.invocations)
            all_results.extend(results)

            turns.append(assistant_turn(response.text))
            turns.append(render_results_turn(results, self.config.results_instruction))

        logger.warning("Max iterations (%d) reached, returning fallback response", max_iterations)
        return SessionResult(
            final_text=self.config.fallback_message,
            all_invocations=all_invocations,
            all_results=all_results,
            turns=log,
            state=LoopState.EXHAUSTED,
        )

    @staticmethod
    async def _execute(
        tool_executor: ToolExecutor,
        invocations: Sequence[Invocation],
        context: SessionContext,
    ) -> list[InvocationResult]:
        """One executor call for the whole batch; results come back in invocation order."""
        try:
            returned = await tool_executor(list(invocations), context)
        except Exception as e:
            logger.exception("Tool executor failed for batch of %d", len(invocations))
            message = str(e) or type(e).__name__
            return [InvocationResult(inv.id, inv.name, error=message) for inv in invocations]

        returned = [r for r in (returned or []) if isinstance(r, InvocationResult)]
        by_id = {r.invocation_id: r for r in returned}
        known_ids = {inv.id for inv in invocations}
        results = []
        for index, inv in enumerate(invocations):
            result = by_id.get(inv.id)
            # Results without a recognisable id are matched by position.
            if result is None and index < len(returned) and returned[index].invocation_id not in known_ids:
                result = returned[index]
            if result is None:
                result = InvocationResult(inv.id, inv.name, error="No result returned")
            results.append(result)
        return results


async def run_session(
    router: CompletionRouter,
    system_prompt: str,
    history_turns: Sequence[ConversationTurn | Mapping[str, Any]],
    operations_catalog: Sequence[ToolSpec | Mapping[str, Any]],
    tool_executor: ToolExecutor,
    *,
    context: SessionContext | None = None,
    config: SessionConfig | None = None,
) -> SessionResult:
    loop = OrchestrationLoop(router, config=config)
    return await loop.run_session(
        system_prompt, history_turns, operations_catalog, tool_executor, context=context
    )
