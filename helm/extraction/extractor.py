"""Command Extractor - merge matcher candidates into ordered invocations."""

from __future__ import annotations

import itertools
import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from ..types import Invocation
from .matchers import DEFAULT_MATCHERS, FALLBACK_MATCHERS, Candidate, Matcher

logger = logging.getLogger(__name__)

_id_counter = itertools.count(1)


def next_invocation_id() -> str:
    return f"tc_{int(time.time() * 1000)}_{next(_id_counter)}"


@dataclass
class ExtractionResult:
    narrative: str
    invocations: list[Invocation] = field(default_factory=list)


def resolve_overlaps(candidates: Sequence[Candidate]) -> list[Candidate]:
    """Keep candidates in text order; on overlap the earliest (then longest) wins.

    Candidates sharing the exact span and convention of a kept candidate are
    siblings from one block and are kept too.
    """
    ordered = sorted(candidates, key=lambda c: (c.start, -(c.end - c.start)))
    kept: list[Candidate] = []
    for cand in ordered:
        if kept:
            last = kept[-1]
            if cand.span == last.span and cand.convention == last.convention:
                kept.append(cand)
                continue
            if cand.start < last.end:
                continue
        kept.append(cand)
    return kept


# -- Narrative cleanup --

_HEADER_BOLD = re.compile(r"\*\*TOOL CALL:\*\*", re.IGNORECASE)
_HEADER_INLINE = re.compile(r"TOOL CALL:\s*", re.IGNORECASE)
_HEADER_LINE = re.compile(r"^TOOL CALL\s*$", re.IGNORECASE | re.MULTILINE)
_FENCED_LEFTOVER = re.compile(r"```(?:tool_calls?|tool_code)\s*\n?(.*?)```", re.DOTALL)
_PLAIN_LEFTOVER = re.compile(
    r'^\s*\{\s*"name"\s*:\s*"[^"]+"\s*,\s*"arguments"\s*:\s*\{[^}]*\}\s*\}\s*$', re.MULTILINE
)
_TAG_LEFTOVER = re.compile(r"<tool_call>\s*.*?</tool_call>", re.DOTALL | re.IGNORECASE)
_SENTINEL_LEFTOVER = re.compile(r"<\|tool_calls?_start\|>.*?<\|tool_calls?_end\|>", re.DOTALL | re.IGNORECASE)
_NAME_FIELD = re.compile(r'"name"\s*:|name\s*=', re.IGNORECASE)
_BLANK_RUN = re.compile(r"\n{3,}")
_WHITESPACE_LINE = re.compile(r"^[ \t]+$", re.MULTILINE)


def _drop_if_command(match: re.Match) -> str:
    return "" if _NAME_FIELD.search(match.group(0)) else match.group(0)


def sanitize_narrative(text: str) -> str:
    """Remove leftover command-looking syntax and normalise blank lines."""
    cleaned = _HEADER_BOLD.sub("", text)
    cleaned = _HEADER_INLINE.sub("", cleaned)
    cleaned = _HEADER_LINE.sub("", cleaned)
    cleaned = _FENCED_LEFTOVER.sub(_drop_if_command, cleaned)
    cleaned = _PLAIN_LEFTOVER.sub("", cleaned)
    cleaned = _TAG_LEFTOVER.sub(_drop_if_command, cleaned)
    cleaned = _SENTINEL_LEFTOVER.sub(_drop_if_command, cleaned)
    cleaned = _WHITESPACE_LINE.sub("", cleaned)
    cleaned = _BLANK_RUN.sub("\n\n", cleaned)
    return cleaned.strip()


def remove_spans(text: str, spans: Sequence[tuple[int, int]]) -> str:
    parts = []
    cursor = 0
    for start, end in sorted(set(spans)):
        if start < cursor:
            continue
        parts.append(text[cursor:start])
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


class CommandExtractor:
    """Runs every matcher over a response and assembles the invocation list.

    Fallback matchers only run when the primary ones found nothing.
    """

    def __init__(
        self,
        matchers: Sequence[Matcher] | None = None,
        fallback: Sequence[Matcher] | None = None,
        id_factory: Callable[[], str] = next_invocation_id,
    ) -> None:
        self.matchers = tuple(DEFAULT_MATCHERS if matchers is None else matchers)
        self.fallback = tuple(FALLBACK_MATCHERS if fallback is None else fallback)
        self._id_factory = id_factory

    def extract(self, text: str) -> ExtractionResult:
        if not text:
            return ExtractionResult(narrative="")

        candidates = self._run(self.matchers, text)
        if not candidates:
            candidates = self._run(self.fallback, text)

        selected = resolve_overlaps(candidates)
        invocations = [
            Invocation(
                id=self._id_factory(),
                name=c.name,
                arguments=c.arguments,
                span=c.span,
                convention=c.convention,
            )
            for c in selected
        ]
        narrative = sanitize_narrative(remove_spans(text, [c.span for c in selected]))
        if invocations:
            logger.debug(
                "Extracted %d invocation(s): %s",
                len(invocations), ", ".join(i.name for i in invocations),
            )
        return ExtractionResult(narrative=narrative, invocations=invocations)

    @staticmethod
    def _run(matchers: Sequence[Matcher], text: str) -> list[Candidate]:
        found: list[Candidate] = []
        for matcher in matchers:
            try:
                found.extend(matcher(text))
            except Exception:
                logger.exception("Matcher %s failed", getattr(matcher, "__name__", matcher))
        return found


_default_extractor = CommandExtractor()


def extract(text: str) -> ExtractionResult:
    return _default_extractor.extract(text)
