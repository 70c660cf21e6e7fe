"""Extraction - recover command invocations embedded in free-text model output."""

from helm.extraction.extractor import (
    CommandExtractor,
    ExtractionResult,
    extract,
    next_invocation_id,
    resolve_overlaps,
    sanitize_narrative,
)
from helm.extraction.matchers import (
    DEFAULT_MATCHERS,
    FALLBACK_MATCHERS,
    Candidate,
    match_bare_sentinels,
    match_fenced_blocks,
    match_function_tags,
    match_inline_tool_call,
    match_list_sentinels,
    match_message_tokens,
    match_named_tags,
    match_plain_object,
    match_tool_call_tags,
    parse_python_calls,
)
from helm.extraction.repair import parse_fragment, repair_json

__all__ = [
    "CommandExtractor",
    "ExtractionResult",
    "extract",
    "next_invocation_id",
    "resolve_overlaps",
    "sanitize_narrative",
    "DEFAULT_MATCHERS",
    "FALLBACK_MATCHERS",
    "Candidate",
    "match_bare_sentinels",
    "match_fenced_blocks",
    "match_function_tags",
    "match_inline_tool_call",
    "match_list_sentinels",
    "match_message_tokens",
    "match_named_tags",
    "match_plain_object",
    "match_tool_call_tags",
    "parse_python_calls",
    "parse_fragment",
    "repair_json",
]
