"""Best-effort parsing of truncated or slightly malformed JSON fragments."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_CLOSERS = {"{": "}", "[": "]"}


def close_unbalanced(text: str) -> str:
    """Append closers for every ``{``/``[`` still open at the end of ``text``.

    Brackets inside string literals are ignored; an unterminated string is
    closed first. Closers are appended innermost first.
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in "}]" and stack and stack[-1] == ch:
            stack.pop()

    suffix = '"' if in_string else ""
    return text + suffix + "".join(reversed(stack))


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA.sub(r"\1", text)


def repair_json(text: str) -> str:
    return strip_trailing_commas(close_unbalanced(text.strip()))


def _loads(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


def parse_fragment(text: str | None) -> Any | None:
    """
    Parse a JSON fragment, repairing it if needed.

    1. plain parse
    2. close unbalanced braces/brackets, drop trailing commas, parse again
    3. parse the first ``{`` .. last ``}`` substring (with repair)

    Returns None when every attempt fails. Never raises.
    """
    if not text or not text.strip():
        return None
    fragment = text.strip()

    ok, value = _loads(fragment)
    if ok:
        return value

    ok, value = _loads(repair_json(fragment))
    if ok:
        logger.debug("Repaired truncated fragment (%d chars)", len(fragment))
        return value

    first, last = fragment.find("{"), fragment.rfind("}")
    if first != -1 and last > first:
        narrowed = fragment[first:last + 1]
        for candidate in (narrowed, repair_json(narrowed)):
            ok, value = _loads(candidate)
            if ok:
                logger.debug("Recovered object from surrounding text")
                return value

    logger.debug("Discarding unparseable fragment: %.80s", fragment)
    return None


def find_object_end(text: str, start: int) -> int | None:
    """Index just past the ``}`` closing the object opened at ``text[start]``."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return i + 1
    return None
