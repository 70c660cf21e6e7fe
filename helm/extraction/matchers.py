"""
Command matchers - one function per textual invocation convention

Each matcher scans the raw model output independently and returns
``Candidate``s carrying the source span they were found at. Matchers never
raise on malformed input: a fragment that cannot be parsed or has no ``name``
is simply not a candidate.

Conventions:
    ```tool_call {"name": "op", "arguments": {...}} ```     match_fenced_blocks
    <|tool_calls_start|>[{...}, {...}]<|tool_calls_end|>    match_list_sentinels
    <tool_call>{...}</tool_call>                            match_tool_call_tags
    <op>{"name": "op", ...}</op>                            match_named_tags
    <|tool_call_start|>op<|tool_call_end|> {...args}        match_bare_sentinels
    <function=op><parameter=x>1</parameter></function>      match_function_tags
    tool_call {"name": "op", ...}   (no fences)             match_inline_tool_call
    <|channel|>...<|message|>{"name": "op", ...}<|call|>    match_message_tokens
    {"name": "op", ...}   (whole response, fallback only)   match_plain_object
"""

from __future__ import annotations

import ast
import bisect
import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .repair import find_object_end, parse_fragment

logger = logging.getLogger(__name__)

Call = tuple[str, dict[str, Any]]


@dataclass(frozen=True)
class Candidate:
    start: int
    end: int
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    convention: str = ""

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)


Matcher = Callable[[str], list[Candidate]]

_FENCED = re.compile(r"```(tool_calls?|tool_code|json)[ \t]*\n?(.*?)```", re.DOTALL)
_LIST_SENTINELS = re.compile(r"<\|tool_calls_start\|>(.*?)<\|tool_calls_end\|>", re.DOTALL)
_TOOL_CALL_TAG = re.compile(r"<tool_call>\s*(.*?)\s*</tool_call>", re.DOTALL | re.IGNORECASE)
_OPEN_TAG = re.compile(r"<([A-Za-z_][\w.-]*)>")
_BARE_SENTINELS = re.compile(r"<\|tool_call_start\|>(.*?)<\|tool_call_end\|>", re.DOTALL)
_FUNCTION_TAG = re.compile(r"<function=([\w.-]+)>(.*?)</function>", re.DOTALL | re.IGNORECASE)
_INLINE_TOOL_CALL = re.compile(r"(?<![\w<|/`-])tool_call\s*:?\s*(?=\{)", re.IGNORECASE)
_MESSAGE_TOKENS = re.compile(
    r"(?:<\|start\|>[^<]*)?(?:<\|channel\|>[^<]*)?<\|message\|>(.*?)<\|call\|>", re.DOTALL | re.IGNORECASE
)
_PARAMETER_TAG = re.compile(r"<parameter=(\w+)>\s*(.*?)\s*</parameter>", re.DOTALL | re.IGNORECASE)
_IDENTIFIER = re.compile(r"^[A-Za-z_][\w.-]*$")
_OBJECT_START = re.compile(r"\s*\{")

# Tags owned by other conventions.
_RESERVED_TAGS = frozenset({"tool_call", "function", "parameter"})

_JSON_NAMES = {"true": True, "false": False, "null": None, "none": None}


# -- Structured objects --


def _coerce_arguments(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        decoded = parse_fragment(value)
        if isinstance(decoded, dict):
            return decoded
    return {}


def call_from_object(obj: Any) -> Call | None:
    """``(name, arguments)`` for a structured object, or None without a name."""
    if not isinstance(obj, dict):
        return None
    if "name" not in obj and isinstance(obj.get("function"), dict):
        obj = obj["function"]
    name = obj.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    raw_args = obj.get("arguments", obj.get("parameters", {}))
    return name.strip(), _coerce_arguments(raw_args)


def calls_from_value(value: Any) -> list[Call]:
    items = value if isinstance(value, list) else [value]
    calls = []
    for item in items:
        call = call_from_object(item)
        if call is not None:
            calls.append(call)
    return calls


# -- Python-style calls --


def _literal(node: ast.AST) -> Any:
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        pass
    if isinstance(node, ast.Name) and node.id.lower() in _JSON_NAMES:
        return _JSON_NAMES[node.id.lower()]
    return ast.unparse(node)


def _call_from_node(node: ast.AST) -> Call | None:
    if not isinstance(node, ast.Call):
        return None
    # print(default_api.op(...))
    if isinstance(node.func, ast.Name) and node.func.id == "print" and len(node.args) == 1:
        return _call_from_node(node.args[0])
    if isinstance(node.func, ast.Attribute):
        name = node.func.attr
    elif isinstance(node.func, ast.Name):
        name = node.func.id
    else:
        return None
    arguments = {kw.arg: _literal(kw.value) for kw in node.keywords if kw.arg is not None}
    return name, arguments


def parse_python_calls(source: str) -> list[Call] | None:
    """Parse ``op(x=1)`` / ``api.op(x=1)`` / ``[a(), b()]`` safely via ``ast``."""
    try:
        tree = ast.parse(source.strip(), mode="eval")
    except (SyntaxError, ValueError, RecursionError):
        return None
    body = tree.body
    nodes = body.elts if isinstance(body, (ast.List, ast.Tuple)) else [body]
    calls = [_call_from_node(n) for n in nodes]
    if not calls or any(c is None for c in calls):
        return None
    return calls


# -- XML-style function blocks --


def _parameter_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_function_block(name: str, body: str) -> Call:
    body = body.strip()
    if body.startswith("{"):
        return name, _coerce_arguments(parse_fragment(body))
    arguments = {k: _parameter_value(v.strip()) for k, v in _PARAMETER_TAG.findall(body)}
    return name, arguments


def _calls_from_payload(payload: str) -> list[Call]:
    """Calls from a JSON object/list, Python-style call(s), or an XML function block."""
    payload = payload.strip()
    if not payload:
        return []
    function = _FUNCTION_TAG.search(payload)
    if function:
        return [parse_function_block(function.group(1), function.group(2))]
    if payload[0] in "{[":
        return calls_from_value(parse_fragment(payload))
    return parse_python_calls(payload) or []


def _candidates(start: int, end: int, calls: list[Call], convention: str) -> list[Candidate]:
    return [Candidate(start, end, name, args, convention) for name, args in calls]


# -- Matchers --


def match_fenced_blocks(text: str) -> list[Candidate]:
    found = []
    for m in _FENCED.finditer(text):
        tag, body = m.group(1), m.group(2).strip()
        if tag == "tool_code" and not body.startswith(("{", "[")):
            calls = parse_python_calls(body) or []
        else:
            calls = calls_from_value(parse_fragment(body))
        found.extend(_candidates(m.start(), m.end(), calls, "fenced"))
    return found


def match_list_sentinels(text: str) -> list[Candidate]:
    found = []
    for m in _LIST_SENTINELS.finditer(text):
        found.extend(_candidates(m.start(), m.end(), _calls_from_payload(m.group(1)), "list_sentinels"))
    return found


def match_tool_call_tags(text: str) -> list[Candidate]:
    found = []
    for m in _TOOL_CALL_TAG.finditer(text):
        calls = _calls_from_payload(m.group(1))[:1]
        found.extend(_candidates(m.start(), m.end(), calls, "tool_call_tag"))
    return found


def match_named_tags(text: str) -> list[Candidate]:
    """``<op>{"name": "op", ...}</op>``, pairing each tag with its nearest closing tag."""
    found = []
    closings: dict[str, list[int]] = {}
    pos = 0
    while (m := _OPEN_TAG.search(text, pos)) is not None:
        tag = m.group(1)
        if tag.lower() in _RESERVED_TAGS:
            pos = m.end()
            continue
        if tag not in closings:
            closings[tag] = [c.start() for c in re.finditer(re.escape(f"</{tag}>"), text)]
        positions = closings[tag]
        index = bisect.bisect_left(positions, m.end())
        if index == len(positions):
            pos = m.start() + 1
            continue
        close = positions[index]
        end = close + len(tag) + 3
        call = None
        if _OBJECT_START.match(text, m.end()):
            call = call_from_object(parse_fragment(text[m.end():close]))
        if call is not None and call[0] == tag:
            found.append(Candidate(m.start(), end, call[0], call[1], "named_tag"))
            pos = end
        else:
            pos = m.start() + 1
    return found


def _arguments_for(name: str, obj: dict[str, Any]) -> dict[str, Any]:
    if "arguments" in obj or obj.get("name") == name:
        return _coerce_arguments(obj.get("arguments", {}))
    return obj


def _object_after(text: str, pos: int) -> tuple[dict[str, Any], int] | None:
    start = pos + (len(text[pos:]) - len(text[pos:].lstrip()))
    if start >= len(text) or text[start] != "{":
        return None
    end = find_object_end(text, start) or len(text)
    obj = parse_fragment(text[start:end])
    return (obj, end) if isinstance(obj, dict) else None


def _object_before(text: str, pos: int) -> tuple[dict[str, Any], int] | None:
    head = text[:pos].rstrip()
    if not head.endswith("}"):
        return None
    opening = head.rfind("{")
    while opening != -1:
        try:
            obj = json.loads(head[opening:])
        except ValueError:
            opening = head.rfind("{", 0, opening)
            continue
        return (obj, opening) if isinstance(obj, dict) else None
    return None


def match_bare_sentinels(text: str) -> list[Candidate]:
    """``<|tool_call_start|>op<|tool_call_end|>`` with the arguments beside it.

    The argument object is looked for right after the pair, then right before
    it; only whitespace may separate them. An object sitting between two pairs
    goes to the later pair when the earlier one has an unclaimed object before
    it and the later one has nothing after it. Inline JSON or a Python-style
    call between the sentinels is also accepted.
    """
    found = []
    claimed_until = 0
    pairs = list(_BARE_SENTINELS.finditer(text))
    for index, m in enumerate(pairs):
        inner = m.group(1).strip()
        if not _IDENTIFIER.match(inner):
            found.extend(_candidates(m.start(), m.end(), _calls_from_payload(inner), "bare_sentinels"))
            claimed_until = m.end()
            continue

        start, end, arguments = m.start(), m.end(), {}
        after = _object_after(text, m.end())
        before = _object_before(text, m.start())
        if before is not None and before[1] < claimed_until:
            before = None
        if after is not None and before is not None and _claimed_by_next(text, after[1], pairs[index + 1:]):
            after = None
        if after is not None:
            arguments, end = _arguments_for(inner, after[0]), after[1]
        elif before is not None:
            arguments, start = _arguments_for(inner, before[0]), before[1]
        found.append(Candidate(start, end, inner, arguments, "bare_sentinels"))
        claimed_until = end
    return found


def _claimed_by_next(text: str, object_end: int, rest: list[re.Match[str]]) -> bool:
    """Whether the next pair directly follows the object and has no object of its own after it."""
    if not rest or text[object_end:rest[0].start()].strip():
        return False
    following = rest[0]
    return _IDENTIFIER.match(following.group(1).strip()) is not None and _object_after(text, following.end()) is None


def match_function_tags(text: str) -> list[Candidate]:
    found = []
    for m in _FUNCTION_TAG.finditer(text):
        name, arguments = parse_function_block(m.group(1), m.group(2))
        found.append(Candidate(m.start(), m.end(), name, arguments, "function_tag"))
    return found


def match_inline_tool_call(text: str) -> list[Candidate]:
    """``tool_call {"name": "op", ...}`` written without fences or tags."""
    found = []
    for m in _INLINE_TOOL_CALL.finditer(text):
        start = m.end()
        end = find_object_end(text, start) or len(text)
        call = call_from_object(parse_fragment(text[start:end]))
        if call is not None:
            found.append(Candidate(m.start(), end, call[0], call[1], "inline_tool_call"))
    return found


def match_message_tokens(text: str) -> list[Candidate]:
    """Channel-token format: ``<|start|>assistant<|channel|>...<|message|>{...}<|call|>``."""
    found = []
    for m in _MESSAGE_TOKENS.finditer(text):
        body = m.group(1).strip()
        brace = body.find("{")
        if brace == -1:
            continue
        end = find_object_end(body, brace) or len(body)
        call = call_from_object(parse_fragment(body[brace:end]))
        if call is not None:
            found.append(Candidate(m.start(), m.end(), call[0], call[1], "message_tokens"))
    return found


def match_plain_object(text: str) -> list[Candidate]:
    """A response that is itself a structured object (fallback only)."""
    start = len(text) - len(text.lstrip())
    if start >= len(text) or text[start] != "{":
        return []
    end = find_object_end(text, start) or len(text)
    call = call_from_object(parse_fragment(text[start:end]))
    if call is None:
        return []
    return [Candidate(start, end, call[0], call[1], "plain_object")]


DEFAULT_MATCHERS: tuple[Matcher, ...] = (
    match_fenced_blocks,
    match_list_sentinels,
    match_tool_call_tags,
    match_named_tags,
    match_bare_sentinels,
    match_function_tags,
    match_inline_tool_call,
    match_message_tokens,
)

FALLBACK_MATCHERS: tuple[Matcher, ...] = (match_plain_object,)
