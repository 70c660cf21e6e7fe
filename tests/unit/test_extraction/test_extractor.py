"""
Tests for CommandExtractor: merging, ordering, ids and narrative cleanup
"""

import re

import pytest

from helm.extraction import CommandExtractor, extract, sanitize_narrative
from helm.extraction.extractor import resolve_overlaps
from helm.extraction.matchers import Candidate

OBJ = '{"name": "op", "arguments": {"x": 1}}'

CONVENTIONS = {
    "fenced": f"Checking now.\n```tool_call\n{OBJ}\n```\nOne moment.",
    "list_sentinels": f"Checking now.\n<|tool_calls_start|>[{OBJ}]<|tool_calls_end|>\nOne moment.",
    "tool_call_tag": f"Checking now.\n<tool_call>{OBJ}</tool_call>\nOne moment.",
    "named_tag": f"Checking now.\n<op>{OBJ}</op>\nOne moment.",
    "bare_sentinels": 'Checking now.\n<|tool_call_start|>op<|tool_call_end|>\n{"x": 1}\nOne moment.',
    "inline_tool_call": f"Checking now.\ntool_call {OBJ}\nOne moment.",
    "message_tokens": f"Checking now.\n<|start|>assistant<|channel|>commentary<|message|>{OBJ}<|call|>\nOne moment.",
}


class TestConventions:
    @pytest.mark.parametrize("convention", sorted(CONVENTIONS))
    def test_each_convention(self, convention):
        result = extract(CONVENTIONS[convention])

        assert len(result.invocations) == 1
        invocation = result.invocations[0]
        assert invocation.name == "op"
        assert invocation.arguments == {"x": 1}
        assert invocation.convention == convention
        assert result.narrative == "Checking now.\n\nOne moment."

    def test_plain_object_fallback(self):
        result = extract(OBJ)
        assert [i.convention for i in result.invocations] == ["plain_object"]
        assert result.narrative == ""

    def test_fallback_suppressed_when_something_matched(self):
        text = '{"name": "a"}\n<tool_call>{"name": "b"}</tool_call>'
        assert [i.name for i in extract(text).invocations] == ["b"]


class TestExtraction:
    def test_no_invocations(self):
        result = extract("It's sunny in Lisbon today.")
        assert result.invocations == []
        assert result.narrative == "It's sunny in Lisbon today."

    def test_empty_text(self):
        result = extract("")
        assert result.narrative == ""
        assert result.invocations == []

    def test_truncated_fragment_repaired(self):
        result = extract('Sure.\n<tool_call>{"name":"op","arguments":{"x":1</tool_call>')
        assert [(i.name, i.arguments) for i in result.invocations] == [("op", {"x": 1})]
        assert result.narrative == "Sure."

    def test_nameless_object_rejected(self):
        result = extract('<tool_call>{"arguments": {"x": 1}}</tool_call>')
        assert result.invocations == []

    def test_order_follows_text(self):
        text = (
            '<tool_call>{"name": "first"}</tool_call>\n'
            '```tool_call\n{"name": "second"}\n```\n'
            "<|tool_call_start|>third<|tool_call_end|>\n"
            '<|tool_calls_start|>[{"name": "fourth"}, {"name": "fifth"}]<|tool_calls_end|>'
        )
        assert [i.name for i in extract(text).invocations] == ["first", "second", "third", "fourth", "fifth"]

    def test_nested_conventions_counted_once(self):
        text = "<tool_call><function=op><parameter=x>1</parameter></function></tool_call>"
        result = extract(text)
        assert len(result.invocations) == 1
        assert result.invocations[0].convention == "tool_call_tag"

    def test_ids_unique_within_and_across_responses(self):
        first = extract(f"<|tool_calls_start|>[{OBJ}, {OBJ}]<|tool_calls_end|>")
        second = extract(f"<tool_call>{OBJ}</tool_call>")
        ids = [i.id for i in first.invocations + second.invocations]
        assert len(ids) == len(set(ids)) == 3
        assert all(re.fullmatch(r"tc_\d+_\d+", i) for i in ids)

    def test_spans_recorded(self):
        text = f"Hi <tool_call>{OBJ}</tool_call>"
        invocation = extract(text).invocations[0]
        start, end = invocation.span
        assert text[start:end] == f"<tool_call>{OBJ}</tool_call>"

    @pytest.mark.parametrize(
        "garbage",
        ["{{{{", "<tool_call>", "```tool_call\n{", "<|tool_call_start|><|tool_call_end|>", "}" * 50, "[" * 500],
    )
    def test_never_raises(self, garbage):
        result = extract(garbage)
        assert isinstance(result.narrative, str)

    def test_failing_matcher_does_not_abort(self):
        def broken(text):
            raise RuntimeError("matcher bug")

        def fixed(text):
            return [Candidate(0, 2, "op", {}, "test")]

        extractor = CommandExtractor(matchers=[broken, fixed], id_factory=lambda: "id-1")
        result = extractor.extract("ab rest")
        assert [(i.id, i.name) for i in result.invocations] == [("id-1", "op")]
        assert result.narrative == "rest"


class TestResolveOverlaps:
    def test_earliest_then_longest(self):
        outer = Candidate(0, 20, "outer", {}, "a")
        inner = Candidate(5, 10, "inner", {}, "b")
        same_start_shorter = Candidate(0, 8, "short", {}, "c")
        later = Candidate(25, 30, "later", {}, "a")
        kept = resolve_overlaps([later, inner, same_start_shorter, outer])
        assert [c.name for c in kept] == ["outer", "later"]

    def test_siblings_from_one_block_kept(self):
        a = Candidate(0, 10, "a", {}, "list")
        b = Candidate(0, 10, "b", {}, "list")
        assert [c.name for c in resolve_overlaps([a, b])] == ["a", "b"]


class TestSanitizeNarrative:
    def test_headers_removed(self):
        assert sanitize_narrative("**TOOL CALL:** Looking it up") == "Looking it up"
        assert sanitize_narrative("TOOL CALL: Looking it up") == "Looking it up"

    def test_unparsed_command_blocks_removed(self):
        text = 'Before\n```tool_call\n{"name": oops}\n```\nAfter'
        assert sanitize_narrative(text) == "Before\n\nAfter"

    def test_code_examples_kept(self):
        text = "Example:\n```tool_code\nprint('hi')\n```"
        assert sanitize_narrative(text) == text

    def test_blank_runs_collapsed(self):
        assert sanitize_narrative("a\n\n\n\n\nb\n   \n") == "a\n\nb"
