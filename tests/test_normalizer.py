"""Tests for the response normalizer (JSON repair pipeline)."""

from __future__ import annotations

import json

import pytest

from aigateway.gateway.errors import RepairError
from aigateway.gateway.normalizer import (
    REPAIR_STAGES,
    extract_json_envelope,
    parse_json,
    parse_json_or_default,
    remove_trailing_commas,
    repair_json,
    strip_code_fences,
)

SAMPLES = [
    '{"a": 1}',
    '```json\n{"a": 1, "b": [1,2,3,],}\n```\nExtra trailing prose.',
    '```\n{"x": 1}\n```',
    '``````json\n{"x": [1,,]}\n``````',
    "Here you go: {\"k\": {\"n\": [1, 2, ], }, } thanks",
    "no json here",
    "",
    "   ",
    "}{",
    '{"s": "fenced ``` inside"}',
]


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_other_language_tag(self):
        assert strip_code_fences("```javascript\n[1, 2]\n```") == "[1, 2]"

    def test_surrounding_whitespace(self):
        assert strip_code_fences('  \n```json\n{"a": 1}\n```  \n') == '{"a": 1}'

    def test_unfenced_text_only_trimmed(self):
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_leading_fence_only(self):
        assert strip_code_fences('```json\n{"a": 1}\nMore text') == '{"a": 1}\nMore text'


class TestRemoveTrailingCommas:
    def test_object(self):
        assert remove_trailing_commas('{"a": 1,}') == '{"a": 1}'

    def test_array_with_whitespace(self):
        assert remove_trailing_commas("[1, 2, \n ]") == "[1, 2]"

    def test_nested(self):
        assert remove_trailing_commas('{"a": [1, 2,], "b": {"c": 3,},}') == '{"a": [1, 2], "b": {"c": 3}}'

    def test_consecutive_commas(self):
        assert remove_trailing_commas("[1,,]") == "[1]"

    def test_valid_json_untouched(self):
        text = '{"a": [1, 2], "b": "x"}'
        assert remove_trailing_commas(text) == text


class TestExtractJsonEnvelope:
    def test_prose_around_object(self):
        assert extract_json_envelope('Sure! {"a": 1} Hope that helps.') == '{"a": 1}'

    def test_first_open_to_last_close(self):
        assert extract_json_envelope('x {"a": {"b": 2}} y }') == '{"a": {"b": 2}} y }'

    def test_no_braces_passthrough(self):
        assert extract_json_envelope("[1, 2, 3]") == "[1, 2, 3]"

    def test_reversed_braces_passthrough(self):
        assert extract_json_envelope("} then {") == "} then {"


class TestRepairJson:
    def test_concrete_repair(self):
        raw = '```json\n{"a": 1, "b": [1,2,3,],}\n```\nExtra trailing prose.'
        assert json.loads(repair_json(raw)) == {"a": 1, "b": [1, 2, 3]}

    def test_fenced_trailing_comma(self):
        assert repair_json('```json\n{"x":1,}\n```') == '{"x":1}'

    def test_non_string_input(self):
        assert repair_json(None) == ""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_pipeline_idempotent(self, text):
        once = repair_json(text)
        assert repair_json(once) == once

    @pytest.mark.parametrize("stage", REPAIR_STAGES, ids=lambda s: s.__name__)
    @pytest.mark.parametrize("text", SAMPLES)
    def test_each_stage_idempotent(self, stage, text):
        once = stage(text)
        assert stage(once) == once


class TestParseJson:
    def test_parse(self):
        assert parse_json('```json\n{"items": [1, 2,]}\n```') == {"items": [1, 2]}

    def test_parse_failure(self):
        with pytest.raises(RepairError) as exc_info:
            parse_json("I'm sorry, I can't do that.")
        assert exc_info.value.text == "I'm sorry, I can't do that."
        assert isinstance(exc_info.value, ValueError)

    @pytest.mark.parametrize("text", ['{"a": NaN}', '{"a": [Infinity]}', '{"a": -Infinity}'])
    def test_non_standard_constants_rejected(self, text):
        with pytest.raises(RepairError, match="non-standard constant"):
            parse_json(text)

    def test_default_on_failure(self):
        default = {"score": 0, "tips": []}
        data, degraded = parse_json_or_default("not json", default)
        assert degraded
        assert data == default
        assert data is not default

    def test_default_not_used_on_success(self):
        data, degraded = parse_json_or_default('{"score": 9}', {"score": 0})
        assert not degraded
        assert data == {"score": 9}
