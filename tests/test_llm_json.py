"""
Unit tests for LLM JSON decoding and field coercion.
"""
import pytest

from jobmatch.llm_json import (
    DecodeStatus,
    SchemaViolation,
    as_str,
    as_str_list,
    clamp_percentage,
    decode_json_object,
    strip_json_wrapping,
)


def identity(payload):
    return payload


def require_name(payload):
    if "name" not in payload:
        raise SchemaViolation("missing name")
    return payload["name"]


class TestStripJsonWrapping:

    @pytest.mark.parametrize("raw,expected", [
        ('{"a": 1}', '{"a": 1}'),
        ('```json\n{"a": 1}\n```', '{"a": 1}'),
        ('```\n{"a": 1}\n```', '{"a": 1}'),
        ('Here you go: {"a": 1} Hope this helps!', '{"a": 1}'),
        ('Sure!\n```json\n{"a": {"b": 2}}\n```\nAnything else?', '{"a": {"b": 2}}'),
        ("no json at all", ""),
        ("", ""),
    ])
    def test_cleaning(self, raw, expected):
        assert strip_json_wrapping(raw) == expected

    def test_none_is_treated_as_empty(self):
        assert strip_json_wrapping(None) == ""


class TestDecodeJsonObject:

    @pytest.mark.parametrize("raw", [
        "I cannot help with that.",
        '{"a": 1,}',
        '{"a": "unterminated}',
        '```json\n{"a": \n```',
        "",
    ])
    def test_syntax_errors(self, raw):
        result = decode_json_object(raw, identity)
        assert result.status is DecodeStatus.SYNTAX_ERROR
        assert not result.ok
        assert result.value is None
        assert result.error

    def test_coercion_failure_is_schema_error(self):
        result = decode_json_object('{"a": 1}', require_name)
        assert result.status is DecodeStatus.SCHEMA_ERROR
        assert "missing name" in result.error

    def test_ok_runs_coercion(self):
        result = decode_json_object('```json\n{"name": "Ada"}\n```', require_name)
        assert result.ok
        assert result.status is DecodeStatus.OK
        assert result.value == "Ada"


class TestCoercions:

    @pytest.mark.parametrize("value,expected", [
        (50, 50),
        (42.5, 42.5),
        (-5, 0),
        (150, 100),
        ("80", 0),
        (None, 0),
        (True, 0),
        (float("nan"), 0),
    ])
    def test_clamp_percentage(self, value, expected):
        assert clamp_percentage(value) == expected

    def test_as_str(self):
        assert as_str("x") == "x"
        assert as_str(3) == ""
        assert as_str(None, "fallback") == "fallback"

    def test_as_str_list_filters_non_strings(self):
        assert as_str_list(["a", 1, None, "b"]) == ["a", "b"]
        assert as_str_list("a, b") == []
