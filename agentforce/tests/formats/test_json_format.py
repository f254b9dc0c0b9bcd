# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for JSON extraction, merging and the JSON parse helpers."""
import json
import logging

import pytest

from src.formats.errors import FormatParseError
from src.formats.json_format import (
    JsonFormat,
    format_as_json,
    merge_json_values,
    parse_json,
    stringify_json,
    is_valid_json,
    safe_parse_json,
)


def _fail(name):
    raise AssertionError(f"unexpected constant {name}")


class TestFormatAsJson:
    """Zero / one / many block behaviour of format_as_json."""

    def test_two_blocks_merge_into_array(self, multi_json_response):
        result = format_as_json(multi_json_response)
        assert json.loads(result) == [{"a": 1}, {"b": 2}]
        # merged arrays are pretty-printed
        assert "\n" in result

    def test_single_malformed_block_is_returned_unchanged(self):
        assert format_as_json("```json\n{bad json}\n```") == "{bad json}"

    def test_single_block_is_compacted(self):
        response = 'Here you go:\n```json\n{\n  "a": 1,\n  "b": [1, 2]\n}\n```\nThanks'
        assert format_as_json(response) == '{"a":1,"b":[1,2]}'

    def test_whole_response_parsed_without_blocks(self):
        assert format_as_json('{"a": 1, "b": [1, 2]}') == '{"a":1,"b":[1,2]}'

    @pytest.mark.parametrize(
        "response",
        ["just some text", "  padded prose  ", "```python\nx = 1\n```"],
        ids=["prose", "padded", "other_language"],
    )
    def test_unparsable_response_passes_through(self, response):
        assert format_as_json(response) == response

    def test_block_parsing_disabled_returns_trimmed_text(self):
        response = '  ```json\n{"a": 1}\n```  '
        assert format_as_json(response, enable_block_parsing=False) == response.strip()

    def test_mixed_blocks_keep_failures_as_raw_content(self, caplog):
        response = '```json\n{"a": 1}\n```\n```json\n{oops\n```'
        with caplog.at_level(logging.WARNING):
            result = format_as_json(response)

        assert json.loads(result) == [{"a": 1}, {"content": "{oops"}]
        assert "did not parse" in caplog.text

    def test_untagged_block_with_json_shape_qualifies(self):
        assert format_as_json("```\n[1, 2]\n```") == "[1,2]"

    def test_untagged_prose_block_is_ignored(self):
        response = "```\nhello\n```"
        assert format_as_json(response) == response

    def test_tagged_and_sniffed_blocks_merge_in_document_order(self):
        response = '```\n{"first": true}\n```\n```JSON\n{"second": true}\n```'
        assert json.loads(format_as_json(response)) == [{"first": True}, {"second": True}]

    def test_blank_blocks_are_skipped(self):
        assert format_as_json('```json\n\n```\n```json\n{"a": 1}\n```') == '{"a":1}'

    def test_unterminated_block_is_used(self):
        assert format_as_json('Result:\n```json\n{"a":1}') == '{"a":1}'

    def test_non_ascii_is_preserved(self):
        assert format_as_json('```json\n{"name": "Zoë"}\n```') == '{"name":"Zoë"}'

    def test_as_object_returns_parsed_values(self, multi_json_response):
        assert format_as_json('```json\n{"a": 1}\n```', as_object=True) == {"a": 1}
        assert format_as_json(multi_json_response, as_object=True) == [{"a": 1}, {"b": 2}]
        assert format_as_json("not json", as_object=True) == "not json"

    @pytest.mark.parametrize(
        "response, expected",
        [
            ('```json\n{"x": NaN}\n```', '{"x": NaN}'),
            ("[Infinity, 1]", "[Infinity, 1]"),
            ('```json\n{"y": -Infinity}\n```', '{"y": -Infinity}'),
        ],
        ids=["nan_block", "infinity_whole", "negative_infinity_block"],
    )
    def test_non_standard_constants_are_not_parsed(self, response, expected):
        assert format_as_json(response) == expected

    def test_non_standard_constant_in_merge_is_kept_raw(self):
        response = '```json\n{"a": 1}\n```\n```json\n{"b": NaN}\n```'
        result = format_as_json(response)
        # strict parsers must accept the merged output
        assert json.loads(result, parse_constant=_fail) == [{"a": 1}, {"content": '{"b": NaN}'}]

    def test_tier_decision_is_logged(self, debug_logging):
        format_as_json('```json\n{"a": 1}\n```')
        assert "json: 1 qualifying block(s)" in debug_logging.text


def test_merge_falls_back_to_per_element_serialisation():
    # a set cannot be serialised, so its raw block text is used instead
    result = merge_json_values([{"a": 1}, {1, 2}], ['{"a": 1}', "raw second block"])

    assert result.startswith("[\n")
    assert result.endswith("\n]")
    assert '"a": 1' in result
    assert "  raw second block" in result


def test_strategy_sniff():
    strategy = JsonFormat()
    assert strategy.looks_like('  {"a": 1}')
    assert strategy.looks_like("[1]")
    assert not strategy.looks_like("a: 1")


def test_parse_json_raises_format_parse_error():
    with pytest.raises(FormatParseError, match="Failed to parse JSON"):
        parse_json("{not json}")


@pytest.mark.parametrize(
    "data, pretty, expected",
    [
        ({"a": [1, 2]}, False, '{"a":[1,2]}'),
        ({"a": [1, 2]}, True, '{\n  "a": [\n    1,\n    2\n  ]\n}'),
        ({"k": "é"}, False, '{"k":"é"}'),
    ],
    ids=["compact", "pretty", "unicode"],
)
def test_stringify_json(data, pretty, expected):
    assert stringify_json(data, pretty=pretty) == expected


def test_stringify_json_raises_for_unserialisable():
    with pytest.raises(FormatParseError):
        stringify_json({"s": {1, 2}})


def test_validity_helpers():
    assert is_valid_json('{"a": 1}')
    assert not is_valid_json("{a: 1}")
    assert safe_parse_json("[1, 2]") == [1, 2]
    assert safe_parse_json("nope") is None


@pytest.mark.parametrize("text", ["NaN", "[Infinity]", '{"v": -Infinity}'], ids=["nan", "infinity", "neg_infinity"])
def test_helpers_reject_non_standard_constants(text):
    assert not is_valid_json(text)
    assert safe_parse_json(text) is None
    with pytest.raises(FormatParseError, match="Invalid JSON constant"):
        parse_json(text)


def test_overflowing_number_is_not_parsed():
    assert safe_parse_json("[1e999]") is None
    with pytest.raises(FormatParseError, match="out of range"):
        parse_json("1e999")
    assert format_as_json("```json\n{\"big\": 1e999}\n```") == '{"big": 1e999}'
    assert safe_parse_json("[1.5e3]") == [1500.0]


def test_stringify_json_rejects_nan():
    with pytest.raises(FormatParseError):
        stringify_json({"v": float("nan")})
