# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
JSON extraction from LLM responses.

Models commonly wrap JSON in ```json fences, sometimes several of them, and
sometimes emit broken JSON. A single block is re-serialised compactly, several
blocks are merged into one array, and anything unparsable is handed back as
raw text rather than dropped.
"""

import json
import math
import logging
import textwrap

from typing import Any

from .base import FormatStrategy
from .errors import FormatParseError
from ..types.format_types import ParsedCandidate

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"JSON number out of range: {literal}")
    return value


def loads_strict(json_string: str) -> Any:
    """json.loads without the NaN / Infinity extensions or overflowing floats."""
    return json.loads(json_string, parse_constant=_reject_constant, parse_float=_finite_float)


def parse_json(json_string: str) -> Any:
    try:
        return loads_strict(json_string)
    except (ValueError, TypeError) as e:
        raise FormatParseError(f"Failed to parse JSON: {e}") from e


def stringify_json(data: Any, pretty: bool = False) -> str:
    """Serialise to JSON; compact separators unless pretty."""
    try:
        if pretty:
            return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False)
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (ValueError, TypeError) as e:
        raise FormatParseError(f"Failed to stringify to JSON: {e}") from e


def is_valid_json(json_string: str) -> bool:
    try:
        loads_strict(json_string)
        return True
    except (ValueError, TypeError):
        return False


def safe_parse_json(json_string: str) -> Any | None:
    try:
        return loads_strict(json_string)
    except (ValueError, TypeError):
        return None


def merge_json_values(values: list[Any], raw_blocks: list[str]) -> str:
    """
    Serialise merged block values as one JSON array.

    Falls back to per-element serialisation (raw text for any element that
    still fails) so that a merge always produces a string.
    """
    try:
        return json.dumps(values, indent=2, ensure_ascii=False, allow_nan=False)
    except (ValueError, TypeError) as e:
        logger.warning(f"Could not serialise merged JSON blocks, joining individually: {e}")

    parts = []
    for value, raw in zip(values, raw_blocks):
        try:
            parts.append(json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False))
        except (ValueError, TypeError):
            parts.append(raw)
    return "[\n" + ",\n".join(textwrap.indent(p, "  ") for p in parts) + "\n]"


class JsonFormat(FormatStrategy):
    FORMAT_NAME = "json"
    LANGUAGE_TAGS = ("json",)

    def __init__(self, as_object: bool = False):
        # Return parsed values instead of their serialisation where possible
        self.as_object = as_object

    @classmethod
    def from_options(cls, as_object: bool = False, **options) -> "JsonFormat":
        return cls(as_object=as_object)

    def looks_like(self, content: str) -> bool:
        return content.strip().startswith(("{", "["))

    def parse_block(self, content: str) -> ParsedCandidate:
        try:
            return ParsedCandidate.ok(content, loads_strict(content))
        except ValueError:
            return ParsedCandidate.failed(content)

    def format_whole(self, raw_response: str) -> Any:
        candidate = self.parse_block(raw_response)
        if candidate.success:
            return self._emit(candidate.value)
        return raw_response

    def format_single(self, candidate: ParsedCandidate, raw_response: str) -> Any:
        if candidate.success:
            return self._emit(candidate.value)
        logger.debug("Single JSON block did not parse, returning it unchanged")
        return candidate.raw

    def format_many(self, candidates: list[ParsedCandidate], raw_response: str) -> Any:
        values = [c.value if c.success else {"content": c.raw} for c in candidates]
        if self.as_object:
            return values
        return merge_json_values(values, [c.raw for c in candidates])

    def _emit(self, value: Any) -> Any:
        if self.as_object:
            return value
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def format_as_json(
    raw_response: str, enable_block_parsing: bool = True, as_object: bool = False
) -> str | Any:
    """
    Convert an agent response to JSON.

    Args:
        raw_response: The LLM response text
        enable_block_parsing: Extract ```json blocks; when False the trimmed
            response is returned untouched
        as_object: Return the parsed Python value rather than a JSON string
            whenever a value could be parsed

    Returns:
        Compact JSON for a single value, a pretty-printed array for merged
        blocks, or the original text when nothing parses
    """
    return JsonFormat(as_object=as_object).format(raw_response, enable_block_parsing)
