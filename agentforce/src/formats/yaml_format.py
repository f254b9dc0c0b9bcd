# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
YAML extraction from LLM responses.

Unlike the JSON path, every tier here produces YAML: when nothing in the
response parses to a mapping or sequence, the text is wrapped as
`{response: <text>}` and emitted as YAML.
"""

import re
import json
import logging

from typing import Any

import yaml

from .base import FormatStrategy
from .errors import FormatParseError
from ..types.format_types import ParsedCandidate

logger = logging.getLogger(__name__)

_YAML_PATTERNS = (
    re.compile(r"^\s*[\w\-]+\s*:\s*.+$", re.MULTILINE),  # key: value
    re.compile(r"^\s*-\s+.+$", re.MULTILINE),  # - item
    re.compile(r"^\s*[\w\-]+\s*:\s*$", re.MULTILINE),  # key: (nested content)
)


class _BlockStyleDumper(yaml.SafeDumper):
    """Indents sequences under their parent key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, data: str):
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_str(data)


_BlockStyleDumper.add_representer(str, _represent_str)


def parse_yaml(yaml_string: str) -> Any:
    try:
        return yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        raise FormatParseError(f"Failed to parse YAML: {e}") from e


def stringify_yaml(data: Any) -> str:
    """Emit block-style YAML with insertion key order and no line folding."""
    try:
        return yaml.dump(
            data,
            Dumper=_BlockStyleDumper,
            indent=2,
            width=float("inf"),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as e:
        raise FormatParseError(f"Failed to stringify to YAML: {e}") from e


def is_valid_yaml(yaml_string: str) -> bool:
    try:
        yaml.safe_load(yaml_string)
        return True
    except yaml.YAMLError:
        return False


def safe_parse_yaml(yaml_string: str) -> Any | None:
    try:
        return yaml.safe_load(yaml_string)
    except yaml.YAMLError:
        return None


def is_likely_yaml(content: str) -> bool:
    return any(pattern.search(content) for pattern in _YAML_PATTERNS)


class YamlFormat(FormatStrategy):
    FORMAT_NAME = "yaml"
    LANGUAGE_TAGS = ("yaml", "yml")

    def looks_like(self, content: str) -> bool:
        return is_likely_yaml(content)

    def parse_block(self, content: str) -> ParsedCandidate:
        # Plain scalars parse as YAML too, but only mappings and sequences
        # count as structured content.
        try:
            value = yaml.safe_load(content)
        except yaml.YAMLError:
            return ParsedCandidate.failed(content)
        if isinstance(value, (dict, list)):
            return ParsedCandidate.ok(content, value)
        return ParsedCandidate.failed(content)

    def format_whole(self, raw_response: str) -> str:
        candidate = self.parse_block(raw_response)
        if candidate.success:
            return stringify_yaml(candidate.value)

        try:
            value = json.loads(raw_response)
        except ValueError:
            value = None
        if isinstance(value, (dict, list)):
            logger.debug("Response parsed as JSON, re-emitting as YAML")
            return stringify_yaml(value)

        return stringify_yaml({"response": raw_response.strip()})

    def format_single(self, candidate: ParsedCandidate, raw_response: str) -> str:
        if candidate.success:
            return stringify_yaml(candidate.value)
        return candidate.raw

    def format_many(self, candidates: list[ParsedCandidate], raw_response: str) -> str:
        entries = [c.value if c.success else {"content": c.raw} for c in candidates]
        return stringify_yaml(entries)


def format_as_yaml(raw_response: str, enable_block_parsing: bool = True) -> str:
    """
    Convert an agent response to YAML.

    Args:
        raw_response: The LLM response text
        enable_block_parsing: Extract ```yaml blocks; when False the trimmed
            response is returned untouched

    Returns:
        YAML text. Several blocks merge into a sequence with one entry per block.
    """
    return YamlFormat().format(raw_response, enable_block_parsing)
