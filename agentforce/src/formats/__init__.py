# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Structured-output extraction for agent responses.

Importing this package registers the JSON, YAML, HTML and Markdown strategies
in `format_registry`; `format_response` dispatches to them by name.
"""

import logging

from typing import Any, Optional

from .base import FormatStrategy, format_registry, get_strategy, resolve_output_format
from .errors import FormattingError, FormatParseError, HtmlParseError, UnsupportedFormatError
from .fences import scan_fenced_blocks
from .json_format import (
    JsonFormat,
    format_as_json,
    parse_json,
    stringify_json,
    is_valid_json,
    safe_parse_json,
)
from .yaml_format import (
    YamlFormat,
    format_as_yaml,
    parse_yaml,
    stringify_yaml,
    is_valid_yaml,
    safe_parse_yaml,
)
from .html_format import (
    HtmlFormat,
    HtmlInput,
    format_as_html,
    extract_html_elements,
    safe_parse_html,
    is_valid_html,
    extract_text_from_html,
    extract_links_from_html,
)
from .markdown_format import MarkdownFormat, format_as_markdown
from .validation import (
    validate_and_format_json,
    validate_and_format_yaml,
    validate_and_format_html,
    validate_and_format_markdown,
    validate_response,
)
from ..types.format_types import HtmlFilterConfig, OutputFormat

logger = logging.getLogger(__name__)


def format_response(
    text: HtmlInput,
    output_format: OutputFormat | str,
    enable_block_parsing: bool = True,
    html_config: Optional[HtmlFilterConfig | dict] = None,
    as_object: bool = False,
) -> Any:
    """
    Format a raw model response into the requested output encoding.

    Args:
        text: The raw response
        output_format: An OutputFormat or its name (md / yml / txt aliases accepted)
        enable_block_parsing: Extract fenced blocks rather than using the whole text
        html_config: Element filter options for HTML output
        as_object: For JSON, return the parsed value instead of a string

    Raises:
        UnsupportedFormatError: unknown format name
        HtmlParseError: HTML output requested for undecodable or unparsable input
    """
    output_format = resolve_output_format(output_format)
    if output_format == OutputFormat.TEXT:
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FormatParseError(f"Failed to decode response as UTF-8: {e}") from e
        return text.strip()

    strategy = get_strategy(output_format.value, html_config=html_config, as_object=as_object)
    logger.debug(f"Formatting response as {output_format.value} with {type(strategy).__name__}")
    return strategy.format(text, enable_block_parsing)


__all__ = [
    "FormatStrategy",
    "format_registry",
    "get_strategy",
    "resolve_output_format",
    "format_response",
    "scan_fenced_blocks",
    "FormattingError",
    "FormatParseError",
    "HtmlParseError",
    "UnsupportedFormatError",
    "JsonFormat",
    "YamlFormat",
    "HtmlFormat",
    "MarkdownFormat",
    "format_as_json",
    "format_as_yaml",
    "format_as_html",
    "format_as_markdown",
    "parse_json",
    "stringify_json",
    "is_valid_json",
    "safe_parse_json",
    "parse_yaml",
    "stringify_yaml",
    "is_valid_yaml",
    "safe_parse_yaml",
    "extract_html_elements",
    "safe_parse_html",
    "is_valid_html",
    "extract_text_from_html",
    "extract_links_from_html",
    "validate_and_format_json",
    "validate_and_format_yaml",
    "validate_and_format_html",
    "validate_and_format_markdown",
    "validate_response",
]
