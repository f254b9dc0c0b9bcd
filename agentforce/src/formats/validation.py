# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Validator wrappers around the format extractors.

Each validator runs its extractor with block parsing enabled and reports the
outcome as a ValidationResult. They never raise: any error becomes
is_valid=False with a best-effort content and the error message.
"""

import logging

from typing import Optional

from .base import resolve_output_format
from .errors import UnsupportedFormatError
from .html_format import HtmlInput, format_as_html
from .json_format import format_as_json
from .yaml_format import format_as_yaml, stringify_yaml
from .markdown_format import format_as_markdown
from ..types.format_types import HtmlFilterConfig, OutputFormat, ValidationResult

logger = logging.getLogger(__name__)


def validate_and_format_json(raw_response: str, as_object: bool = False) -> ValidationResult:
    try:
        return ValidationResult(is_valid=True, content=format_as_json(raw_response, True, as_object))
    except Exception as e:
        logger.warning(f"JSON validation failed: {e}")
        return ValidationResult(is_valid=False, content=raw_response.strip(), error=str(e))


def validate_and_format_yaml(raw_response: str) -> ValidationResult:
    try:
        return ValidationResult(is_valid=True, content=format_as_yaml(raw_response, True))
    except Exception as e:
        logger.warning(f"YAML validation failed: {e}")
        try:
            fallback = stringify_yaml({"response": raw_response.strip()})
        except Exception:
            fallback = raw_response.strip()
        return ValidationResult(is_valid=False, content=fallback, error=str(e))


def _best_effort_text(raw_response: HtmlInput) -> str:
    if isinstance(raw_response, bytes):
        return raw_response.decode("utf-8", "replace").strip()
    return raw_response.encode("utf-8", "replace").decode("utf-8").strip()


def validate_and_format_html(
    raw_response: HtmlInput, config: HtmlFilterConfig | dict | None = None
) -> ValidationResult:
    try:
        return ValidationResult(is_valid=True, content=format_as_html(raw_response, config, True))
    except Exception as e:
        logger.warning(f"HTML validation failed: {e}")
        return ValidationResult(is_valid=False, content=_best_effort_text(raw_response), error=str(e))


def validate_and_format_markdown(raw_response: str) -> ValidationResult:
    try:
        return ValidationResult(is_valid=True, content=format_as_markdown(raw_response, True))
    except Exception as e:
        logger.warning(f"Markdown validation failed: {e}")
        return ValidationResult(is_valid=False, content=raw_response.strip(), error=str(e))


def validate_response(
    raw_response: HtmlInput,
    output_format: OutputFormat | str,
    html_config: Optional[HtmlFilterConfig | dict] = None,
) -> ValidationResult:
    """Run the validator for `output_format`; plain text is always valid."""
    try:
        output_format = resolve_output_format(output_format)
    except UnsupportedFormatError as e:
        return ValidationResult(is_valid=False, content=None, error=str(e))

    if output_format == OutputFormat.JSON:
        return validate_and_format_json(raw_response)
    if output_format == OutputFormat.YAML:
        return validate_and_format_yaml(raw_response)
    if output_format == OutputFormat.HTML:
        return validate_and_format_html(raw_response, html_config)
    if output_format == OutputFormat.MARKDOWN:
        return validate_and_format_markdown(raw_response)
    return ValidationResult(is_valid=True, content=_best_effort_text(raw_response))
