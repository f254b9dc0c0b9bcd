# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Command line interface: format or validate a model response read from a file
or stdin.

    python -m agentforce format --format yaml --input response.txt
    cat page.txt | python -m agentforce format --format html --html-elements links
    python -m agentforce validate --format json --input response.txt
"""

import sys
import json
import logging
import argparse

from pathlib import Path
from typing import Optional, Sequence

from .config import FormatterConfig
from .formats import format_response, validate_response
from .formats.errors import FormattingError
from .types.format_types import OutputFormat

logger = logging.getLogger(__name__)


def _comma_list(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def setup_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentforce",
        description="Extract structured output (JSON, YAML, HTML, Markdown) from agent responses",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    format_parser = subparsers.add_parser("format", help="Print the formatted response")
    validate_parser = subparsers.add_parser(
        "validate", help="Print a validation result as JSON; exit code 1 when invalid"
    )

    formats = [f.value for f in OutputFormat] + ["md", "yml", "txt"]
    for sub in (format_parser, validate_parser):
        sub.add_argument(
            "--format", type=str.lower, choices=formats, default="json", help="Output format"
        )
        sub.add_argument(
            "--input", type=str, default=None, help="Path to the response file (default: stdin)"
        )
        sub.add_argument(
            "--no-block-parsing",
            action="store_true",
            help="Use the whole response instead of extracting fenced code blocks",
        )
        sub.add_argument(
            "--html-elements",
            type=_comma_list,
            default=None,
            help="Comma-separated elements to keep ('links' for <a>, 'styles' for <style>)",
        )
        sub.add_argument("--html-selector", type=str, default=None, help="CSS selector for HTML output")
        sub.add_argument("--html-text-only", action="store_true", help="Keep only the text of HTML elements")
        sub.add_argument(
            "--html-include-attributes", action="store_true", help="Keep HTML attributes in the output"
        )
        sub.add_argument(
            "--html-remove",
            type=_comma_list,
            default=None,
            help="Comma-separated elements to remove before selection (e.g. script,style)",
        )
        sub.add_argument(
            "--log-level",
            type=str.upper,
            default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Logging level",
        )

    return parser


def configure_logging(config: FormatterConfig) -> None:
    logging.captureWarnings(True)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(filename)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def read_input(input_path: Optional[str]) -> str:
    if input_path is None:
        return sys.stdin.read()
    return Path(input_path).read_text(encoding="utf-8")


def run(config: FormatterConfig) -> int:
    """Execute one format / validate run and return the process exit code."""
    try:
        raw_response = read_input(config.input_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    if config.validate:
        result = validate_response(raw_response, config.output_format, config.html_filter())
        print(result.model_dump_json(indent=2))
        return 0 if result.is_valid else 1

    try:
        output = format_response(
            raw_response,
            config.output_format,
            enable_block_parsing=config.enable_block_parsing,
            html_config=config.html_filter(),
        )
    except FormattingError as e:
        logger.error(f"Formatting failed: {e}")
        return 1

    if not isinstance(output, str):
        output = json.dumps(output, indent=2, ensure_ascii=False)
    print(output)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = setup_parser()
    args = parser.parse_args(argv)
    config = FormatterConfig.from_args(args)
    configure_logging(config)
    logger.debug(f"Running with {config}")
    return run(config)
