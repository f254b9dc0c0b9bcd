# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Markdown extraction: unwraps ```markdown blocks, keeping any code inside them."""

import logging

from .base import FormatStrategy
from ..types.format_types import ParsedCandidate

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n---\n\n"


class MarkdownFormat(FormatStrategy):
    FORMAT_NAME = "markdown"
    LANGUAGE_TAGS = ("markdown", "md")
    TRACK_NESTING = True

    def looks_like(self, content: str) -> bool:
        # Any prose is valid markdown, so untagged blocks are left alone
        return False

    def parse_block(self, content: str) -> ParsedCandidate:
        return ParsedCandidate.ok(content, content)

    def format_whole(self, raw_response: str) -> str:
        return raw_response.strip()

    def format_single(self, candidate: ParsedCandidate, raw_response: str) -> str:
        return candidate.value

    def format_many(self, candidates: list[ParsedCandidate], raw_response: str) -> str:
        return BLOCK_SEPARATOR.join(c.value for c in candidates)


def format_as_markdown(raw_response: str, enable_block_parsing: bool = True) -> str:
    """
    Convert an agent response to Markdown.

    Text inside ```markdown (or ```md) fences is returned without the fence;
    several such blocks are separated by a horizontal rule. Responses without
    such blocks are already Markdown and are returned trimmed.
    """
    return MarkdownFormat().format(raw_response, enable_block_parsing)
