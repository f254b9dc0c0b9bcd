# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Fenced code block scanning.

LLM responses interleave prose with Markdown-style code fences. The scanner
walks the text line by line and returns every fenced span in order of
appearance, together with its language tag. It never looks at what is inside a
block; deciding whether the content is JSON, YAML or HTML is left to the
format strategies.

Closing is greedy: the first line made only of backticks ends the block, so an
inner untagged fence closes the outer one. Unterminated blocks run to the end
of the input. Markdown blocks need the opposite behaviour (they routinely
contain inner code), which `track_nesting=True` provides.
"""

import re
import logging

from typing import Optional

from ..types.format_types import FencedBlock

logger = logging.getLogger(__name__)

FENCE = "```"
_CLOSING_FENCE = re.compile(r"^`{3,}$")


def is_closing_fence(line: str) -> bool:
    return bool(_CLOSING_FENCE.match(line.strip()))


def match_opening_fence(line: str) -> Optional[tuple[int, Optional[str]]]:
    """
    Check whether a line opens a fenced block.

    Returns (column of the backticks, language tag or None), or None if the
    line does not open a block. A backtick triple later on the same line makes
    it an inline code span instead.
    """
    column = line.find(FENCE)
    if column == -1:
        return None

    rest = line[column:].lstrip("`")
    if FENCE in rest:
        return None

    tokens = rest.strip().split()
    return column, (tokens[0] if tokens else None)


def scan_fenced_blocks(text: str, track_nesting: bool = False) -> list[FencedBlock]:
    """
    Return the fenced blocks of `text` in order of appearance.

    Args:
        text: Free text, possibly containing fenced blocks
        track_nesting: Keep inner tagged fences (and their closers) inside the
            enclosing block instead of closing on the first bare fence

    Returns:
        List of FencedBlock; empty when the text has no fences
    """
    lines = text.split("\n")
    offsets = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1

    blocks: list[FencedBlock] = []
    i = 0
    while i < len(lines):
        opening = match_opening_fence(lines[i])
        if opening is None:
            i += 1
            continue

        column, language = opening
        start_index = offsets[i] + column
        end_index = len(text)
        terminated = False
        content_lines: list[str] = []
        depth = 0
        i += 1

        while i < len(lines):
            line = lines[i].rstrip("\r")
            if is_closing_fence(line):
                if depth == 0:
                    end_index = offsets[i] + len(lines[i])
                    terminated = True
                    break
                depth -= 1
            elif track_nesting and line.lstrip().startswith(FENCE):
                # inner openers must start the line; inline ```lang in prose is content
                inner = match_opening_fence(line)
                if inner is not None and inner[1] is not None:
                    depth += 1
            content_lines.append(line)
            i += 1

        if not terminated:
            logger.debug(f"Unterminated fence opened at offset {start_index}")

        blocks.append(
            FencedBlock(
                language=language,
                content="\n".join(content_lines),
                start_index=start_index,
                end_index=end_index,
                terminated=terminated,
            )
        )
        i += 1

    return blocks
