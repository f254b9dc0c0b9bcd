# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Some string utilities used by the tool-call parser and the CLI.
"""

from typing import Literal


def extract_between_patterns(
    s: str,
    pattern_a: str,
    pattern_b: str,
    a_occurrence: Literal["first"] | Literal["last"] = "first",
    b_occurrence: Literal["first"] | Literal["last"] = "last",
) -> str | None:
    """Return the text between pattern_a and pattern_b, or None if either is missing."""
    if a_occurrence not in ("first", "last"):
        raise ValueError("Invalid value for a_occurrence. Use 'first' or 'last'.")
    if b_occurrence not in ("first", "last"):
        raise ValueError("Invalid value for b_occurrence. Use 'first' or 'last'.")

    start_index = s.find(pattern_a) if a_occurrence == "first" else s.rfind(pattern_a)
    if start_index == -1:
        return None
    start_index += len(pattern_a)

    end_index = s.find(pattern_b, start_index) if b_occurrence == "first" else s.rfind(pattern_b)
    if end_index == -1 or end_index < start_index:
        return None

    return s[start_index:end_index]


def truncate(text: str, length: int) -> str:
    """Shorten text to at most `length` characters, the last three being '...'."""
    if len(text) <= length:
        return text
    return text[: max(length - 3, 0)] + "..."
