# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Tests for the parsing utilities module.
"""
import pytest
from src.utils.parsing import extract_between_patterns, truncate


@pytest.mark.parametrize(
    "s, pattern_a, pattern_b, a_occ, b_occ, expected",
    [
        ("<A>x</A>", "<A>", "</A>", "first", "last", "x"),
        ("<A>x</A><A>y</A>", "<A>", "</A>", "first", "last", "x</A><A>y"),
        ("<A>x</A><A>y</A>", "<A>", "</A>", "first", "first", "x"),
        ("<A>x</A><A>y</A>", "<A>", "</A>", "last", "last", "y"),
        ("<A></A>", "<A>", "</A>", "first", "last", ""),
        ("no tags", "<A>", "</A>", "first", "last", None),
        ("</A> before <A>", "<A>", "</A>", "first", "first", None),
    ],
    ids=["basic", "first_last", "first_first", "last_last", "empty", "missing", "reversed"],
)
def test_extract_between_patterns(s, pattern_a, pattern_b, a_occ, b_occ, expected):
    assert extract_between_patterns(s, pattern_a, pattern_b, a_occ, b_occ) == expected


def test_extract_between_patterns_invalid_occurrence():
    with pytest.raises(ValueError):
        extract_between_patterns("x", "a", "b", a_occurrence="middle")


@pytest.mark.parametrize(
    "text, length, expected",
    [
        ("short", 10, "short"),
        ("exactly10!", 10, "exactly10!"),
        ("a longer sentence", 10, "a longe..."),
        ("abcdef", 2, "..."),
    ],
    ids=["shorter", "equal", "longer", "tiny_limit"],
)
def test_truncate(text, length, expected):
    assert truncate(text, length) == expected
