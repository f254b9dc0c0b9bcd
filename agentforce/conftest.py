# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import sys
import logging

from pathlib import Path

import pytest

# Tests import the implementation as `src.…`
sys.path.insert(0, str(Path(__file__).resolve().parent))


@pytest.fixture
def multi_json_response():
    """A response with two fenced JSON blocks around some prose."""
    return (
        "First result:\n"
        "```json\n"
        '{"a": 1}\n'
        "```\n"
        "and the second:\n"
        "```json\n"
        '{"b": 2}\n'
        "```\n"
    )


@pytest.fixture
def html_page():
    return """<!DOCTYPE html>
<html>
<head><title>Page</title><style>p { color: red; }</style></head>
<body>
<h1 class="title">Welcome</h1>
<p id="intro">Hello <b>world</b></p>
<a href="https://example.com">Example</a>
<script>console.log("x")</script>
</body>
</html>"""


@pytest.fixture
def debug_logging(caplog):
    caplog.set_level(logging.DEBUG)
    return caplog
