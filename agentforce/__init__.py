# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Response formatting for agent outputs: fenced block extraction, JSON / YAML /
HTML / Markdown reformatting, validation wrappers and the filter_content tool.
"""

__version__ = "0.1.0"
