# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .base_tool import BaseTool, tool_registry
from .filter_content import FilterContent

__all__ = ["BaseTool", "tool_registry", "FilterContent"]
