# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json

from abc import ABC, abstractmethod
from typing import Any, ClassVar
from pydantic import BaseModel


class ToolResult(BaseModel):
    """Outcome of one tool call, rendered back to the model as tagged sections."""

    tool_name: str
    success: bool
    duration: float = 0.0
    output: dict[str, Any] | str | None = None
    warnings: str | None = None
    errors: str | None = None

    @property
    def output_text(self) -> str | None:
        """The output as text; dict output is pretty-printed JSON."""
        if isinstance(self.output, dict):
            return json.dumps(self.output, indent=2, ensure_ascii=False, default=str)
        return self.output

    def sections(self) -> list[tuple[str, str]]:
        sections = [("STATUS", "SUCCESS" if self.success else "FAILURE")]
        optional = [("OUTPUT", self.output_text), ("WARNINGS", self.warnings), ("ERRORS", self.errors)]
        sections.extend((tag, value) for tag, value in optional if value is not None)
        sections.append(("DURATION", f"{self.duration:.3f}"))
        return sections

    def __str__(self):
        body = "\n".join(f"<{tag}>{value}</{tag}>" for tag, value in self.sections())
        return f'<TOOL_RESPONSE name="{self.tool_name}">\n{body}\n</TOOL_RESPONSE>'


class ToolInterface(BaseModel, ABC):
    """Abstract interface for all tools"""

    TOOL_NAME: ClassVar[str]
    TOOL_DESCRIPTION: ClassVar[str]

    class Config:
        extra = "forbid"

    @abstractmethod
    async def run(self) -> ToolResult:
        """Execute the tool's functionality"""
        pass

    @classmethod
    @abstractmethod
    def generate_examples(cls) -> list[tuple["ToolInterface", ToolResult]]:
        """Generate example uses of the tool with their expected outputs"""
        pass

    @classmethod
    @abstractmethod
    def to_prompt_format(cls) -> str:
        """Render the tool definition for a tool-use prompt."""
        pass
