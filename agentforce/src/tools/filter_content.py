# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json
import logging

from typing import Optional
from pydantic import Field

from .base_tool import BaseTool
from ..formats import format_response, resolve_output_format
from ..formats.errors import UnsupportedFormatError
from ..types.format_types import HtmlFilterConfig, OutputFormat
from ..types.tool_types import ToolResult

logger = logging.getLogger(__name__)


class FilterContent(BaseTool):
    TOOL_NAME = "filter_content"
    TOOL_DESCRIPTION = """Extract JSON, Markdown, YAML, or HTML content from text using code block parsing.
Filters code blocks like ```json, ```yaml, ```markdown, ```html and returns only the extracted content.
For HTML, can also filter specific elements like body, div, links, etc."""

    content: str = Field(..., description="The text content to filter and extract from")
    format: str = Field(
        ..., description="The format to extract (json, yaml, markdown, md, html)"
    )
    enable_code_block_parsing: bool = Field(
        True,
        description="Whether to extract content from code blocks. Set to false to return whole content.",
    )
    html_elements: Optional[str] = Field(
        None,
        description="For HTML format: Comma-separated list of HTML elements to extract (e.g. 'body,div,links'). 'links' selects <a> tags, 'styles' selects <style> tags.",
    )
    html_text_only: bool = Field(
        False, description="For HTML format: Extract only text content without HTML tags."
    )
    html_include_attributes: bool = Field(
        False, description="For HTML format: Include HTML attributes in the extracted content."
    )
    html_selector: Optional[str] = Field(
        None, description="For HTML format: Custom CSS selector for more precise element selection."
    )
    html_remove_elements: Optional[str] = Field(
        None,
        description="For HTML format: Comma-separated list of elements to remove before processing (e.g. 'script,style').",
    )

    def html_config(self) -> HtmlFilterConfig:
        return HtmlFilterConfig(
            elements=self.html_elements,
            selector=self.html_selector,
            text_only=self.html_text_only,
            include_attributes=self.html_include_attributes,
            remove_elements=self.html_remove_elements,
        )

    async def run(self) -> ToolResult:
        if not self.content:
            return ToolResult(
                tool_name=self.TOOL_NAME,
                success=False,
                errors="Content must be a non-empty string",
            )

        try:
            output_format = resolve_output_format(self.format)
        except UnsupportedFormatError:
            output_format = None
        # Plain text is a dispatcher format but not something to extract
        if output_format in (None, OutputFormat.TEXT):
            return ToolResult(
                tool_name=self.TOOL_NAME,
                success=False,
                errors=f"Unsupported format: {self.format}. Supported formats: json, yaml, markdown, md, html",
            )

        try:
            extracted = format_response(
                self.content,
                output_format,
                enable_block_parsing=self.enable_code_block_parsing,
                html_config=self.html_config(),
            )
        except Exception as e:
            logger.warning(f"filter_content failed: {e}")
            return ToolResult(
                tool_name=self.TOOL_NAME,
                success=False,
                output={"format": self.format, "content": self.content},
                errors=f"Failed to filter content: {e}",
            )

        extracted_length = (
            len(extracted) if isinstance(extracted, str) else len(json.dumps(extracted))
        )
        return ToolResult(
            tool_name=self.TOOL_NAME,
            success=True,
            output={
                "format": output_format.value,
                "original_length": len(self.content),
                "extracted_length": extracted_length,
                "was_extracted": self.enable_code_block_parsing
                and extracted != self.content.strip(),
                "code_block_parsing_enabled": self.enable_code_block_parsing,
                "content": extracted,
            },
        )

    @classmethod
    def generate_examples(cls) -> list[tuple["FilterContent", ToolResult]]:
        return [
            (
                cls(
                    content='Here is the result:\n```json\n{"name": "John", "age": 30}\n```',
                    format="json",
                ),
                ToolResult(
                    tool_name=cls.TOOL_NAME,
                    success=True,
                    output={
                        "format": "json",
                        "original_length": 59,
                        "extracted_length": 24,
                        "was_extracted": True,
                        "code_block_parsing_enabled": True,
                        "content": '{"name":"John","age":30}',
                    },
                ),
            ),
            (
                cls(
                    content="<div><p>Hello</p><a href='/home'>Home</a></div>",
                    format="html",
                    html_elements="links",
                    html_text_only=True,
                ),
                ToolResult(
                    tool_name=cls.TOOL_NAME,
                    success=True,
                    output={
                        "format": "html",
                        "original_length": 47,
                        "extracted_length": 4,
                        "was_extracted": True,
                        "code_block_parsing_enabled": True,
                        "content": "Home",
                    },
                ),
            ),
        ]
