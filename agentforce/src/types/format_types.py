# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Data records shared by the fence scanner, format strategies and validators."""

from enum import Enum
from typing import Any, Optional, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class OutputFormat(str, Enum):
    """Output encodings a response can be formatted into"""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"
    HTML = "html"


class FencedBlock(BaseModel):
    """A backtick-fenced span found in free text."""

    language: Optional[str] = Field(
        None, description="First token after the opening fence, None if untagged"
    )
    content: str = Field(description="Block body, preserved verbatim")
    start_index: int = Field(description="Offset of the opening backticks")
    end_index: int = Field(
        description="Offset just past the closing fence, or the input length"
    )
    terminated: bool = True

    @property
    def is_untagged(self) -> bool:
        return self.language is None

    def has_language(self, *names: str) -> bool:
        """Case-insensitive check of the block's language tag."""
        if self.language is None:
            return False
        return self.language.lower() in {n.lower() for n in names}


class ParsedCandidate(BaseModel):
    """Outcome of parsing one candidate text under a target format.

    Either a parsed value (success=True) or a failure carrying the raw text,
    so that multi-block merges never need exceptions to coerce bad blocks.
    """

    raw: str
    success: bool
    value: Any = None

    @classmethod
    def ok(cls, raw: str, value: Any) -> "ParsedCandidate":
        return cls(raw=raw, success=True, value=value)

    @classmethod
    def failed(cls, raw: str) -> "ParsedCandidate":
        return cls(raw=raw, success=False)


def _split_names(value: Optional[Union[list[str], str]]) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [v.strip() for v in value if v and v.strip()]


class HtmlFilterConfig(BaseModel):
    """Element filtering options for HTML output. Accepts snake_case or camelCase keys."""

    elements: Optional[Union[list[str], str]] = None
    selector: Optional[str] = None
    text_only: bool = False
    include_attributes: bool = False
    remove_elements: Optional[Union[list[str], str]] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def element_list(self) -> list[str]:
        return _split_names(self.elements)

    def removal_list(self) -> list[str]:
        return _split_names(self.remove_elements)


class ValidationResult(BaseModel):
    """Pass / fail wrapper around a formatted output."""

    is_valid: bool
    content: Any = None
    error: Optional[str] = None
