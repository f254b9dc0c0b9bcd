# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Base strategy interface for extracting one format out of free-form LLM text."""

import logging

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .fences import scan_fenced_blocks
from .errors import UnsupportedFormatError
from ..types.format_types import FencedBlock, OutputFormat, ParsedCandidate

logger = logging.getLogger(__name__)

# Populated by FormatStrategy subclasses as they are defined.
format_registry: dict[str, type["FormatStrategy"]] = {}


class FormatStrategy(ABC):
    """
    Three-tier extraction contract shared by every format.

    1. No qualifying fenced block: handle the whole response (parse if
       possible, otherwise pass it through).
    2. One qualifying block: format that block on its own.
    3. Several blocks: merge them into a single output.

    Subclasses declare which language tags they accept and how to sniff
    untagged blocks, then implement the tier handlers.
    """

    FORMAT_NAME: ClassVar[str]
    LANGUAGE_TAGS: ClassVar[tuple[str, ...]]
    TRACK_NESTING: ClassVar[bool] = False

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        format_registry[cls.FORMAT_NAME] = cls

    @classmethod
    def from_options(cls, **options) -> "FormatStrategy":
        """Build a strategy, ignoring options that do not apply to this format."""
        return cls()

    def select_blocks(self, text: str) -> list[FencedBlock]:
        selected = []
        for block in scan_fenced_blocks(text, track_nesting=self.TRACK_NESTING):
            if not block.content.strip():
                continue
            if block.has_language(*self.LANGUAGE_TAGS):
                selected.append(block)
            elif block.is_untagged and self.looks_like(block.content):
                selected.append(block)
        return selected

    def format(self, raw_response: str, enable_block_parsing: bool = True) -> Any:
        if not enable_block_parsing:
            return self.format_unparsed(raw_response)

        blocks = self.select_blocks(raw_response)
        logger.debug(f"{self.FORMAT_NAME}: {len(blocks)} qualifying block(s)")

        if not blocks:
            return self.format_whole(raw_response)

        candidates = [self.parse_block(block.content.strip()) for block in blocks]
        if len(candidates) == 1:
            return self.format_single(candidates[0], raw_response)

        failed = sum(1 for c in candidates if not c.success)
        if failed:
            logger.warning(
                f"{self.FORMAT_NAME}: {failed} of {len(candidates)} blocks did not parse and were kept as raw content"
            )
        return self.format_many(candidates, raw_response)

    def format_unparsed(self, raw_response: str) -> Any:
        """Output when block parsing is disabled."""
        return raw_response.strip()

    # Abstract methods --------------------------------------------------------

    @abstractmethod
    def looks_like(self, content: str) -> bool:
        """Heuristic sniff for untagged blocks"""
        pass

    @abstractmethod
    def parse_block(self, content: str) -> ParsedCandidate:
        pass

    @abstractmethod
    def format_whole(self, raw_response: str) -> Any:
        pass

    @abstractmethod
    def format_single(self, candidate: ParsedCandidate, raw_response: str) -> Any:
        pass

    @abstractmethod
    def format_many(self, candidates: list[ParsedCandidate], raw_response: str) -> Any:
        pass


_FORMAT_ALIASES = {
    "md": OutputFormat.MARKDOWN,
    "yml": OutputFormat.YAML,
    "txt": OutputFormat.TEXT,
}


def resolve_output_format(name: OutputFormat | str) -> OutputFormat:
    """Map a format name (case-insensitive, aliases allowed) to an OutputFormat."""
    if isinstance(name, OutputFormat):
        return name
    key = str(name).strip().lower()
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    try:
        return OutputFormat(key)
    except ValueError:
        supported = ", ".join(f.value for f in OutputFormat)
        raise UnsupportedFormatError(f"Unsupported format: {name}. Supported formats: {supported}")


def get_strategy(name: str, **options) -> FormatStrategy:
    strategy_cls = format_registry.get(name)
    if strategy_cls is None:
        raise UnsupportedFormatError(
            f"Unsupported format: {name}. Supported formats: {', '.join(sorted(format_registry))}"
        )
    return strategy_cls.from_options(**options)
