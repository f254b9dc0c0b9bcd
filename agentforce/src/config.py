# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Command line configuration.
"""

import argparse

from dataclasses import dataclass
from typing import List, Optional

from .types.format_types import HtmlFilterConfig


@dataclass
class FormatterConfig:
    """Configuration for a single format / validate run"""

    command: str = "format"
    output_format: str = "json"
    input_path: Optional[str] = None  # None reads stdin
    enable_block_parsing: bool = True

    # HTML filter options
    html_elements: List[str] = None
    html_selector: Optional[str] = None
    html_text_only: bool = False
    html_include_attributes: bool = False
    html_remove: List[str] = None

    log_level: str = "WARNING"

    def __post_init__(self):
        if self.html_elements is None:
            self.html_elements = []
        if self.html_remove is None:
            self.html_remove = []
        self.log_level = self.log_level.upper()

    @property
    def validate(self) -> bool:
        return self.command == "validate"

    def html_filter(self) -> HtmlFilterConfig:
        return HtmlFilterConfig(
            elements=self.html_elements or None,
            selector=self.html_selector,
            text_only=self.html_text_only,
            include_attributes=self.html_include_attributes,
            remove_elements=self.html_remove or None,
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "FormatterConfig":
        return cls(
            command=args.command,
            output_format=args.format,
            input_path=args.input,
            enable_block_parsing=not args.no_block_parsing,
            html_elements=args.html_elements,
            html_selector=args.html_selector,
            html_text_only=args.html_text_only,
            html_include_attributes=args.html_include_attributes,
            html_remove=args.html_remove,
            log_level=args.log_level,
        )
