# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.


class FormattingError(Exception):
    """Base class for response formatting errors"""

    pass


class FormatParseError(FormattingError):
    """Raised when content cannot be parsed or serialised in a format"""

    pass


class HtmlParseError(FormatParseError):
    """Raised when HTML cannot be decoded, parsed or filtered"""

    pass


class UnsupportedFormatError(FormattingError, ValueError):
    """Raised for an unknown output format name"""

    pass
