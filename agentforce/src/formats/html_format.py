# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
HTML extraction and element filtering for LLM responses.

HTML is located the same way as the other formats (```html fences, or
untagged fences that contain tags), then every candidate is run through the
element filter, which parses it with BeautifulSoup and keeps only the
requested elements.

The filter and the extractor raise HtmlParseError when the input cannot be
decoded or parsed, or when a selector is invalid. The validator wrapper turns
that into an invalid result.
"""

import re
import logging

from typing import Optional, Union

from bs4 import BeautifulSoup, Doctype, Tag

from .base import FormatStrategy
from .errors import HtmlParseError
from ..types.format_types import HtmlFilterConfig, ParsedCandidate

logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)(?:\s[^<>]*)?/?>")
_DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE\s+html", re.IGNORECASE)

# Shorthand element names accepted in HtmlFilterConfig.elements
ELEMENT_ALIASES = {
    "links": "a",
    "styles": "style",
}

BLOCK_SEPARATOR = "\n\n---\n\n"

HtmlInput = Union[str, bytes]


def decode_html_input(content: HtmlInput) -> str:
    """Decode bytes as strict UTF-8 and reject text that cannot be re-encoded."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise HtmlParseError(f"Failed to decode HTML content: {e}") from e
    try:
        content.encode("utf-8")
    except UnicodeEncodeError as e:
        raise HtmlParseError(f"HTML content contains invalid characters: {e}") from e
    return content


def parse_html(content: HtmlInput) -> BeautifulSoup:
    text = decode_html_input(content)
    try:
        return BeautifulSoup(text, "html.parser")
    except Exception as e:
        raise HtmlParseError(f"Failed to parse HTML: {e}") from e


def has_html_tag(content: str) -> bool:
    return _TAG_PATTERN.search(content) is not None


def is_likely_html(content: str) -> bool:
    """A doctype, or at least two distinct tag names."""
    if _DOCTYPE_PATTERN.search(content):
        return True
    names = {m.group(1).lower() for m in _TAG_PATTERN.finditer(content)}
    return len(names) >= 2


def _ensure_body(soup: BeautifulSoup) -> None:
    """Wrap a fragment's top-level nodes in a <body> so the default selector matches."""
    if soup.body is not None:
        return
    container = soup.html or soup
    body = soup.new_tag("body")
    for child in list(container.contents):
        if isinstance(child, Doctype) or getattr(child, "name", None) == "head":
            continue
        body.append(child.extract())
    container.append(body)


def _build_selector(config: HtmlFilterConfig) -> Optional[str]:
    if config.selector and config.selector.strip():
        return config.selector
    elements = [ELEMENT_ALIASES.get(e.lower(), e) for e in config.element_list()]
    if elements:
        return ", ".join(elements)
    return None


def _render_node(node: Tag, config: HtmlFilterConfig) -> str:
    if config.text_only:
        return node.get_text().strip()
    if config.include_attributes:
        return str(node)

    inner = node.decode_contents()
    if inner.strip():
        return f"<{node.name}>{inner}</{node.name}>"
    text = node.get_text().strip()
    if text:
        return f"<{node.name}>{text}</{node.name}>"
    return ""


def _coerce_config(config: HtmlFilterConfig | dict | None) -> HtmlFilterConfig:
    if config is None:
        return HtmlFilterConfig()
    if isinstance(config, HtmlFilterConfig):
        return config
    return HtmlFilterConfig.model_validate(config)


def extract_html_elements(
    html_content: HtmlInput, config: HtmlFilterConfig | dict | None = None
) -> str:
    """
    Extract specific HTML elements from content.

    Removal runs first, then selection by `selector`, else by `elements`,
    else the document body. Each selected node is emitted as text
    (text_only), as its full markup (include_attributes) or as
    `<tag>inner</tag>` without attributes. Nodes without text are skipped.

    Args:
        html_content: HTML to filter
        config: Filter configuration (model or plain dict)

    Returns:
        The selected elements separated by blank lines

    Raises:
        HtmlParseError: undecodable input, parser failure or invalid selector
    """
    config = _coerce_config(config)
    soup = parse_html(html_content)

    try:
        for element in config.removal_list():
            for node in soup.select(element):
                if not node.decomposed:
                    node.decompose()

        selector = _build_selector(config)
        if selector is None:
            _ensure_body(soup)
            selector = "body"

        results = []
        for node in soup.select(selector):
            rendered = _render_node(node, config)
            if rendered:
                results.append(rendered)
    except Exception as e:
        raise HtmlParseError(f"Failed to extract HTML elements: {e}") from e

    return "\n\n".join(results)


def safe_parse_html(html_string: HtmlInput) -> BeautifulSoup | None:
    try:
        text = decode_html_input(html_string).strip()
        if not text:
            return None
        return parse_html(text)
    except HtmlParseError:
        return None


def is_valid_html(html_string: HtmlInput) -> bool:
    return safe_parse_html(html_string) is not None


def extract_text_from_html(html_string: HtmlInput, selector: Optional[str] = None) -> str:
    soup = parse_html(html_string)
    try:
        if selector:
            return "".join(node.get_text() for node in soup.select(selector)).strip()
        return soup.get_text().strip()
    except Exception as e:
        raise HtmlParseError(f"Failed to extract text from HTML: {e}") from e


def extract_links_from_html(html_string: HtmlInput) -> list[dict[str, str]]:
    """Return the {href, text} pairs of every anchor with a non-empty href."""
    soup = parse_html(html_string)
    links = []
    for anchor in soup.select("a[href]"):
        href = anchor.get("href") or ""
        if href:
            links.append({"href": href, "text": anchor.get_text().strip()})
    return links


class HtmlFormat(FormatStrategy):
    FORMAT_NAME = "html"
    LANGUAGE_TAGS = ("html", "htm")

    def __init__(self, filter_config: HtmlFilterConfig | dict | None = None):
        self.filter_config = _coerce_config(filter_config)

    @classmethod
    def from_options(cls, html_config: HtmlFilterConfig | dict | None = None, **options) -> "HtmlFormat":
        return cls(filter_config=html_config)

    def format(self, raw_response: HtmlInput, enable_block_parsing: bool = True) -> str:
        return super().format(decode_html_input(raw_response), enable_block_parsing)

    def format_unparsed(self, raw_response: str) -> str:
        return extract_html_elements(raw_response, self.filter_config)

    def looks_like(self, content: str) -> bool:
        return has_html_tag(content)

    def parse_block(self, content: str) -> ParsedCandidate:
        return ParsedCandidate.ok(content, extract_html_elements(content, self.filter_config))

    def format_whole(self, raw_response: str) -> str:
        if is_likely_html(raw_response):
            return extract_html_elements(raw_response, self.filter_config)
        return raw_response.strip()

    def format_single(self, candidate: ParsedCandidate, raw_response: str) -> str:
        if candidate.value.strip():
            return candidate.value
        return self.format_whole(raw_response)

    def format_many(self, candidates: list[ParsedCandidate], raw_response: str) -> str:
        parts = [c.value for c in candidates if c.value.strip()]
        if not parts:
            logger.debug("No HTML block produced output, falling back to the whole response")
            return self.format_whole(raw_response)
        return BLOCK_SEPARATOR.join(parts)


def format_as_html(
    raw_response: HtmlInput,
    filter_config: HtmlFilterConfig | dict | None = None,
    enable_block_parsing: bool = True,
) -> str:
    """
    Convert an agent response to filtered HTML.

    Args:
        raw_response: The LLM response (str, or UTF-8 bytes)
        filter_config: Element filtering options
        enable_block_parsing: Extract ```html blocks; when False the element
            filter runs over the whole response

    Returns:
        Filtered HTML; several blocks are joined with a `---` separator.
        Text that does not look like HTML is returned trimmed.

    Raises:
        HtmlParseError: the content cannot be decoded or parsed
    """
    return HtmlFormat(filter_config).format(raw_response, enable_block_parsing)
