"""Reduce sanitized article HTML to an ordered sequence of styled runs."""

import logging
import re
from dataclasses import replace
from typing import Optional

from common.html_tree import ALLOWED_TAGS, Node, parse_fragment
from render_document.models import ListBlock, ParagraphBreak, RuleBreak, StyledRun, TextRun

logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset(["p", "div"] + [f"h{level}" for level in range(1, 7)])
BOLD_TAGS = frozenset(["b", "strong"])
ITALIC_TAGS = frozenset(["i", "em"])
QUOTE_INDENT = 20

_WHITESPACE_RE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def _inline_runs(
    node: Node, bold: bool = False, italic: bool = False, link: Optional[str] = None
) -> list[TextRun]:
    """Non-terminal runs for an inline subtree, one per styled text node.

    Styles accumulate downwards, so ``<b><i>x</i></b>`` is bold-italic and a
    link nested in bold text keeps its target.
    """
    if node.is_text:
        text = collapse_whitespace(node.text)
        return [TextRun(text, bold=bold, italic=italic, link=link, is_block_terminal=False)] if text else []

    bold = bold or node.tag in BOLD_TAGS
    italic = italic or node.tag in ITALIC_TAGS
    if node.tag == "a" and link is None:
        link = node.attrs.get("href")

    runs = []
    for child in node.children:
        runs.extend(_inline_runs(child, bold, italic, link))
    return runs


def _terminate(runs: list[TextRun]) -> list[TextRun]:
    last = runs[-1]
    return runs[:-1] + [replace(last, is_block_terminal=True)]


def _flatten_block(node: Node) -> list[StyledRun]:
    if not node.text_content().strip():
        return []

    runs = []
    for child in node.children:
        runs.extend(_inline_runs(child))
    if not runs:
        return []
    return _terminate(runs) + [ParagraphBreak()]


def _flatten_node(node: Node) -> list[StyledRun]:
    if node.is_text:
        text = collapse_whitespace(node.text).strip()
        return [TextRun(text)] if text else []

    tag = node.tag
    if tag == "hr":
        return [RuleBreak()]

    if tag in BLOCK_TAGS:
        return _flatten_block(node)

    if tag in ("ul", "ol"):
        items = tuple(
            item for item in (collapse_whitespace(li.text_content()).strip() for li in node.iter("li")) if item
        )
        if not items:
            return []
        return [ListBlock(ordered=tag == "ol", items=items), ParagraphBreak()]

    if tag == "blockquote":
        text = collapse_whitespace(node.text_content()).strip()
        if not text:
            return []
        return [TextRun(f'"{text}"', italic=True, indent=QUOTE_INDENT), ParagraphBreak()]

    # Stray inline element or list item at the top level
    if not node.text_content().strip():
        return []
    return _terminate(_inline_runs(node))


def flatten(sanitized_html: Optional[str]) -> list[StyledRun]:
    """Flatten an HTML fragment into runs and block directives in reading order.

    A node that fails to flatten is skipped with a warning.
    """
    runs: list[StyledRun] = []
    for node in parse_fragment(sanitized_html, keep=ALLOWED_TAGS | {"div"}):
        try:
            runs.extend(_flatten_node(node))
        except Exception as e:
            logger.warning("Skipping unrenderable HTML node <%s>: %s", node.tag or "#text", e)
    return runs
