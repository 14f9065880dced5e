"""Parse HTML fragments into a small node tree limited to an allow-list of tags.

The tree is what the sanitizer, the flattener and the reading view work on:
``Node(tag, attrs, children)`` for elements and ``Node(None, text=...)`` for
text. Tags outside the allow-list are unwrapped (their content is kept),
script-like tags are dropped with their content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from html import escape
from typing import Iterable, Iterator, Optional

from lxml import etree
from lxml import html as lxml_html

logger = logging.getLogger(__name__)

ALLOWED_TAGS = frozenset(
    ["p", "b", "strong", "i", "em", "ul", "ol", "li", "blockquote", "a", "hr"]
    + [f"h{level}" for level in range(1, 7)]
)

INLINE_TAGS = frozenset(["a", "b", "strong", "i", "em"])

VOID_TAGS = frozenset(["hr"])

DROPPED_TAGS = frozenset([
    "script", "style", "svg", "nav", "footer", "aside", "noscript", "iframe",
    "path", "symbol", "head", "title", "meta", "link", "img", "picture",
    "video", "audio", "source", "canvas", "template", "form", "button",
    "input", "select", "textarea", "object", "embed",
])

# Containers that, when unwrapped, still separate their content into paragraphs.
BLOCK_CONTAINERS = frozenset([
    "div", "section", "article", "main", "header", "figure", "figcaption",
    "pre", "address", "table", "thead", "tbody", "tr", "td", "th", "dl",
    "dt", "dd", "details", "summary", "center",
])


@dataclass
class Node:
    tag: Optional[str]
    attrs: dict[str, str] = field(default_factory=dict)
    children: list["Node"] = field(default_factory=list)
    text: str = ""

    @property
    def is_text(self) -> bool:
        return self.tag is None

    def text_content(self) -> str:
        if self.is_text:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def iter(self, tag: str) -> Iterator["Node"]:
        """Yield descendants with ``tag`` in document order."""
        for child in self.children:
            if child.tag == tag:
                yield child
            yield from child.iter(tag)


def _safe_href(href: Optional[str]) -> Optional[str]:
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith(("javascript:", "data:", "vbscript:")):
        return None
    return href


def _merge_text(nodes: list[Node]) -> list[Node]:
    merged: list[Node] = []
    for node in nodes:
        if node.is_text and merged and merged[-1].is_text:
            merged[-1] = Node(None, text=merged[-1].text + node.text)
        elif node.is_text and not node.text:
            continue
        else:
            merged.append(node)
    return merged


def _is_inline(node: Node) -> bool:
    return node.is_text or node.tag in INLINE_TAGS


def _blockify(nodes: list[Node]) -> list[Node]:
    """Group loose inline content of an unwrapped block container into paragraphs."""
    result: list[Node] = []
    pending: list[Node] = []

    def flush() -> None:
        if not pending:
            return
        if "".join(n.text_content() for n in pending).strip():
            result.append(Node("p", children=list(pending)))
        else:
            result.extend(pending)
        pending.clear()

    for node in nodes:
        if _is_inline(node):
            pending.append(node)
        else:
            flush()
            result.append(node)
    flush()
    return result


def _convert_children(element, keep: frozenset[str]) -> list[Node]:
    nodes: list[Node] = []
    if element.text:
        nodes.append(Node(None, text=element.text))
    for child in element:
        nodes.extend(_convert(child, keep))
        if child.tail:
            nodes.append(Node(None, text=child.tail))
    return _merge_text(nodes)


def _convert(element, keep: frozenset[str]) -> list[Node]:
    # Comments and processing instructions
    if not isinstance(element.tag, str):
        return []

    tag = element.tag.lower()
    if tag in DROPPED_TAGS:
        return []
    if tag == "br":
        return [Node(None, text=" ")]

    children = _convert_children(element, keep)

    if tag in keep:
        attrs = {}
        if tag == "a":
            href = _safe_href(element.get("href"))
            if href:
                attrs["href"] = href
        return [Node(tag, attrs, [] if tag in VOID_TAGS else children)]

    if tag in BLOCK_CONTAINERS:
        return _blockify(children)
    return children


def parse_fragment(html: Optional[str], keep: Iterable[str] = ALLOWED_TAGS) -> list[Node]:
    """Parse an HTML fragment into top-level nodes, keeping only ``keep`` tags."""
    if not html or not html.strip():
        return []

    try:
        root = lxml_html.fragment_fromstring(html, create_parent="div")
    except (etree.ParserError, ValueError) as e:
        logger.warning("Could not parse HTML fragment: %s", e)
        return []

    return _convert_children(root, frozenset(keep))


def to_html(nodes: list[Node]) -> str:
    """Serialize nodes back to HTML."""
    parts = []
    for node in nodes:
        if node.is_text:
            parts.append(escape(node.text, quote=False))
        elif node.tag in VOID_TAGS:
            parts.append(f"<{node.tag}>")
        else:
            attrs = "".join(f' {name}="{escape(value)}"' for name, value in node.attrs.items())
            parts.append(f"<{node.tag}{attrs}>{to_html(node.children)}</{node.tag}>")
    return "".join(parts)


def sanitize_html(html: Optional[str]) -> str:
    """Reduce ``html`` to the allow-listed tags, dropping every attribute but ``href``."""
    return to_html(parse_fragment(html)).strip()
