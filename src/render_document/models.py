"""Data models for render_document pipeline stage."""

from dataclasses import dataclass
from typing import Optional, Union

BODY_FONT = "Times-Roman"
TITLE_FONT = "Helvetica-Bold"
ITALIC_FONT = "Times-Italic"
BOLD_FONT = "Times-Bold"
BOLD_ITALIC_FONT = "Times-BoldItalic"

LINK_COLOR = "#0000FF"
TEXT_COLOR = "#000000"


def font_for(bold: bool, italic: bool) -> str:
    if bold and italic:
        return BOLD_ITALIC_FONT
    if bold:
        return BOLD_FONT
    if italic:
        return ITALIC_FONT
    return BODY_FONT


@dataclass(frozen=True)
class TextRun:
    """Text sharing one style inside a block.

    Runs with ``is_block_terminal=False`` continue on the same line as the next run.
    """
    text: str
    bold: bool = False
    italic: bool = False
    link: Optional[str] = None
    is_block_terminal: bool = True
    indent: float = 0.0

    @property
    def font(self) -> str:
        return font_for(self.bold, self.italic)


@dataclass(frozen=True)
class ParagraphBreak:
    """End of a paragraph, list or quote."""


@dataclass(frozen=True)
class RuleBreak:
    """Horizontal rule."""


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[str, ...]


StyledRun = Union[TextRun, ParagraphBreak, RuleBreak, ListBlock]


@dataclass(frozen=True)
class RenderCursor:
    """Position of the next thing to draw.

    ``y`` is measured from the top edge of the current page.
    """
    y: float
    page_index: int = 0
    font: str = BODY_FONT
    font_size: float = 12
    color: str = TEXT_COLOR
