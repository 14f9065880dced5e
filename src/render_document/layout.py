"""Pagination and layout: flows titles, images and styled runs onto pages.

Every function takes the current RenderCursor and returns the advanced one.
Page breaks happen here and show up as a new ``page_index`` with ``y`` reset
to the top margin.
"""

import logging
from dataclasses import replace
from io import BytesIO
from typing import Optional, Sequence

from reportlab.lib.utils import ImageReader

from common.config import DeviceProfile
from common.dates import get_formatted_date
from common.errors import LayoutError
from common.utils import present
from extract_article.models import ArticleRecord
from render_document.flatten import flatten
from render_document.images import prepare_feature_image
from render_document.models import (
    BODY_FONT,
    LINK_COLOR,
    TITLE_FONT,
    ListBlock,
    ParagraphBreak,
    RenderCursor,
    RuleBreak,
    StyledRun,
    TextRun,
)
from render_document.surface import PageGeometry, PdfSurface
from render_document.text_layout import Line, ascent, line_height, text_height, wrap_pieces, wrap_text

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
MISSING_BODY_TEXT = "Could not parse article body."

PARAGRAPH_SPACING = 0.75
IMAGE_MAX_HEIGHT = 300

LIST_INDENT = 20
BULLET_RADIUS = 2.5
RULE_WIDTH = 0.5

INDEX_TITLE_SIZES = (42, 28, 22)
SECTION_TITLE_SIZES = (32, 20, 16)
INDEX_IMAGE_RESERVATION = 340
INDEX_TITLE_GAP = 20
INDEX_VERTICAL_OFFSET = 150

ICON_WIDTH = 120
ICON_HEIGHT = 160
ICON_SPACING = 80
ICON_TOP_GAP = 40
ICON_COLOR = "#333333"
ICON_SCREEN_COLOR = "#999999"


def byline_text(article: ArticleRecord) -> str:
    """``publication - MM/DD/YYYY`` with missing parts left out."""
    parts = []
    if present(article.publication_name):
        parts.append(article.publication_name.strip())
    formatted_date = get_formatted_date(article.publication_date)
    if formatted_date:
        parts.append(formatted_date)
    return " - ".join(parts)


def new_page(surface: PdfSurface, geometry: PageGeometry, cursor: Optional[RenderCursor] = None) -> RenderCursor:
    surface.start_page(geometry)
    base = cursor or RenderCursor(y=geometry.margins.top)
    return replace(base, y=geometry.margins.top, page_index=surface.page_count - 1)


def move_down(cursor: RenderCursor, lines: float = 1.0) -> RenderCursor:
    """Advance by ``lines`` line heights of the cursor's current font."""
    return replace(cursor, y=cursor.y + line_height(cursor.font, cursor.font_size) * lines)


def ensure_room(surface: PdfSurface, cursor: RenderCursor, height: float) -> RenderCursor:
    """Start a new page of the same geometry if ``height`` does not fit below the cursor."""
    geometry = surface.geometry
    if cursor.y + height > geometry.max_y and cursor.y > geometry.margins.top:
        return new_page(surface, geometry, cursor)
    return cursor


def draw_lines(
    surface: PdfSurface,
    cursor: RenderCursor,
    lines: Sequence[Line],
    size: float,
    line_gap: float = 0,
    align: str = "left",
    indent: float = 0,
) -> RenderCursor:
    geometry = surface.geometry
    left = geometry.margins.left + indent
    width = geometry.content_width - indent

    for line in lines:
        fonts = {segment.font for segment in line.segments}
        height = max(line_height(font, size) for font in fonts)
        baseline_offset = max(ascent(font, size) for font in fonts)

        cursor = ensure_room(surface, cursor, height)
        x = left + (width - line.width) / 2 if align == "center" else left
        baseline = cursor.y + baseline_offset

        for segment in line.segments:
            color = LINK_COLOR if segment.link else cursor.color
            surface.draw_text(x + segment.x, baseline, segment.text, segment.font, size, color)
            if segment.link:
                underline_y = baseline + size * 0.1
                surface.draw_line(
                    x + segment.x, underline_y, x + segment.x + segment.width, underline_y,
                    width=max(size / 20, 0.5), color=LINK_COLOR,
                )
                surface.link_url(segment.link, x + segment.x, cursor.y, segment.width, height)

        cursor = replace(cursor, y=cursor.y + height + line_gap, font=line.segments[-1].font, font_size=size)
    return cursor


def render_text(
    surface: PdfSurface,
    cursor: RenderCursor,
    text: str,
    font: str,
    size: float,
    align: str = "left",
    line_gap: float = 0,
    indent: float = 0,
) -> RenderCursor:
    cursor = replace(cursor, font=font, font_size=size)
    lines = wrap_text(text, font, size, surface.geometry.content_width - indent)
    return draw_lines(surface, cursor, lines, size, line_gap=line_gap, align=align, indent=indent)


def render_image(
    surface: PdfSurface,
    cursor: RenderCursor,
    data: bytes,
    align: str = "center",
    max_height: float = IMAGE_MAX_HEIGHT,
) -> RenderCursor:
    """Scale the image to fit content width x ``max_height`` and draw it.

    Raises:
        LayoutError: if the image cannot be read or drawn.
    """
    geometry = surface.geometry
    max_width = geometry.content_width
    try:
        image = ImageReader(BytesIO(data))
        image_width, image_height = image.getSize()
        scale = min(max_width / image_width, max_height / image_height)
        width, height = image_width * scale, image_height * scale

        cursor = ensure_room(surface, cursor, height)
        x = geometry.margins.left
        if align == "center":
            x += (max_width - width) / 2
        surface.draw_image(image, x, cursor.y, width, height)
    except Exception as e:
        raise LayoutError(f"Could not draw image: {e}") from e
    return replace(cursor, y=cursor.y + height)


def _render_rule(surface: PdfSurface, cursor: RenderCursor) -> RenderCursor:
    geometry = surface.geometry
    cursor = move_down(cursor, 1)
    cursor = ensure_room(surface, cursor, RULE_WIDTH)
    surface.draw_line(
        geometry.margins.left, cursor.y, geometry.width - geometry.margins.right, cursor.y,
        width=RULE_WIDTH, color="#000000",
    )
    return move_down(cursor, 1)


def _render_list(surface: PdfSurface, cursor: RenderCursor, block: ListBlock, size: float, line_gap: float) -> RenderCursor:
    geometry = surface.geometry
    bullet_indent = 0 if block.ordered else LIST_INDENT
    text_indent = bullet_indent + LIST_INDENT
    height = line_height(BODY_FONT, size)

    for number, item in enumerate(block.items, 1):
        lines = wrap_text(item, BODY_FONT, size, geometry.content_width - text_indent)
        if not lines:
            continue

        cursor = ensure_room(surface, replace(cursor, font=BODY_FONT, font_size=size), height)
        marker_x = geometry.margins.left + bullet_indent
        if block.ordered:
            surface.draw_text(marker_x, cursor.y + ascent(BODY_FONT, size), f"{number}.", BODY_FONT, size, cursor.color)
        else:
            surface.fill_circle(marker_x, cursor.y + height / 2, BULLET_RADIUS, cursor.color)

        cursor = draw_lines(surface, cursor, lines, size, line_gap=line_gap, indent=text_indent)
    return cursor


def render_runs(
    surface: PdfSurface,
    cursor: RenderCursor,
    profile: DeviceProfile,
    runs: Sequence[StyledRun],
) -> RenderCursor:
    """Lay out flattened article runs for one device profile."""
    size = profile.base_font_size
    line_gap = profile.line_gap
    width = surface.geometry.content_width
    cursor = replace(cursor, font=BODY_FONT, font_size=size)
    pending: list[TextRun] = []

    def flush(cursor: RenderCursor) -> RenderCursor:
        if not pending:
            return cursor
        indent = pending[0].indent
        pieces = [(run.text, run.font, run.link) for run in pending]
        pending.clear()
        lines = wrap_pieces(pieces, width - indent, size)
        return draw_lines(surface, cursor, lines, size, line_gap=line_gap, indent=indent)

    for run in runs:
        try:
            if isinstance(run, TextRun):
                pending.append(run)
                if run.is_block_terminal:
                    cursor = flush(cursor)
            elif isinstance(run, ParagraphBreak):
                cursor = move_down(flush(cursor), PARAGRAPH_SPACING)
            elif isinstance(run, RuleBreak):
                cursor = _render_rule(surface, flush(cursor))
            elif isinstance(run, ListBlock):
                cursor = _render_list(surface, flush(cursor), run, size, line_gap)
        except Exception as e:
            logger.warning("Skipping unrenderable block %r: %s", run, e)
            pending.clear()

    return flush(cursor)


def render_title_block(
    surface: PdfSurface,
    cursor: RenderCursor,
    article: ArticleRecord,
    sizes: tuple[float, float, float],
    align: str,
) -> RenderCursor:
    """Title, then author and byline when present."""
    title_size, author_size, byline_size = sizes
    cursor = render_text(surface, cursor, article.title or DEFAULT_TITLE, TITLE_FONT, title_size, align=align)
    cursor = move_down(cursor, 1)

    if present(article.author):
        cursor = render_text(surface, cursor, article.author.strip(), TITLE_FONT, author_size, align=align)

    byline = byline_text(article)
    if byline:
        cursor = render_text(surface, cursor, byline, BODY_FONT, byline_size, align=align)
    return cursor


def title_block_height(article: ArticleRecord, width: float) -> float:
    """Estimated height of the index page's title block, image included."""
    title_size, author_size, byline_size = INDEX_TITLE_SIZES
    height = INDEX_IMAGE_RESERVATION if present(article.feature_image_url) else 0
    height += text_height(article.title or DEFAULT_TITLE, TITLE_FONT, title_size, width)
    height += INDEX_TITLE_GAP

    if present(article.author):
        height += text_height(article.author.strip(), TITLE_FONT, author_size, width)

    byline = byline_text(article)
    if byline:
        height += text_height(byline, BODY_FONT, byline_size, width)
    return height


def draw_device_icon(
    surface: PdfSurface, x: float, y: float, width: float, height: float, label: str, destination: str
) -> None:
    """Tablet outline with a caption that links to ``destination``."""
    surface.stroke_rect(x, y, width, height, line_width=2, color=ICON_COLOR, radius=8)
    surface.stroke_rect(x + 6, y + 12, width - 12, height - 24, line_width=1, color=ICON_SCREEN_COLOR)
    surface.fill_circle(x + width / 2, y + height - 6, 2, ICON_COLOR)

    label_top = y + height / 2 - 6
    surface.draw_centred_text(
        x + width / 2, label_top + ascent(TITLE_FONT, 12), label, TITLE_FONT, 12, ICON_COLOR
    )
    surface.link_destination(destination, x, y, width, height)


def render_index_page(
    surface: PdfSurface,
    article: ArticleRecord,
    page_profile: DeviceProfile,
    profiles: Sequence[DeviceProfile],
    image: Optional[bytes] = None,
) -> RenderCursor:
    """Cover page: centred title block, feature image and one icon per device section."""
    geometry = PageGeometry.from_profile(page_profile)
    cursor = new_page(surface, geometry)

    block_height = title_block_height(article, geometry.content_width)
    start_y = geometry.margins.top + geometry.usable_height / 2 - block_height / 2 - INDEX_VERTICAL_OFFSET
    cursor = replace(cursor, y=max(start_y, geometry.margins.top))

    cursor = render_title_block(surface, cursor, article, INDEX_TITLE_SIZES, align="center")
    cursor = move_down(cursor, 2)

    if image:
        try:
            logger.info("Embedding image on index")
            cursor = render_image(surface, cursor, image, align="center")
            cursor = move_down(cursor, 2)
        except LayoutError as e:
            logger.warning("Could not load feature image on index: %s", e)

    total_width = ICON_WIDTH * len(profiles) + ICON_SPACING * (len(profiles) - 1)
    cursor = ensure_room(surface, cursor, ICON_TOP_GAP + ICON_HEIGHT)
    icon_y = cursor.y + ICON_TOP_GAP
    x = geometry.width / 2 - total_width / 2
    for profile in profiles:
        draw_device_icon(surface, x, icon_y, ICON_WIDTH, ICON_HEIGHT, profile.label, profile.destination)
        x += ICON_WIDTH + ICON_SPACING

    return replace(cursor, y=icon_y + ICON_HEIGHT)


def render_article(
    surface: PdfSurface,
    profile: DeviceProfile,
    article: ArticleRecord,
    image: Optional[bytes] = None,
) -> RenderCursor:
    """Full reflow of the article for one device, starting on a new page."""
    cursor = new_page(surface, PageGeometry.from_profile(profile))
    surface.add_destination(profile.destination)

    cursor = render_title_block(surface, cursor, article, SECTION_TITLE_SIZES, align="left")
    cursor = move_down(cursor, 2)

    if image:
        try:
            logger.info("Optimizing image for %s", profile.name)
            cursor = render_image(
                surface,
                cursor,
                prepare_feature_image(image, article.feature_image_url),
                align=profile.image_align,
            )
            cursor = move_down(cursor, 2)
        except LayoutError as e:
            logger.warning("Could not embed feature image: %s", e)

    if article.article_body_html and article.article_body_html.strip():
        return render_runs(surface, cursor, profile, flatten(article.article_body_html))

    logger.warning("Article body is missing, skipping body for %s", profile.name)
    return render_text(surface, cursor, MISSING_BODY_TEXT, BODY_FONT, profile.base_font_size)
