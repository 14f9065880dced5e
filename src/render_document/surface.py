"""Drawing surface over a reportlab canvas, addressed top-down like the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from pypdf import PdfReader, PdfWriter
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from common.config import DeviceProfile, Margins


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    margins: Margins

    @classmethod
    def from_profile(cls, profile: DeviceProfile) -> "PageGeometry":
        return cls(profile.page_width, profile.page_height, profile.margins)

    @property
    def content_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    @property
    def usable_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def max_y(self) -> float:
        return self.height - self.margins.bottom


class PdfSurface:
    """One output document. ``y`` arguments are distances from the page top."""

    def __init__(self, title: Optional[str] = None, author: Optional[str] = None):
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer)
        self._page_open = False
        self.page_count = 0
        self.geometry: Optional[PageGeometry] = None
        self.destinations: dict[str, int] = {}
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)

    def start_page(self, geometry: PageGeometry) -> None:
        if self._page_open:
            self._canvas.showPage()
        self._canvas.setPageSize((geometry.width, geometry.height))
        self.geometry = geometry
        self._page_open = True
        self.page_count += 1

    def _pdf_y(self, y: float) -> float:
        return self.geometry.height - y

    def add_destination(self, name: str) -> None:
        """Named destination at the top of the current page.

        reportlab resolves the name for internal links only; the catalog entry
        is written in ``finish``.
        """
        self._canvas.bookmarkPage(name, fit="XYZ", left=0, top=self.geometry.height)
        self.destinations[name] = self.page_count - 1

    def draw_text(self, x: float, baseline: float, text: str, font: str, size: float, color: str) -> None:
        self._canvas.setFont(font, size)
        self._canvas.setFillColor(HexColor(color))
        self._canvas.drawString(x, self._pdf_y(baseline), text)

    def draw_centred_text(
        self, center_x: float, baseline: float, text: str, font: str, size: float, color: str
    ) -> None:
        self._canvas.setFont(font, size)
        self._canvas.setFillColor(HexColor(color))
        self._canvas.drawCentredString(center_x, self._pdf_y(baseline), text)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, width: float, color: str) -> None:
        self._canvas.setLineWidth(width)
        self._canvas.setStrokeColor(HexColor(color))
        self._canvas.line(x1, self._pdf_y(y1), x2, self._pdf_y(y2))

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, line_width: float, color: str, radius: float = 0
    ) -> None:
        self._canvas.setLineWidth(line_width)
        self._canvas.setStrokeColor(HexColor(color))
        bottom = self._pdf_y(y + height)
        if radius:
            self._canvas.roundRect(x, bottom, width, height, radius, stroke=1, fill=0)
        else:
            self._canvas.rect(x, bottom, width, height, stroke=1, fill=0)

    def fill_circle(self, x: float, y: float, radius: float, color: str) -> None:
        self._canvas.setFillColor(HexColor(color))
        self._canvas.circle(x, self._pdf_y(y), radius, stroke=0, fill=1)

    def draw_image(self, image: ImageReader, x: float, y: float, width: float, height: float) -> None:
        self._canvas.drawImage(image, x, self._pdf_y(y + height), width=width, height=height)

    def link_url(self, url: str, x: float, y: float, width: float, height: float) -> None:
        rect = (x, self._pdf_y(y + height), x + width, self._pdf_y(y))
        self._canvas.linkURL(url, rect, relative=0, thickness=0)

    def link_destination(self, name: str, x: float, y: float, width: float, height: float) -> None:
        rect = (x, self._pdf_y(y + height), x + width, self._pdf_y(y))
        self._canvas.linkRect("", name, Rect=rect, relative=0, thickness=0)

    def finish(self) -> bytes:
        """Close the last page and return the PDF bytes."""
        if self._page_open:
            self._canvas.showPage()
            self._page_open = False
        self._canvas.save()
        if not self.destinations:
            return self._buffer.getvalue()
        return _with_named_destinations(self._buffer.getvalue(), self.destinations)


def _with_named_destinations(data: bytes, destinations: dict[str, int]) -> bytes:
    """Register ``name -> page index`` entries in the document catalog."""
    reader = PdfReader(BytesIO(data))
    writer = PdfWriter(clone_from=reader)
    if reader.metadata:
        writer.add_metadata(dict(reader.metadata))
    for name, page_index in destinations.items():
        writer.add_named_destination(name, page_index)

    out = BytesIO()
    writer.write(out)
    return out.getvalue()
