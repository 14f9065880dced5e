"""Word wrapping and text measurement with reportlab font metrics."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from reportlab.pdfbase.pdfmetrics import getAscentDescent, stringWidth

_TOKEN_RE = re.compile(r"\S+\s*|\s+")
_WHITESPACE_RE = re.compile(r"\s+")

# (text, font name, link target)
Piece = tuple[str, str, Optional[str]]


@dataclass(frozen=True)
class Segment:
    """Text drawn in one font on one line; ``x`` is relative to the line start."""
    text: str
    font: str
    link: Optional[str]
    x: float
    width: float


@dataclass(frozen=True)
class Line:
    segments: tuple[Segment, ...]
    width: float

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)


def line_height(font: str, size: float) -> float:
    ascent, descent = getAscentDescent(font, size)
    return ascent - descent


def ascent(font: str, size: float) -> float:
    return getAscentDescent(font, size)[0]


def _split_word(word: str, font: str, size: float, max_width: float) -> list[str]:
    """Break a word wider than the line into chunks that fit."""
    chunks = []
    current = ""
    for char in word:
        if current and stringWidth(current + char, font, size) > max_width:
            chunks.append(current)
            current = char
        else:
            current += char
    if current:
        chunks.append(current)
    return chunks


def _build_line(tokens: list[tuple[str, str, Optional[str]]], size: float) -> Line:
    # Merge neighbouring tokens that share font and link
    merged: list[list] = []
    for text, font, link in tokens:
        if merged and merged[-1][1] == font and merged[-1][2] == link:
            merged[-1][0] += text
        else:
            merged.append([text, font, link])

    if merged:
        merged[-1][0] = merged[-1][0].rstrip()

    segments = []
    x = 0.0
    for text, font, link in merged:
        if not text:
            continue
        width = stringWidth(text, font, size)
        segments.append(Segment(text=text, font=font, link=link, x=x, width=width))
        x += width
    return Line(segments=tuple(segments), width=x)


def wrap_pieces(pieces: Iterable[Piece], max_width: float, size: float) -> list[Line]:
    """Greedy word wrap of styled pieces that flow on the same lines.

    Whitespace is normalised to single spaces; lines never start with a space.
    """
    lines: list[Line] = []
    current: list[tuple[str, str, Optional[str]]] = []
    width = 0.0

    def flush() -> None:
        nonlocal current, width
        line = _build_line(current, size)
        if line.segments:
            lines.append(line)
        current = []
        width = 0.0

    for text, font, link in pieces:
        for token in _TOKEN_RE.findall(text):
            token = _WHITESPACE_RE.sub(" ", token)
            word = token.rstrip()

            if not current and not word:
                continue

            word_width = stringWidth(word, font, size)
            if current and width + word_width > max_width:
                flush()
                if not word:
                    continue

            if not current and word_width > max_width:
                chunks = _split_word(word, font, size, max_width)
                for chunk in chunks[:-1]:
                    current.append((chunk, font, link))
                    flush()
                token = chunks[-1] + token[len(word):]

            current.append((token, font, link))
            width += stringWidth(token, font, size)

    if current:
        flush()
    return lines


def wrap_text(text: str, font: str, size: float, max_width: float) -> list[Line]:
    return wrap_pieces([(text, font, None)], max_width, size)


def text_height(text: str, font: str, size: float, max_width: float, line_gap: float = 0) -> float:
    """Height ``text`` occupies when wrapped to ``max_width``."""
    lines = wrap_text(text, font, size, max_width)
    return len(lines) * (line_height(font, size) + line_gap)
