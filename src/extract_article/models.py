"""Data models for extract_article pipeline stage."""

from dataclasses import dataclass
from typing import Any, Optional

from common.utils import present

LOCAL_MODE = "local"
REMOTE_MODE = "remote"


def _optional_text(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not present(value):
        return None
    return value.strip()


@dataclass(frozen=True)
class ArticleRecord:
    """Canonical article produced by either extraction path."""
    title: str
    article_body_html: str
    author: Optional[str] = None
    publication_name: Optional[str] = None
    publication_date: Optional[str] = None
    feature_image_url: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "ArticleRecord":
        """Build a record from the camelCase JSON shape used by the extraction endpoint."""
        title = payload.get("title")
        body = payload.get("articleBodyHtml")
        return cls(
            title=title.strip() if isinstance(title, str) else "",
            article_body_html=body if isinstance(body, str) else "",
            author=_optional_text(payload.get("author")),
            publication_name=_optional_text(payload.get("publicationName")),
            publication_date=_optional_text(payload.get("publicationDate")),
            feature_image_url=_optional_text(payload.get("featureImageUrl")),
        )


@dataclass(frozen=True)
class HtmlSource:
    """Raw page HTML and the URL it was fetched from."""
    html: str
    url: str


@dataclass(frozen=True)
class PdfTextSource:
    """Text pulled from an uploaded PDF and the file's name."""
    text: str
    filename: str
