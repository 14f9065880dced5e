"""Local article extraction with readability-lxml."""

import logging
from typing import Optional
from urllib.parse import urljoin

import trafilatura
from lxml import etree
from lxml import html as lxml_html
from readability import Document

from extract_article.models import ArticleRecord

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"


def _meta_content(tree, prop: str) -> Optional[str]:
    for meta in tree.xpath("//meta[@property=$prop or @name=$prop]", prop=prop):
        content = (meta.get("content") or "").strip()
        if content:
            return content
    return None


def _read_head(raw_html: str, source_url: str) -> dict:
    """Pull feature image and site name from the original document head.

    readability drops meta tags, so these come from the untouched page.
    """
    try:
        tree = lxml_html.document_fromstring(raw_html)
    except (etree.ParserError, ValueError) as e:
        logger.warning("Could not parse page head for %s: %s", source_url, e)
        return {}

    image = _meta_content(tree, "og:image")
    return {
        "featureImageUrl": urljoin(source_url, image) if image else None,
        "publicationName": _meta_content(tree, "og:site_name"),
    }


def _read_metadata(raw_html: str, source_url: str) -> dict:
    """Author, date and site name from trafilatura's metadata extractor."""
    try:
        metadata = trafilatura.extract_metadata(raw_html, default_url=source_url)
    except Exception as e:
        logger.warning("trafilatura metadata failed for %s: %s", source_url, e)
        return {}

    if metadata is None:
        return {}
    return {
        "author": metadata.author,
        "publicationDate": metadata.date,
        "publicationName": metadata.sitename,
    }


def extract_with_readability(raw_html: str, source_url: str) -> ArticleRecord:
    """Run the readability heuristic over a fetched page.

    A page readability cannot handle yields a record with an empty body, which
    the normalizer treats as insufficient.
    """
    title = ""
    content = ""
    try:
        doc = Document(raw_html, url=source_url)
        content = doc.summary(html_partial=True)
        title = doc.short_title() or doc.title()
    except Exception as e:
        logger.warning("readability failed for %s: %s", source_url, e)

    if not title or title == "[no-title]":
        title = UNKNOWN_TITLE

    head = _read_head(raw_html, source_url)
    metadata = _read_metadata(raw_html, source_url)

    return ArticleRecord.from_payload({
        "title": title,
        "author": metadata.get("author"),
        "publicationName": head.get("publicationName") or metadata.get("publicationName"),
        "publicationDate": metadata.get("publicationDate"),
        "featureImageUrl": head.get("featureImageUrl"),
        "articleBodyHtml": content,
    })
