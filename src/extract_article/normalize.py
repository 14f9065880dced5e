"""Turn fetched HTML or PDF text into an ArticleRecord."""

import logging
from dataclasses import replace
from typing import Optional, Union

from common.config import AppConfig
from common.errors import ExtractionError, FallbackUnavailableError
from common.html_tree import sanitize_html
from extract_article.models import LOCAL_MODE, REMOTE_MODE, ArticleRecord, HtmlSource, PdfTextSource
from extract_article.readability_extract import extract_with_readability
from extract_article.remote_extract import extract_from_html, extract_from_pdf_text

logger = logging.getLogger(__name__)


def is_insufficient(record: ArticleRecord, min_body_length: int) -> bool:
    """True when a local parse should be retried remotely."""
    body = record.article_body_html or ""
    return not record.title or not body or len(body.strip()) < min_body_length


def _finalize(record: ArticleRecord) -> ArticleRecord:
    record = replace(record, article_body_html=sanitize_html(record.article_body_html))
    if not record.article_body_html.strip():
        raise ExtractionError("No article text could be extracted.")
    return record


def normalize(
    source: Union[HtmlSource, PdfTextSource],
    mode: str,
    config: AppConfig,
    api_key: Optional[str] = None,
) -> ArticleRecord:
    """Produce a sanitized ArticleRecord from a raw source.

    PDF text always goes through remote extraction. HTML in local mode falls
    back to remote extraction when the heuristic result is insufficient.

    Raises:
        FallbackUnavailableError: local parse insufficient and no API key.
        CredentialError: remote extraction requested without an API key.
        ExtractionError: no body text at all.
    """
    if isinstance(source, PdfTextSource):
        return _finalize(extract_from_pdf_text(source.text, source.filename, api_key, config))

    if mode == REMOTE_MODE:
        return _finalize(extract_from_html(source.html, source.url, api_key, config))

    if mode != LOCAL_MODE:
        raise ValueError(f"Unknown extraction mode: {mode}")

    logger.info("Parsing article locally")
    record = extract_with_readability(source.html, source.url)
    if is_insufficient(record, config.min_body_length):
        logger.warning("Local parse insufficient for %s, falling back to AI model", source.url)
        if not api_key or not api_key.strip():
            raise FallbackUnavailableError(
                "Local parsing failed, and no API key is available for AI fallback. Please provide a key."
            )
        record = extract_from_html(source.html, source.url, api_key, config)

    return _finalize(record)
