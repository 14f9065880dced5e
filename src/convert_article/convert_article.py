"""Run one conversion end to end: fetch, normalize, render, record history."""

from __future__ import annotations

import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from common.config import AppConfig
from common.errors import ConversionBusyError, CredentialError
from common.state_store import StateStore
from extract_article.fetch_source import fetch_article_html
from extract_article.models import REMOTE_MODE, ArticleRecord, HtmlSource, PdfTextSource
from extract_article.normalize import normalize
from extract_article.pdf_text import extract_pdf_text
from render_document.assemble import assemble
from render_document.filenames import sanitize_filename
from render_document.reading_view import render_reading_html

logger = logging.getLogger(__name__)

PDF_OUTPUT = "pdf"
READING_OUTPUT = "reading"

API_KEY_ENV = "GEMINI_API_KEY"


class ArticleConverter:
    """Converts articles one at a time.

    A second call while a conversion is running raises ConversionBusyError.
    """

    def __init__(self, config: AppConfig, store: StateStore, output_dir: str | Path | None = None):
        self.config = config
        self.store = store
        self.output_dir = Path(output_dir or config.output_dir)
        self._lock = threading.Lock()

    @contextmanager
    def _single_flight(self) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise ConversionBusyError("A conversion is already in progress.")
        try:
            yield
        finally:
            self._lock.release()

    def api_key(self) -> Optional[str]:
        """Stored key first, then the GEMINI_API_KEY environment variable."""
        return self.store.get_api_key() or os.environ.get(API_KEY_ENV) or None

    def _write(self, article: ArticleRecord, output: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        stem = sanitize_filename(article.title)

        if output == READING_OUTPUT:
            logger.info("Opening reading view")
            path = self.output_dir / f"{stem}.html"
            path.write_text(render_reading_html(article), encoding="utf-8")
        else:
            logger.info("Formatting PDF")
            path = self.output_dir / f"{stem}.pdf"
            path.write_bytes(assemble(article, self.config))

        logger.info("Saved %s", path)
        return path

    def convert_url(self, url: str, output: str = PDF_OUTPUT, mode: str = "local") -> Path:
        """Convert the article at ``url`` and add it to the history."""
        with self._single_flight():
            api_key = self.api_key()
            if mode == REMOTE_MODE and not api_key:
                raise CredentialError("Please provide your Gemini API key first.")

            html = fetch_article_html(url, self.config)
            article = normalize(HtmlSource(html=html, url=url), mode, self.config, api_key)
            path = self._write(article, output)

            self.store.save_to_history(article.title, url)
            return path

    def convert_pdf_file(self, pdf_path: str | Path, output: str = PDF_OUTPUT) -> Path:
        """Reformat an uploaded PDF through remote extraction."""
        pdf_path = Path(pdf_path)
        with self._single_flight():
            logger.info("Reading PDF file %s", pdf_path)
            text = extract_pdf_text(pdf_path.read_bytes())
            article = normalize(
                PdfTextSource(text=text, filename=pdf_path.name),
                REMOTE_MODE,
                self.config,
                self.api_key(),
            )
            return self._write(article, output)
