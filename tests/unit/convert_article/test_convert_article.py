"""Tests for convert_article.convert_article module."""

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from common.config import AppConfig
from common.errors import ConversionBusyError, CredentialError, FetchError
from common.state_store import StateStore
from convert_article.convert_article import READING_OUTPUT, ArticleConverter
from extract_article.models import ArticleRecord, PdfTextSource

ARTICLE = ArticleRecord(title="Breaking: 50% Off!", article_body_html="<p>Body</p>")


@pytest.fixture
def converter(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ArticleConverter:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    store = StateStore(tmp_path / "state.json")
    return ArticleConverter(AppConfig(), store, output_dir=tmp_path / "out")


class TestConvertUrl:
    @patch("convert_article.convert_article.assemble")
    @patch("convert_article.convert_article.normalize")
    @patch("convert_article.convert_article.fetch_article_html")
    def test_writes_pdf_and_records_history(self, mock_fetch, mock_normalize, mock_assemble, converter) -> None:
        mock_fetch.return_value = "<html></html>"
        mock_normalize.return_value = ARTICLE
        mock_assemble.return_value = b"%PDF-1.4 fake"

        path = converter.convert_url("https://e.com/a")

        assert path.name == "Breaking 50 Off.pdf"
        assert path.read_bytes() == b"%PDF-1.4 fake"
        assert [entry.url for entry in converter.store.get_history()] == ["https://e.com/a"]

    @patch("convert_article.convert_article.normalize")
    @patch("convert_article.convert_article.fetch_article_html")
    def test_reading_view_output(self, mock_fetch, mock_normalize, converter) -> None:
        mock_fetch.return_value = "<html></html>"
        mock_normalize.return_value = ARTICLE

        path = converter.convert_url("https://e.com/a", output=READING_OUTPUT)

        assert path.suffix == ".html"
        assert "<p>Body</p>" in path.read_text(encoding="utf-8")

    @patch("convert_article.convert_article.fetch_article_html")
    def test_remote_mode_without_key_fails_before_fetching(self, mock_fetch, converter) -> None:
        with pytest.raises(CredentialError):
            converter.convert_url("https://e.com/a", mode="remote")
        mock_fetch.assert_not_called()

    def test_uses_stored_then_env_key(self, converter, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        assert converter.api_key() == "env-key"

        converter.store.set_api_key("stored-key")
        assert converter.api_key() == "stored-key"

    @patch("convert_article.convert_article.fetch_article_html")
    def test_failure_leaves_history_untouched(self, mock_fetch, converter) -> None:
        mock_fetch.side_effect = FetchError("Failed to fetch URL (Status: 500)", status_code=500)

        with pytest.raises(FetchError):
            converter.convert_url("https://e.com/a")

        assert converter.store.get_history() == []

    @patch("convert_article.convert_article.fetch_article_html")
    def test_second_conversion_while_busy_is_rejected(self, mock_fetch, converter) -> None:
        started = threading.Event()
        release = threading.Event()

        def slow_fetch(url, config):
            started.set()
            release.wait(5)
            raise FetchError("stopped")

        mock_fetch.side_effect = slow_fetch
        worker = threading.Thread(target=lambda: pytest.raises(FetchError, converter.convert_url, "https://e.com/a"))
        worker.start()
        started.wait(5)
        try:
            with pytest.raises(ConversionBusyError):
                converter.convert_url("https://e.com/b")
        finally:
            release.set()
            worker.join(5)

        # The lock is released once the first conversion ends
        with pytest.raises(FetchError):
            converter.convert_url("https://e.com/c")


class TestConvertPdfFile:
    @patch("convert_article.convert_article.assemble")
    @patch("convert_article.convert_article.normalize")
    @patch("convert_article.convert_article.extract_pdf_text")
    def test_goes_through_remote_extraction(
        self, mock_extract, mock_normalize, mock_assemble, converter, tmp_path
    ) -> None:
        pdf_path = tmp_path / "report.pdf"
        pdf_path.write_bytes(b"%PDF fake")
        mock_extract.return_value = "raw text\n\n"
        mock_normalize.return_value = ArticleRecord("Annual Report", "<p>Text</p>")
        mock_assemble.return_value = b"%PDF out"

        path = converter.convert_pdf_file(pdf_path)

        source, mode = mock_normalize.call_args[0][:2]
        assert source == PdfTextSource(text="raw text\n\n", filename="report.pdf")
        assert mode == "remote"
        assert path.name == "Annual Report.pdf"
        assert converter.store.get_history() == []
