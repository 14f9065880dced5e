"""Tests for convert_article.helpers module."""

import pytest

from convert_article.helpers import extract_shared_url, parse_convert_article_args


class TestExtractSharedUrl:
    def test_plain_url(self) -> None:
        assert extract_shared_url("https://e.com/a") == "https://e.com/a"

    def test_url_inside_shared_text(self) -> None:
        assert extract_shared_url("Check this out https://e.com/a?b=1 via app") == "https://e.com/a?b=1"

    def test_no_url(self) -> None:
        assert extract_shared_url("nothing to see") is None


class TestParseConvertArticleArgs:
    def test_url_defaults(self) -> None:
        args = parse_convert_article_args(["url", "https://e.com/a"])

        assert args.command == "url"
        assert args.url == "https://e.com/a"
        assert args.engine == "local"
        assert args.reading is False
        assert args.config is None

    def test_url_options(self) -> None:
        args = parse_convert_article_args(
            ["--config", "local", "--output-dir", "out", "url", "Read https://e.com/a", "--engine", "remote", "--reading"]
        )

        assert args.url == "https://e.com/a"
        assert args.engine == "remote"
        assert args.reading is True
        assert args.output_dir == "out"

    def test_url_without_link_exits(self) -> None:
        with pytest.raises(SystemExit):
            parse_convert_article_args(["url", "no link here"])

    def test_pdf_and_history_commands(self) -> None:
        assert parse_convert_article_args(["pdf", "file.pdf"]).path == "file.pdf"
        assert parse_convert_article_args(["history", "--clear"]).clear is True

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_convert_article_args([])
