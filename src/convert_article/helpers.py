"""Helper functions for convert_article CLI."""

from __future__ import annotations

import argparse
import re
from typing import Optional

from extract_article.models import LOCAL_MODE, REMOTE_MODE

_URL_RE = re.compile(r"https?://\S+")


def extract_shared_url(value: str) -> Optional[str]:
    '''Pull the article URL out of shared text such as "Read this https://..."'''
    value = value.strip()
    match = _URL_RE.search(value)
    if match:
        return match.group(0)
    if value.startswith("http"):
        return value
    return None


def parse_convert_article_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for convert_article.'''

    parser = argparse.ArgumentParser(
        prog="article-pdf",
        description="Convert web articles and PDFs into e-paper friendly PDFs.",
    )
    parser.add_argument("--config", default=None, help="Config name in configs/ (default: CONFIG_ENV or prod)")
    parser.add_argument("--output-dir", default=None, help="Where to write output files")
    parser.add_argument("--verbose", action="store_true")

    subparsers = parser.add_subparsers(dest="command", required=True)

    url_parser = subparsers.add_parser("url", help="Convert an article URL")
    url_parser.add_argument("url", help="Article URL, or shared text containing one")
    url_parser.add_argument(
        "--engine",
        choices=[LOCAL_MODE, REMOTE_MODE],
        default=LOCAL_MODE,
        help="local readability parsing (falls back to AI) or AI extraction (default: local)",
    )
    url_parser.add_argument("--reading", action="store_true", help="Write an HTML reading view instead of a PDF")

    pdf_parser = subparsers.add_parser("pdf", help="Reformat a PDF file")
    pdf_parser.add_argument("path", help="PDF file to reformat")

    history_parser = subparsers.add_parser("history", help="List converted URLs")
    history_parser.add_argument("--clear", action="store_true", help="Delete the whole history")

    key_parser = subparsers.add_parser("set-key", help="Store the Gemini API key")
    key_parser.add_argument("api_key")

    args = parser.parse_args(argv)

    if args.command == "url":
        url = extract_shared_url(args.url)
        if url is None:
            parser.error(f"No article URL found in: {args.url}")
        args.url = url

    return args
