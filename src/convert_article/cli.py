"""CLI for converting articles into e-paper PDFs."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.errors import ConversionError
from common.state_store import StateStore
from convert_article.convert_article import PDF_OUTPUT, READING_OUTPUT, ArticleConverter
from convert_article.helpers import parse_convert_article_args

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_convert_article_args(argv)
    setup_logging(args.verbose)

    config = load_config(args.config)
    store = StateStore(config.state_path)

    if args.command == "set-key":
        store.set_api_key(args.api_key)
        return

    if args.command == "history":
        if args.clear:
            store.clear_history()
            logger.info("History cleared")
            return
        for entry in store.get_history():
            print(f"{entry.title}\t{entry.url}")
        return

    converter = ArticleConverter(config, store, output_dir=args.output_dir)
    try:
        if args.command == "url":
            output = READING_OUTPUT if args.reading else PDF_OUTPUT
            path = converter.convert_url(args.url, output=output, mode=args.engine)
        else:
            path = converter.convert_pdf_file(args.path)
    except ConversionError as e:
        logger.error("Error: %s", e)
        raise SystemExit(1) from e

    logger.info("Conversion complete: %s", path)


if __name__ == "__main__":
    main()
