"""Text extraction from uploaded PDF files."""

import logging
from io import BytesIO

from pypdf import PdfReader

from common.errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """Concatenate the text of every page, each page followed by a blank line."""
    try:
        reader = PdfReader(BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise ExtractionError(f"Could not read PDF file: {e}") from e

    logger.info("Read %d pages of PDF text", len(pages))
    text = "".join(page_text + "\n\n" for page_text in pages)
    if not text.strip():
        raise ExtractionError("The PDF file contains no extractable text.")
    return text
