"""Structured article extraction through the generative-AI endpoint."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from lxml import etree
from lxml import html as lxml_html

from common.config import AppConfig
from common.errors import CredentialError, FetchError, RemoteFormatError
from common.http_client import fetch_with_backoff
from extract_article.instructions import (
    PDF_TEXT_INSTRUCTIONS,
    PDF_TEXT_RESPONSE_SCHEMA,
    URL_EXTRACTION_INSTRUCTIONS,
    URL_RESPONSE_SCHEMA,
)
from extract_article.models import ArticleRecord

logger = logging.getLogger(__name__)

NON_CONTENT_XPATH = "|".join(
    f"//{tag}"
    for tag in ["script", "style", "svg", "nav", "footer", "aside", "noscript", "iframe", "path", "symbol"]
)


def strip_non_content(raw_html: str) -> str:
    """Remove scripts, navigation and other heavy non-content nodes.

    Returns the inner HTML of ``<body>``, or the input when it cannot be parsed.
    """
    try:
        tree = lxml_html.document_fromstring(raw_html)
    except (etree.ParserError, ValueError) as e:
        logger.warning("Could not pre-process HTML, sending it as-is: %s", e)
        return raw_html

    for element in tree.xpath(NON_CONTENT_XPATH):
        element.drop_tree()

    body = tree.find("body")
    if body is None:
        return raw_html

    parts = [body.text or ""]
    parts.extend(lxml_html.tostring(child, encoding="unicode") for child in body)
    return "".join(parts)


def build_payload(instructions: str, user_text: str, schema: dict) -> dict:
    return {
        "contents": [{"parts": [{"text": user_text}]}],
        "systemInstruction": {"parts": [{"text": instructions}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": schema,
        },
    }


def _parse_envelope(result: Any) -> dict:
    try:
        json_text = result["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        json_text = None

    if not json_text:
        raise RemoteFormatError("AI model returned an empty or invalid response.")

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse AI model JSON: %.500s", json_text)
        raise RemoteFormatError("Received invalid JSON from the API.") from e

    if not isinstance(data, dict) or "title" not in data or "articleBodyHtml" not in data:
        raise RemoteFormatError("AI model response is missing title or articleBodyHtml.")
    return data


def request_structured_extraction(payload: dict, api_key: Optional[str], config: AppConfig) -> dict:
    """POST ``payload`` to the model endpoint and return the decoded JSON object.

    Raises:
        CredentialError: no key, or the endpoint answered 401.
        FetchError: any other non-2xx answer.
        RemoteFormatError: the envelope or the embedded JSON is malformed.
    """
    if not api_key or not api_key.strip():
        raise CredentialError("Please provide your Gemini API key first.")

    url = f"{config.api_base}/models/{config.model}:generateContent"
    response = fetch_with_backoff(
        "POST",
        url,
        config.http,
        timeout=config.http.extraction_timeout,
        headers={"Content-Type": "application/json", "x-goog-api-key": api_key.strip()},
        data=json.dumps(payload),
    )

    if response.status_code == 401:
        raise CredentialError("API error: 401 Unauthorized. The API key may be invalid or missing.")
    if not response.ok:
        raise FetchError(f"API error: {response.status_code} {response.text}", status_code=response.status_code)

    try:
        result = response.json()
    except ValueError as e:
        raise RemoteFormatError("AI model returned an empty or invalid response.") from e

    return _parse_envelope(result)


def extract_from_html(raw_html: str, source_url: str, api_key: Optional[str], config: AppConfig) -> ArticleRecord:
    """Ask the model to extract the article from a fetched page."""
    logger.info("Asking AI model to extract article from %s", source_url)
    cleaned_html = strip_non_content(raw_html)
    payload = build_payload(
        URL_EXTRACTION_INSTRUCTIONS,
        f"Original URL: {source_url}\n\nHTML:\n{cleaned_html}",
        URL_RESPONSE_SCHEMA,
    )
    return ArticleRecord.from_payload(request_structured_extraction(payload, api_key, config))


def extract_from_pdf_text(raw_text: str, filename: str, api_key: Optional[str], config: AppConfig) -> ArticleRecord:
    """Ask the model to rebuild an article from PDF text with irregular line breaks."""
    logger.info("Asking AI model to format text from %s", filename)
    payload = build_payload(
        PDF_TEXT_INSTRUCTIONS,
        f"Original Filename: {filename}\n\nRaw Text:\n{raw_text}",
        PDF_TEXT_RESPONSE_SCHEMA,
    )
    data = request_structured_extraction(payload, api_key, config)
    if not isinstance(data.get("title"), str) or not data["title"].strip():
        data["title"] = Path(filename).stem
    return ArticleRecord.from_payload(data)
