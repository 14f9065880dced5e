"""Fetch raw article HTML through the CORS relay."""

import logging

from common.config import AppConfig
from common.errors import FetchError
from common.http_client import relay_get

logger = logging.getLogger(__name__)


def fetch_article_html(url: str, config: AppConfig) -> str:
    """Return the raw HTML body of ``url``.

    Raises:
        FetchError: if the relay cannot be reached or answers non-2xx.
    """
    logger.info("Fetching article content from %s", url)
    response = relay_get(url, config.relay_url, config.http)
    if not response.ok:
        raise FetchError(
            f"Failed to fetch URL (Status: {response.status_code})",
            status_code=response.status_code,
        )
    return response.text
