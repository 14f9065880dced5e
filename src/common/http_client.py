"""HTTP helpers: exponential backoff and the CORS relay."""

import logging
import time

import requests
from requests.exceptions import ConnectionError as RequestConnectionError
from requests.exceptions import RequestException, Timeout

from common.config import HttpConfig
from common.errors import FetchError

logger = logging.getLogger(__name__)

# Other request errors (bad URL or scheme) are not retried.
RETRYABLE_ERRORS = (RequestConnectionError, Timeout)


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def fetch_with_backoff(
    method: str,
    url: str,
    http: HttpConfig,
    timeout: float | None = None,
    **kwargs,
) -> requests.Response:
    """Send a request, retrying 429/5xx responses, connection errors and timeouts.

    Waits ``base_delay * 2**attempt`` seconds between attempts. Other non-2xx
    responses are returned to the caller untouched.

    Raises:
        FetchError: when the last attempt still fails.
    """
    headers = {"User-Agent": http.user_agent, **kwargs.pop("headers", {})}
    if timeout is None:
        timeout = http.request_timeout

    for attempt in range(http.max_retries):
        try:
            response = requests.request(method, url, headers=headers, timeout=timeout, **kwargs)
            if is_retryable_status(response.status_code):
                raise FetchError(
                    f"Server error: {response.status_code}",
                    status_code=response.status_code,
                )
            return response
        except RETRYABLE_ERRORS + (FetchError,) as e:
            if attempt == http.max_retries - 1:
                if isinstance(e, FetchError):
                    raise
                raise FetchError(f"Network error: {e}") from e
            delay = http.base_delay * (2 ** attempt)
            logger.warning(
                "Request attempt %d/%d failed: %s (retrying in %.1fs)",
                attempt + 1,
                http.max_retries,
                e,
                delay,
            )
            time.sleep(delay)
        except RequestException as e:
            raise FetchError(f"Network error: {e}") from e

    raise FetchError("Request was never attempted (max_retries < 1)")


def relay_get(target_url: str, relay_url: str, http: HttpConfig) -> requests.Response:
    """GET ``target_url`` through the CORS relay."""
    return fetch_with_backoff("GET", relay_url, http, params={"url": target_url})
