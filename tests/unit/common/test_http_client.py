"""Tests for common.http_client module."""

from unittest.mock import Mock, call, patch

import pytest
import requests

from common.config import HttpConfig
from common.errors import FetchError
from common.http_client import fetch_with_backoff, relay_get

HTTP = HttpConfig(request_timeout=5, max_retries=3, base_delay=1.0)


def _response(status: int) -> Mock:
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    return response


class TestFetchWithBackoff:
    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_returns_first_success(self, mock_requests, mock_time) -> None:
        mock_requests.request.return_value = _response(200)

        response = fetch_with_backoff("GET", "https://example.com", HTTP)

        assert response.status_code == 200
        mock_time.sleep.assert_not_called()
        _, kwargs = mock_requests.request.call_args
        assert kwargs["timeout"] == 5

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_retries_429_and_5xx_with_doubling_delay(self, mock_requests, mock_time) -> None:
        mock_requests.request.side_effect = [_response(429), _response(503), _response(200)]

        response = fetch_with_backoff("GET", "https://example.com", HTTP)

        assert response.status_code == 200
        assert mock_requests.request.call_count == 3
        assert mock_time.sleep.call_args_list == [call(1.0), call(2.0)]

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_gives_up_after_max_retries(self, mock_requests, mock_time) -> None:
        mock_requests.request.return_value = _response(500)

        with pytest.raises(FetchError, match="Server error: 500") as exc_info:
            fetch_with_backoff("GET", "https://example.com", HTTP)

        assert exc_info.value.status_code == 500
        assert mock_requests.request.call_count == 3

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_non_retryable_status_returned_immediately(self, mock_requests, mock_time) -> None:
        mock_requests.request.return_value = _response(404)

        response = fetch_with_backoff("GET", "https://example.com", HTTP)

        assert response.status_code == 404
        assert mock_requests.request.call_count == 1
        mock_time.sleep.assert_not_called()

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_connection_errors_are_retried_then_wrapped(self, mock_requests, mock_time) -> None:
        mock_requests.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(FetchError, match="Network error"):
            fetch_with_backoff("GET", "https://example.com", HTTP)

        assert mock_requests.request.call_count == 3

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_timeouts_are_retried(self, mock_requests, mock_time) -> None:
        mock_requests.request.side_effect = [requests.Timeout("slow"), _response(200)]

        response = fetch_with_backoff("GET", "https://example.com", HTTP)

        assert response.status_code == 200
        assert mock_time.sleep.call_args_list == [call(1.0)]

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.MissingSchema("no scheme"),
            requests.exceptions.InvalidSchema("bad scheme"),
            requests.exceptions.InvalidURL("bad url"),
        ],
    )
    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_invalid_requests_fail_without_retry(self, mock_requests, mock_time, error) -> None:
        mock_requests.request.side_effect = error

        with pytest.raises(FetchError, match="Network error"):
            fetch_with_backoff("GET", "example.com", HTTP)

        assert mock_requests.request.call_count == 1
        mock_time.sleep.assert_not_called()

    @patch("common.http_client.time")
    @patch("common.http_client.requests")
    def test_explicit_timeout_overrides_default(self, mock_requests, mock_time) -> None:
        mock_requests.request.return_value = _response(200)

        fetch_with_backoff("POST", "https://example.com", HTTP, timeout=99)

        _, kwargs = mock_requests.request.call_args
        assert kwargs["timeout"] == 99


class TestRelayGet:
    @patch("common.http_client.requests")
    def test_passes_target_as_query_parameter(self, mock_requests) -> None:
        mock_requests.request.return_value = _response(200)

        relay_get("https://news.example.com/a?b=1", "https://relay.example/raw", HTTP)

        args, kwargs = mock_requests.request.call_args
        assert args == ("GET", "https://relay.example/raw")
        assert kwargs["params"] == {"url": "https://news.example.com/a?b=1"}
