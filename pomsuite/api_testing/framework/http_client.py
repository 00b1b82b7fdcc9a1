"""
================================================================================
HTTP Client with Allure Integration
================================================================================

Synchronous httpx client used by the API contract tests.

Features:
    - Automatic retry with exponential backoff on network errors and 5xx
    - Responses below 500 returned immediately (4xx is an assertion target)
    - Allure reporting with masked headers/body and a cURL command

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import time
from typing import Any, Dict, Optional

import allure
import httpx
from allure_commons.types import AttachmentType
from loguru import logger

from pomsuite.common.config_loader import ConfigLoader


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000

# Default retry settings
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_BACKOFF = 0.5
DEFAULT_RETRY_MAX_WAIT = 5.0

MASK = "***MASKED***"
SENSITIVE_HEADERS = {"authorization", "x-api-key", "cookie", "set-cookie"}
SENSITIVE_FIELDS = ("password", "secret", "token", "api_key", "authorization", "session")


class HttpClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class ServerErrorExhausted(HttpClientError):
    """Raised when every attempt returned a 5xx response."""

    def __init__(self, message: str, response: httpx.Response):
        super().__init__(message)
        self.response = response


class HttpClient:
    """
    HTTP client with built-in retry and reporting.

    Usage:
        >>> with HttpClient() as client:
        ...     response = client.get("/users/1")
        ...     response.json()["id"]
        1
    """

    def __init__(
        self,
        config: Optional[Any] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP client with configuration.

        Args:
            config: Configuration source. Uses the shared ConfigLoader if None.
            transport: Optional httpx transport (e.g. `httpx.MockTransport` in unit tests)
        """
        if config is None:
            config = ConfigLoader()

        self.config = config
        self.base_url = config.get("api.base_url", "https://jsonplaceholder.typicode.com")
        self.timeout = float(config.get("api.timeout", 30))
        self.retry_count = max(1, int(config.get("api.retry_count", DEFAULT_RETRY_COUNT)))
        self.retry_backoff = float(config.get("api.retry_backoff", DEFAULT_RETRY_BACKOFF))
        self.retry_max_wait = float(config.get("api.retry_max_wait", DEFAULT_RETRY_MAX_WAIT))

        self._transport = transport
        self.session: Optional[httpx.Client] = None

    def __enter__(self) -> "HttpClient":
        """Enter context manager - initialize HTTP session."""
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - close HTTP session."""
        if self.session:
            self.session.close()
            self.session = None

    def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Execute HTTP request with automatic retry and Allure logging.

        Network errors and 5xx responses are retried with exponential
        backoff. Any response below 500 is returned as-is.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH)
            url: Request URL (relative to base_url)
            **kwargs: Additional arguments passed to httpx.request

        Returns:
            httpx.Response object

        Raises:
            ServerErrorExhausted: When every attempt returned 5xx
            httpx.HTTPError: When network retries are exhausted
        """
        if self.session is None:
            raise HttpClientError(
                "HttpClient must be used within a context manager. "
                "Use 'with HttpClient() as client:'"
            )

        response: Optional[httpx.Response] = None

        for attempt in range(self.retry_count):
            last_attempt = attempt == self.retry_count - 1
            try:
                response = self.session.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if last_attempt:
                    logger.error(f"All retries exhausted. Last error: {e}")
                    raise
                wait_time = self._calculate_backoff(attempt)
                logger.warning(
                    f"Network error: {e}. Retrying in {wait_time}s. "
                    f"Attempt {attempt + 1}/{self.retry_count}"
                )
                time.sleep(wait_time)
                continue

            self._log_to_allure(method, url, kwargs, response)
            if response.status_code < 500:
                return response

            if not last_attempt:
                wait_time = self._calculate_backoff(attempt)
                logger.warning(
                    f"{method} {url} returned {response.status_code}. Retrying in "
                    f"{wait_time}s. Attempt {attempt + 1}/{self.retry_count}"
                )
                time.sleep(wait_time)

        raise ServerErrorExhausted(
            f"{method} {url} returned {response.status_code} after "
            f"{self.retry_count} attempts",
            response,
        )

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute POST request."""
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute PUT request."""
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute PATCH request."""
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Execute DELETE request."""
        return self.request("DELETE", url, **kwargs)

    def _calculate_backoff(self, attempt: int) -> float:
        """
        Calculate exponential backoff wait time.

        Formula: base * (2 ^ attempt), capped at max_wait
        """
        wait_time = self.retry_backoff * (2 ** attempt)
        return min(wait_time, self.retry_max_wait)

    def _log_to_allure(
        self,
        method: str,
        url: str,
        kwargs: Dict[str, Any],
        response: httpx.Response,
    ) -> None:
        """Attach the request/response exchange to the Allure report."""
        full_url = str(response.request.url)
        status_mark = "OK" if response.status_code < 400 else "FAIL"

        with allure.step(f"[{status_mark}] {method} {url} -> {response.status_code}"):
            allure.attach(full_url, name="Request URL", attachment_type=AttachmentType.TEXT)

            safe_headers = self._redact_headers(kwargs.get("headers") or {})
            if safe_headers:
                allure.attach(
                    json.dumps(safe_headers, ensure_ascii=False, indent=2),
                    name="Request Headers",
                    attachment_type=AttachmentType.JSON,
                )

            safe_body = self._redact_body(kwargs.get("json"))
            if safe_body:
                allure.attach(
                    json.dumps(safe_body, ensure_ascii=False, indent=2),
                    name="Request Body",
                    attachment_type=AttachmentType.JSON,
                )

            allure.attach(
                self._build_curl(method, full_url, safe_headers, safe_body),
                name="cURL Command",
                attachment_type=AttachmentType.TEXT,
            )

            try:
                response_content = json.dumps(response.json(), ensure_ascii=False, indent=2)
            except ValueError:
                response_content = response.text or "<empty>"

            if len(response_content) > MAX_RESPONSE_LENGTH:
                response_content = (
                    f"{response_content[:MAX_RESPONSE_LENGTH]}\n\n"
                    f"... [Truncated, full length: {len(response_content)} chars] ..."
                )

            allure.attach(
                response_content,
                name=f"Response Body ({response.status_code})",
                attachment_type=AttachmentType.JSON,
            )

        logger.debug(f"{method} {full_url} -> {response.status_code}")

    def _redact_headers(self, headers: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive header values before logging."""
        return {
            key: MASK if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }

    def _redact_body(self, payload: Any) -> Any:
        """Recursively mask sensitive fields in request bodies."""
        if isinstance(payload, dict):
            redacted = {}
            for key, value in payload.items():
                if any(token in key.lower() for token in SENSITIVE_FIELDS):
                    redacted[key] = MASK
                else:
                    redacted[key] = self._redact_body(value)
            return redacted
        if isinstance(payload, list):
            return [self._redact_body(item) for item in payload]
        return payload

    def _build_curl(
        self,
        method: str,
        url: str,
        headers: Dict[str, Any],
        body: Optional[Any],
    ) -> str:
        """Build a copy-paste cURL command (headers already masked)."""
        parts = [f"curl -X {method}"]
        for key, value in headers.items():
            parts.append(f"-H '{key}: {value}'")
        if body:
            parts.append(f"-d '{json.dumps(body, ensure_ascii=False)}'")
        parts.append(f"'{url}'")
        return " \\\n  ".join(parts)


__all__ = [
    "HttpClient",
    "HttpClientError",
    "ServerErrorExhausted",
]
