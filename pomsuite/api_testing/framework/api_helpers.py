"""
================================================================================
API Helpers
================================================================================

Small, stateless helpers for API contract tests: auth headers, query
strings, status/structure/header checks, error extraction and timing.

All helpers take `httpx.Response` objects.

================================================================================
"""

from __future__ import annotations

import base64
import time
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlencode

import httpx
from loguru import logger


def build_query_string(params: Mapping[str, Any]) -> str:
    """URL-encode `params` in insertion order (None values dropped)."""
    return urlencode({k: v for k, v in params.items() if v is not None})


def create_auth_header(token: str, scheme: str = "Bearer") -> Dict[str, str]:
    return {"Authorization": f"{scheme} {token}"}


def create_basic_auth_header(username: str, password: str) -> Dict[str, str]:
    credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {credentials}"}


def validate_response_status(response: httpx.Response, expected_status: int) -> bool:
    return response.status_code == expected_status


def is_success_response(response: httpx.Response) -> bool:
    """True for any 2xx status."""
    return 200 <= response.status_code < 300


def validate_response_structure(data: Mapping[str, Any], required_fields: Iterable[str]) -> bool:
    """True when every required field is a key of `data`."""
    return all(field in data for field in required_fields)


def safe_json_parse(response: httpx.Response) -> Any:
    """
    Parse a JSON body without raising.

    Returns:
        Parsed JSON, or `{"error": "Invalid JSON response"}` when the body
        is not valid JSON
    """
    try:
        return response.json()
    except ValueError as e:
        logger.warning(f"Failed to parse JSON from {response.request.url}: {e}")
        return {"error": "Invalid JSON response"}


def extract_error_message(response: httpx.Response) -> str:
    """Error text from `message` or `error` fields, else the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text

    if isinstance(body, dict):
        return body.get("message") or body.get("error") or "Unknown error"
    return "Unknown error"


def validate_headers(response: httpx.Response, expected_headers: Mapping[str, str]) -> bool:
    """True when each expected header is present and contains the expected value."""
    for name, expected in expected_headers.items():
        value = response.headers.get(name)
        if not value or expected not in value:
            return False
    return True


def extract_pagination_info(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Pagination hints from `x-total-count`, `x-page` and `x-per-page`."""
    lowered = {k.lower(): v for k, v in headers.items()}
    return {
        "total": lowered.get("x-total-count"),
        "page": lowered.get("x-page"),
        "per_page": lowered.get("x-per-page"),
    }


def measure_response_time(api_call: Callable[[], httpx.Response]) -> Tuple[httpx.Response, float]:
    """
    Call `api_call` and time it.

    Returns:
        (response, elapsed milliseconds)
    """
    started = time.perf_counter()
    response = api_call()
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(f"Response time: {elapsed_ms:.1f}ms")
    return response, elapsed_ms


__all__ = [
    "build_query_string",
    "create_auth_header",
    "create_basic_auth_header",
    "validate_response_status",
    "is_success_response",
    "validate_response_structure",
    "safe_json_parse",
    "extract_error_message",
    "validate_headers",
    "extract_pagination_info",
    "measure_response_time",
]
