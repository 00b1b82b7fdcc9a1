"""
================================================================================
API Testing Framework
================================================================================

httpx-based helpers for API contract tests.

Components:
    - http_client: Retrying HTTP client with Allure reporting
    - api_helpers: Auth headers, response checks and timing helpers

Author: Automation Team
License: MIT
================================================================================
"""

from .http_client import HttpClient, HttpClientError, ServerErrorExhausted

__all__ = [
    "HttpClient",
    "HttpClientError",
    "ServerErrorExhausted",
]
