import httpx
import pytest

from pomsuite.api_testing.framework.http_client import (
    HttpClient,
    HttpClientError,
    ServerErrorExhausted,
)
from pomsuite.unit.conftest import DummyConfig


@pytest.fixture
def api_config() -> DummyConfig:
    return DummyConfig(
        {
            "api.base_url": "https://api.example.test",
            "api.retry_count": 3,
            "api.retry_backoff": 0.5,
            "api.retry_max_wait": 5.0,
        }
    )


@pytest.fixture
def sleeps(monkeypatch):
    recorded = []
    monkeypatch.setattr("pomsuite.api_testing.framework.http_client.time.sleep", recorded.append)
    return recorded


def test_redact_headers_masks_sensitive_values():
    client = object.__new__(HttpClient)  # bypass __init__
    masked = client._redact_headers(
        {
            "Authorization": "secret-token",
            "x-api-key": "apikey",
            "Cookie": "session=abc",
            "X-Other": "keep",
        }
    )
    assert masked["Authorization"] == "***MASKED***"
    assert masked["x-api-key"] == "***MASKED***"
    assert masked["Cookie"] == "***MASKED***"
    assert masked["X-Other"] == "keep"


def test_redact_body_masks_sensitive_fields():
    client = object.__new__(HttpClient)
    payload = {
        "password": "p1",
        "nested": {"token": "tok", "keep": "value"},
        "items": [{"api_key": "k1"}, {"regular": "ok"}],
    }
    redacted = client._redact_body(payload)

    assert redacted["password"] == "***MASKED***"
    assert redacted["nested"]["token"] == "***MASKED***"
    assert redacted["nested"]["keep"] == "value"
    assert redacted["items"][0]["api_key"] == "***MASKED***"
    assert redacted["items"][1]["regular"] == "ok"


def test_request_outside_context_manager_fails(api_config):
    with pytest.raises(HttpClientError):
        HttpClient(api_config).get("/users")


def test_client_errors_returned_without_retry(api_config, sleeps):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, json={"error": "Not found"})

    with HttpClient(api_config, transport=httpx.MockTransport(handler)) as client:
        response = client.get("/users/999")

    assert response.status_code == 404
    assert len(calls) == 1
    assert sleeps == []


def test_server_errors_retried_with_exponential_backoff(api_config, sleeps):
    statuses = iter([503, 502, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), json={"id": 1})

    with HttpClient(api_config, transport=httpx.MockTransport(handler)) as client:
        response = client.get("/users/1")

    assert response.status_code == 200
    assert sleeps == [0.5, 1.0]


def test_server_errors_exhaust_retries(api_config, sleeps):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with HttpClient(api_config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ServerErrorExhausted) as exc_info:
            client.post("/users", json={"name": "x"})

    assert exc_info.value.response.status_code == 500
    assert len(sleeps) == 2


def test_network_errors_retried_then_raised(api_config, sleeps):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with HttpClient(api_config, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ConnectError):
            client.get("/users")

    assert sleeps == [0.5, 1.0]


def test_backoff_is_capped():
    client = object.__new__(HttpClient)
    client.retry_backoff = 1.0
    client.retry_max_wait = 3.0

    assert [client._calculate_backoff(n) for n in range(4)] == [1.0, 2.0, 3.0, 3.0]


def test_curl_command_contains_method_headers_body_and_url():
    client = object.__new__(HttpClient)
    curl = client._build_curl(
        "POST",
        "https://api.example.test/users",
        {"Authorization": "***MASKED***"},
        {"name": "Leanne"},
    )

    assert curl.startswith("curl -X POST")
    assert "-H 'Authorization: ***MASKED***'" in curl
    assert '-d \'{"name": "Leanne"}\'' in curl
    assert curl.endswith("'https://api.example.test/users'")
