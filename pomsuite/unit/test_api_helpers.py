import base64

import httpx

from pomsuite.api_testing.framework import api_helpers


def make_response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", "https://api.example.test/users"), **kwargs)


def test_build_query_string_encodes_and_drops_none():
    assert (
        api_helpers.build_query_string({"q": "a b", "page": 2, "skip": None})
        == "q=a+b&page=2"
    )


def test_auth_headers():
    assert api_helpers.create_auth_header("t-123") == {"Authorization": "Bearer t-123"}
    assert api_helpers.create_auth_header("t-123", "Token") == {"Authorization": "Token t-123"}

    header = api_helpers.create_basic_auth_header("student", "Password123")["Authorization"]
    assert header.startswith("Basic ")
    assert base64.b64decode(header[6:]).decode() == "student:Password123"


def test_status_checks():
    assert api_helpers.validate_response_status(make_response(201), 201)
    assert not api_helpers.validate_response_status(make_response(200), 201)
    assert api_helpers.is_success_response(make_response(204))
    assert not api_helpers.is_success_response(make_response(302))


def test_validate_response_structure():
    user = {"id": 1, "name": "Leanne Graham", "email": "Sincere@april.biz"}

    assert api_helpers.validate_response_structure(user, ["id", "name", "email"])
    assert not api_helpers.validate_response_structure(user, ["id", "phone"])


def test_safe_json_parse_falls_back_on_invalid_body():
    assert api_helpers.safe_json_parse(make_response(json={"id": 1})) == {"id": 1}
    assert api_helpers.safe_json_parse(make_response(text="<html>")) == {
        "error": "Invalid JSON response"
    }


def test_extract_error_message():
    assert api_helpers.extract_error_message(make_response(400, json={"message": "Bad name"})) == "Bad name"
    assert api_helpers.extract_error_message(make_response(404, json={"error": "Not found"})) == "Not found"
    assert api_helpers.extract_error_message(make_response(500, json={})) == "Unknown error"
    assert api_helpers.extract_error_message(make_response(502, text="Bad Gateway")) == "Bad Gateway"


def test_validate_headers_is_case_insensitive_substring_match():
    response = make_response(headers={"Content-Type": "application/json; charset=utf-8"})

    assert api_helpers.validate_headers(response, {"content-type": "application/json"})
    assert not api_helpers.validate_headers(response, {"content-type": "text/html"})
    assert not api_helpers.validate_headers(response, {"x-request-id": "abc"})


def test_extract_pagination_info():
    info = api_helpers.extract_pagination_info({"X-Total-Count": "100", "x-page": "2"})
    assert info == {"total": "100", "page": "2", "per_page": None}


def test_measure_response_time_returns_response_and_elapsed_ms():
    response, elapsed_ms = api_helpers.measure_response_time(lambda: make_response(200))

    assert response.status_code == 200
    assert elapsed_ms >= 0
