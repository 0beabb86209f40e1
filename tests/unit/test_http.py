from __future__ import annotations

import pytest
import requests

from campus_coffee.common.http import (
    HttpClient,
    HttpRequestError,
    RequestThrottle,
    RetryConfig,
    RetryableHttpError,
    check_status,
)


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_get_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    seen = {}

    def fake_get(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return FakeResponse(200, {"ok": True})

    monkeypatch.setattr(client.session, "get", fake_get)

    assert client.get_json("https://example.com/node/1.json") == {"ok": True}
    assert seen["url"] == "https://example.com/node/1.json"
    assert seen["timeout"] == (client.timeout.connect, client.timeout.read)


def test_http_session_carries_user_agent():
    client = HttpClient(user_agent="CampusCoffee/test")
    assert client.session.headers["User-Agent"] == "CampusCoffee/test"
    assert client.session.headers["Accept"] == "application/json"


def test_check_status_classifies_codes():
    check_status("https://example.com", 200)
    with pytest.raises(RetryableHttpError):
        check_status("https://example.com", 429)
    with pytest.raises(HttpRequestError) as excinfo:
        check_status("https://example.com", 410)
    assert not isinstance(excinfo.value, RetryableHttpError)


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "get", lambda *_args, **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError) as excinfo:
        client.get_json("https://example.com")

    assert excinfo.value.status_code == 503


def test_http_not_found_is_not_retried(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3))
    calls = []

    def fake_get(*_args, **_kwargs):
        calls.append(1)
        return FakeResponse(404)

    monkeypatch.setattr(client.session, "get", fake_get)

    with pytest.raises(HttpRequestError) as excinfo:
        client.get_json("https://example.com")

    assert not isinstance(excinfo.value, RetryableHttpError)
    assert excinfo.value.status_code == 404
    assert len(calls) == 1


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=2, multiplier=0.01, max_wait=0.01), rate_limit_per_sec=100.0)
    responses = [FakeResponse(503), FakeResponse(200, {"ok": True})]
    monkeypatch.setattr(client.session, "get", lambda *_args, **_kwargs: responses.pop(0))

    assert client.get_json("https://example.com") == {"ok": True}


def test_http_connection_error_is_retryable(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    def fail(*_args, **_kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(client.session, "get", fail)

    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.TooManyRedirects("loop"),
        requests.exceptions.ChunkedEncodingError("truncated"),
        requests.exceptions.ContentDecodingError("gzip"),
        requests.exceptions.InvalidURL("bad url"),
    ],
)
def test_http_other_request_errors_are_wrapped_without_retry(monkeypatch, error):
    client = HttpClient(retry=RetryConfig(max_attempts=3))
    calls = []

    def fail(*_args, **_kwargs):
        calls.append(1)
        raise error

    monkeypatch.setattr(client.session, "get", fail)

    with pytest.raises(HttpRequestError) as excinfo:
        client.get_json("https://example.com")

    assert not isinstance(excinfo.value, RetryableHttpError)
    assert excinfo.value.__cause__ is error
    assert len(calls) == 1


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "get", lambda *_args, **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")


def test_throttle_spaces_consecutive_requests():
    now = [100.0]
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    throttle = RequestThrottle(2.0, clock=lambda: now[0], sleep=fake_sleep)

    throttle.wait()
    throttle.wait()
    now[0] = 102.0
    throttle.wait()

    assert sleeps == [0.5]
