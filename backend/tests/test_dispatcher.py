import json

import pytest
import requests

from orderhub.core.errors import TransportError
from orderhub.upstream.dispatcher import DispatchResult, UpstreamDispatcher
from factories import FakeResponse


URL = "https://upstream.example.com/orders"


def _dispatcher() -> UpstreamDispatcher:
    return UpstreamDispatcher(url=URL, timeout=3.0)


def test_send_posts_json_with_token_header(monkeypatch):
    captured = {}

    def fake_post(url, data=None, headers=None, timeout=None, stream=False):
        captured.update(url=url, data=data, headers=headers, timeout=timeout, stream=stream)
        return FakeResponse(200)

    monkeypatch.setattr("orderhub.upstream.dispatcher.requests.post", fake_post)
    result = _dispatcher().send({"orderId": "1", "status": "paid"}, "tok-123")

    assert result == DispatchResult(delivered=True, status_code=200)
    assert captured["url"] == URL
    assert captured["timeout"] == (3.0, 3.0)
    assert captured["stream"] is True
    assert captured["headers"] == {"Content-Type": "application/json", "x-api-token": "tok-123"}
    assert json.loads(captured["data"]) == {"orderId": "1", "status": "paid"}


@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
def test_non_2xx_is_a_result_not_an_error(monkeypatch, status_code):
    monkeypatch.setattr(
        "orderhub.upstream.dispatcher.requests.post",
        lambda url, data=None, headers=None, timeout=None, stream=False: FakeResponse(status_code),
    )
    result = _dispatcher().send({"orderId": "1"}, "tok")
    assert result.delivered is False
    assert result.status_code == status_code


@pytest.mark.parametrize(
    "exc",
    [
        requests.exceptions.ConnectionError("[Errno 111] Connection refused"),
        requests.exceptions.ConnectTimeout("connect timeout"),
        requests.exceptions.ReadTimeout("read timeout"),
    ],
)
def test_network_failures_raise_transport_error(monkeypatch, exc):
    def fake_post(url, data=None, headers=None, timeout=None, stream=False):
        raise exc

    monkeypatch.setattr("orderhub.upstream.dispatcher.requests.post", fake_post)
    with pytest.raises(TransportError) as info:
        _dispatcher().send({"orderId": "1"}, "tok")
    assert info.value.code == "transport_error"
    assert type(exc).__name__ in info.value.message


def test_no_retry_on_failure(monkeypatch):
    calls = []

    def fake_post(url, data=None, headers=None, timeout=None, stream=False):
        calls.append(url)
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr("orderhub.upstream.dispatcher.requests.post", fake_post)
    with pytest.raises(TransportError):
        _dispatcher().send({"orderId": "1"}, "tok")
    assert len(calls) == 1


def test_response_is_closed_without_reading_body(monkeypatch):
    response = FakeResponse(200)
    monkeypatch.setattr(
        "orderhub.upstream.dispatcher.requests.post",
        lambda url, data=None, headers=None, timeout=None, stream=False: response,
    )
    result = _dispatcher().send({"orderId": "1"}, "tok")
    assert result.delivered is True
    assert response.closed is True
