import json

import pytest
import requests

from orderhub.models.events import Event
from factories import (
    UPSTREAM_URL,
    FakeResponse,
    make_client,
    make_integration,
    make_settings,
    make_user,
)


SECRET_HEADER = "X-Hook-Secret"


@pytest.fixture
def client(tmp_path):
    with make_client(make_settings(tmp_path)) as test_client:
        yield test_client


@pytest.fixture
def integration(client):
    with client.app.state.context.database.session() as db:
        owner = make_user(db)
        return make_integration(db, owner=owner, upstream_token="utm-token-xyz", platform="Kiwify", currency=None)


@pytest.fixture
def upstream(monkeypatch):
    calls = []
    state = {"status_code": 200, "error": None}

    def fake_post(url, data=None, headers=None, timeout=None, stream=False):
        calls.append({"url": url, "body": json.loads(data), "headers": headers, "timeout": timeout, "stream": stream})
        if state["error"] is not None:
            raise state["error"]
        return FakeResponse(state["status_code"])

    monkeypatch.setattr("orderhub.upstream.dispatcher.requests.post", fake_post)
    return {"calls": calls, "state": state}


def _events(client, integration_id):
    with client.app.state.context.database.session() as db:
        return db.query(Event).filter(Event.integration_id == integration_id).all()


def _post_hook(client, integration, body, secret=None):
    headers = {SECRET_HEADER: secret if secret is not None else integration.hook_secret}
    return client.post(f"/hook/{integration.id}", json=body, headers=headers)


def test_valid_hook_forwards_and_records_one_event(client, integration, upstream):
    resp = _post_hook(
        client,
        integration,
        {
            "transactionId": "tx-1",
            "name": "Ana",
            "email": "ana@example.com",
            "phone": "5511999999999",
            "value": 4990,
            "utm_source": "facebook",
            "utm_campaign": "launch",
        },
    )
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    events = _events(client, integration.id)
    assert len(events) == 1
    assert events[0].status == "success"
    assert events[0].upstream_status == 200
    assert events[0].error is None

    call = upstream["calls"][0]
    assert call["url"] == UPSTREAM_URL
    assert call["headers"]["x-api-token"] == "utm-token-xyz"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == (10.0, 10.0)
    assert call["stream"] is True
    body = call["body"]
    assert body["orderId"] == "tx-1"
    assert body["status"] == "paid"
    assert body["platform"] == "Kiwify"
    assert body["customer"] == {
        "name": "Ana",
        "email": "ana@example.com",
        "phone": "5511999999999",
        "document": None,
    }
    assert body["products"][0]["priceInCents"] == 4990
    assert body["commission"] == {
        "totalPriceInCents": 4990,
        "gatewayFeeInCents": 0,
        "userCommissionInCents": 4990,
        "currency": "BRL",
    }
    assert body["trackingParameters"]["utm_source"] == "facebook"
    assert body["trackingParameters"]["utm_term"] is None


def test_unknown_integration_is_404_without_event(client, integration, upstream):
    resp = client.post("/hook/not-a-real-id", json={"value": 1}, headers={SECRET_HEADER: "x"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "not found"}
    assert _events(client, "not-a-real-id") == []
    assert upstream["calls"] == []


@pytest.mark.parametrize("secret", ["wrong-secret", ""])
def test_wrong_secret_is_401_without_event(client, integration, upstream, secret):
    resp = _post_hook(client, integration, {"value": 1}, secret=secret)
    assert resp.status_code == 401
    assert resp.json() == {"error": "invalid secret"}
    assert _events(client, integration.id) == []
    assert upstream["calls"] == []


def test_missing_secret_header_is_401(client, integration, upstream):
    resp = client.post(f"/hook/{integration.id}", json={"value": 1})
    assert resp.status_code == 401
    assert _events(client, integration.id) == []


def test_duplicate_calls_are_not_merged(client, integration, upstream):
    body = {"transactionId": "tx-dup", "value": 100}
    assert _post_hook(client, integration, body).status_code == 200
    assert _post_hook(client, integration, body).status_code == 200
    assert len(_events(client, integration.id)) == 2
    assert len(upstream["calls"]) == 2


def test_upstream_rejection_is_acknowledged_and_logged_as_error(client, integration, upstream):
    upstream["state"]["status_code"] = 422
    resp = _post_hook(client, integration, {"value": 100})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    events = _events(client, integration.id)
    assert len(events) == 1
    assert events[0].status == "error"
    assert events[0].upstream_status == 422
    assert "422" in events[0].error


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.ConnectionError("Connection refused"),
        requests.exceptions.Timeout("read timed out"),
    ],
)
def test_transport_failure_records_error_without_status(client, integration, upstream, error):
    upstream["state"]["error"] = error
    resp = _post_hook(client, integration, {"value": 100})
    assert resp.status_code == 500
    assert resp.json() == {"error": "failed"}
    events = _events(client, integration.id)
    assert len(events) == 1
    assert events[0].status == "error"
    assert events[0].upstream_status is None
    assert events[0].error


def test_empty_body_uses_defaults(client, integration, upstream):
    resp = _post_hook(client, integration, {})
    assert resp.status_code == 200
    body = upstream["calls"][0]["body"]
    assert body["products"][0]["priceInCents"] == 0
    assert body["commission"]["totalPriceInCents"] == 0
    assert body["customer"]["email"] == "N/A"
    assert body["customer"]["name"] == "N/A"
    assert body["customer"]["phone"] is None
    assert body["orderId"].isdigit()
    assert all(value is None for value in body["trackingParameters"].values())


def test_non_json_body_is_accepted(client, integration, upstream):
    resp = client.post(
        f"/hook/{integration.id}",
        content=b"transactionId=1&value=abc",
        headers={SECRET_HEADER: integration.hook_secret, "Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 200
    assert len(_events(client, integration.id)) == 1
    assert upstream["calls"][0]["body"]["commission"]["totalPriceInCents"] == 0


def test_deeply_nested_body_falls_back_to_defaults(client, integration, upstream):
    depth = 100_000
    raw = b'{"value": ' + b"[" * depth + b"]" * depth + b"}"
    resp = client.post(
        f"/hook/{integration.id}",
        content=raw,
        headers={SECRET_HEADER: integration.hook_secret, "Content-Type": "application/json"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    events = _events(client, integration.id)
    assert len(events) == 1
    assert events[0].status == "success"
    assert len(upstream["calls"]) == 1
    assert upstream["calls"][0]["body"]["commission"]["totalPriceInCents"] == 0


def test_events_reference_integration_and_are_readable_by_owner(client, upstream):
    resp = client.post("/auth/register", json={"email": "owner@example.com", "password": "pw"})
    assert resp.status_code == 200
    token = client.post("/auth/login", json={"email": "owner@example.com", "password": "pw"}).json()["token"]
    created = client.post(
        "/integrations",
        json={"name": "Shop", "upstream_token": "tok"},
        headers={"Authorization": f"Bearer {token}"},
    ).json()

    resp = client.post(
        created["hook_path"],
        json={"transactionId": "abc", "value": "12.5"},
        headers={SECRET_HEADER: created["hook_secret"]},
    )
    assert resp.status_code == 200

    resp = client.get(f"/events/{created['id']}", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    events = resp.json()
    assert len(events) == 1
    assert events[0]["status"] == "success"
    assert events[0]["upstream_status"] == 200
    assert events[0]["integration_id"] == created["id"]
