import json
import logging

import pytest

from orderhub.core.logging import JsonLogFormatter
from orderhub.core.tracing import trace_span
from orderhub.upstream.dispatcher import UpstreamDispatcher
from factories import FakeResponse, make_client, make_integration, make_settings, make_user


def test_ping_and_request_id(tmp_path):
    with make_client(make_settings(tmp_path)) as client:
        resp = client.get("/ping", headers={"X-Request-ID": "req-123"})
        assert resp.status_code == 200
        assert resp.json() == {"message": "pong"}
        assert resp.headers["X-Request-Id"] == "req-123"
        assert client.get("/ping").headers["X-Request-Id"]


def test_metrics_count_webhook_outcomes(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "orderhub.upstream.dispatcher.requests.post",
        lambda url, data=None, headers=None, timeout=None, stream=False: FakeResponse(200),
    )
    with make_client(make_settings(tmp_path)) as client:
        with client.app.state.context.database.session() as db:
            integration = make_integration(db, owner=make_user(db))
        client.post(f"/hook/{integration.id}", json={}, headers={"X-Hook-Secret": integration.hook_secret})
        client.post(f"/hook/{integration.id}", json={}, headers={"X-Hook-Secret": "nope"})

        resp = client.get("/metrics")
        assert resp.status_code == 200
        text = resp.text
        assert 'orderhub_webhook_requests_total{outcome="accepted"}' in text
        assert 'orderhub_webhook_requests_total{outcome="unauthorized"}' in text
        assert 'orderhub_upstream_dispatch_total{outcome="delivered"}' in text


def test_json_log_formatter_includes_extra_fields():
    record = logging.LogRecord(
        name="orderhub.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="webhook.received",
        args=(),
        exc_info=None,
    )
    record.integration_id = "abc"
    record.upstream_status = 200
    payload = json.loads(JsonLogFormatter().format(record))
    assert payload["message"] == "webhook.received"
    assert payload["level"] == "INFO"
    assert payload["integration_id"] == "abc"
    assert payload["upstream_status"] == 200


class _Recorder:
    def __init__(self):
        self.records = []

    def log(self, level, msg, extra=None):
        self.records.append((level, msg, extra or {}))


def test_dispatch_span_carries_order_and_integration(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr("orderhub.core.tracing.logger", recorder)
    monkeypatch.setattr(
        "orderhub.upstream.dispatcher.requests.post",
        lambda url, data=None, headers=None, timeout=None, stream=False: FakeResponse(200),
    )
    UpstreamDispatcher(url="https://upstream.example.com", timeout=1.0).send(
        {"orderId": "tx-9"}, "tok", integration_id="int-1"
    )

    [(level, msg, extra)] = recorder.records
    assert msg == "span.end"
    assert level == logging.INFO
    assert extra["span_name"] == "upstream.send"
    assert extra["order_id"] == "tx-9"
    assert extra["integration_id"] == "int-1"
    assert extra["outcome"] == "ok"


def test_failing_span_logs_error_and_reraises(monkeypatch):
    recorder = _Recorder()
    monkeypatch.setattr("orderhub.core.tracing.logger", recorder)
    with pytest.raises(RuntimeError):
        with trace_span("webhook.work", order_id="tx-1"):
            raise RuntimeError("boom")

    [(level, msg, extra)] = recorder.records
    assert level == logging.WARNING
    assert extra["outcome"] == "error"
    assert extra["error_type"] == "RuntimeError"
