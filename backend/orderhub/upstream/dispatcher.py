from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from time import monotonic
from typing import Any

import requests

from orderhub.core.errors import TransportError
from orderhub.core.metrics import record_dispatch
from orderhub.core.tracing import trace_span


logger = logging.getLogger(__name__)


def _encode_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"))


@dataclass(frozen=True)
class DispatchResult:
    delivered: bool
    status_code: int


class UpstreamDispatcher:
    """Single best-effort POST of a canonical order to the analytics API.

    A response of any status is a DispatchResult; only failing to get a
    response at all (DNS, refused connection, timeout) raises
    TransportError. There is deliberately no retry.
    """

    def __init__(self, *, url: str, timeout: float, token_header: str = "x-api-token"):
        self.url = url
        self.timeout = timeout
        self.token_header = token_header

    def send(
        self, payload: dict[str, Any], upstream_token: str, *, integration_id: str | None = None
    ) -> DispatchResult:
        body = _encode_payload(payload)
        headers = {
            "Content-Type": "application/json",
            self.token_header: upstream_token,
        }
        start = monotonic()
        try:
            with trace_span("upstream.send", order_id=payload.get("orderId"), integration_id=integration_id):
                # Streamed so only the status line and headers are awaited; the
                # response body is never read.
                resp = requests.post(
                    self.url,
                    data=body,
                    headers=headers,
                    timeout=(self.timeout, self.timeout),
                    stream=True,
                )
                resp.close()
        except requests.RequestException as exc:
            record_dispatch("transport_error", monotonic() - start)
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        delivered = 200 <= resp.status_code < 300
        record_dispatch("delivered" if delivered else "rejected", monotonic() - start)
        if not delivered:
            logger.warning(
                "upstream.rejected",
                extra={"status_code": resp.status_code, "order_id": payload.get("orderId")},
            )
        return DispatchResult(delivered=delivered, status_code=resp.status_code)
