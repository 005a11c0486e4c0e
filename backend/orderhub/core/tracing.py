from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from time import monotonic
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware

from orderhub.core.logging import get_structured_logger


_trace_id: ContextVar[str | None] = ContextVar("trace_id", default=None)
_span_id: ContextVar[str | None] = ContextVar("span_id", default=None)

logger = get_structured_logger("orderhub.trace")


def set_trace_id(value: str | None) -> None:
    if value:
        _trace_id.set(value)


def get_trace_id() -> str | None:
    return _trace_id.get()


def get_span_id() -> str | None:
    return _span_id.get()


def _new_span_id() -> str:
    return uuid4().hex[:16]


@contextmanager
def trace_span(name: str, **fields):
    """One span.end record per block, tagged with the request trace id.

    Callers pass order fields (order_id, integration_id) so a dispatch can be
    found from either side. A failing block logs outcome="error" and re-raises.
    """
    span_id = _new_span_id()
    token = _span_id.set(span_id)
    start = monotonic()
    outcome = "ok"
    try:
        yield span_id
    except Exception as exc:
        outcome = "error"
        fields["error_type"] = type(exc).__name__
        raise
    finally:
        logger.log(
            logging.WARNING if outcome == "error" else logging.INFO,
            "span.end",
            extra={
                "trace_id": get_trace_id(),
                "span_id": span_id,
                "span_name": name,
                "outcome": outcome,
                "duration_ms": round((monotonic() - start) * 1000.0, 2),
                **fields,
            },
        )
        _span_id.reset(token)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Attaches a request_id to request.state for correlation and echoes it
    back in the X-Request-Id response header.
    """

    async def dispatch(self, request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Request-Id")
            or str(uuid4())
        )
        request.state.request_id = request_id
        set_trace_id(request_id)
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response
