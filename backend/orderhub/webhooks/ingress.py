"""
Inbound webhook pipeline.

receive() runs one call end to end:

1. look up the integration by path id (missing -> NotFound, no event)
2. compare the presented secret (mismatch -> Unauthorized, no event)
3. normalise the body into the canonical order payload
4. dispatch it upstream
5. append exactly one event describing the outcome

Steps 1-2 raise; from step 3 on every outcome is recorded in the
ledger before an Acknowledgement is returned.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from orderhub.core.config import Settings
from orderhub.core.crypto import SecretBox
from orderhub.core.errors import NotFound, TransportError, Unauthorized
from orderhub.core.keys import secrets_match
from orderhub.core.metrics import record_webhook
from orderhub.crud.events import append_event
from orderhub.crud.integrations import get_integration
from orderhub.models.events import EVENT_STATUS_ERROR, EVENT_STATUS_SUCCESS
from orderhub.schemas.webhooks import InboundOrder
from orderhub.upstream.dispatcher import UpstreamDispatcher
from orderhub.webhooks.normalizer import build_order_payload


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Acknowledgement:
    status_code: int
    body: dict[str, Any] = field(default_factory=lambda: {"ok": True})

    @property
    def accepted(self) -> bool:
        return self.status_code < 400


ACCEPTED = Acknowledgement(200, {"ok": True})
FAILED = Acknowledgement(500, {"error": "failed"})


def parse_body(raw_body: bytes | str | None) -> Any:
    if not raw_body:
        return {}
    try:
        return json.loads(raw_body)
    except (TypeError, ValueError, UnicodeDecodeError, RecursionError):
        return {}


class WebhookIngress:
    def __init__(self, *, settings: Settings, secret_box: SecretBox, dispatcher: UpstreamDispatcher):
        self.settings = settings
        self.secret_box = secret_box
        self.dispatcher = dispatcher

    def receive(
        self,
        db: Session,
        integration_id: str,
        presented_secret: str | None,
        raw_body: bytes | str | None,
        *,
        now: datetime | None = None,
    ) -> Acknowledgement:
        integration = get_integration(db, integration_id)
        if integration is None:
            record_webhook("not_found")
            logger.info("webhook.rejected", extra={"integration_id": integration_id, "reason": "not_found"})
            raise NotFound()

        if not secrets_match(presented_secret, integration.hook_secret):
            record_webhook("unauthorized")
            logger.info("webhook.rejected", extra={"integration_id": integration_id, "reason": "invalid_secret"})
            raise Unauthorized("invalid secret")

        inbound = InboundOrder.from_raw(parse_body(raw_body))
        payload = build_order_payload(
            inbound,
            integration,
            default_currency=self.settings.DEFAULT_CURRENCY,
            default_platform=self.settings.DEFAULT_PLATFORM,
            now=now,
        )

        try:
            upstream_token = self.secret_box.decrypt(integration.upstream_token_encrypted)
            result = self.dispatcher.send(
                payload.model_dump(mode="json"), upstream_token, integration_id=integration.id
            )
        except (TransportError, ValueError) as exc:
            append_event(db, integration.id, EVENT_STATUS_ERROR, error=str(exc))
            record_webhook("failed")
            logger.warning(
                "webhook.dispatch_failed",
                extra={"integration_id": integration.id, "order_id": payload.orderId, "error": str(exc)},
            )
            return FAILED

        if result.delivered:
            append_event(db, integration.id, EVENT_STATUS_SUCCESS, status_code=result.status_code)
        else:
            append_event(
                db,
                integration.id,
                EVENT_STATUS_ERROR,
                status_code=result.status_code,
                error=f"upstream responded with status {result.status_code}",
            )
        record_webhook("accepted")
        logger.info(
            "webhook.received",
            extra={
                "integration_id": integration.id,
                "order_id": payload.orderId,
                "delivered": result.delivered,
                "upstream_status": result.status_code,
            },
        )
        return ACCEPTED
