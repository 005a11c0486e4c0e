# Maps an inbound checkout webhook onto the fixed upstream order
# schema. Missing or malformed fields fall back to defaults; nothing
# here rejects a call.

from __future__ import annotations

from datetime import datetime, timezone

from orderhub.models.integrations import Integration
from orderhub.schemas.webhooks import (
    InboundOrder,
    OrderCommission,
    OrderCustomer,
    OrderPayload,
    OrderProduct,
    TrackingParameters,
)


PLACEHOLDER = "N/A"
PAYMENT_METHOD = "credit_card"
PRODUCT_ID = "item"
PRODUCT_NAME = "Produto"
UPSTREAM_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(UPSTREAM_TIMESTAMP_FORMAT)


def fallback_order_id(now: datetime) -> str:
    # Epoch milliseconds. Best-effort only, not unique.
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return str(int(now.timestamp() * 1000))


def build_order_payload(
    inbound: InboundOrder,
    integration: Integration,
    *,
    default_currency: str,
    default_platform: str,
    now: datetime | None = None,
) -> OrderPayload:
    now = now or datetime.now(timezone.utc)
    processed_at = format_timestamp(now)
    value = inbound.value
    return OrderPayload(
        orderId=inbound.transaction_id or fallback_order_id(now),
        platform=integration.platform or default_platform,
        paymentMethod=PAYMENT_METHOD,
        status="paid",
        createdAt=processed_at,
        approvedDate=processed_at,
        refundedAt=None,
        customer=OrderCustomer(
            name=inbound.name or PLACEHOLDER,
            email=inbound.email or PLACEHOLDER,
            phone=inbound.phone,
            document=None,
        ),
        products=[
            OrderProduct(
                id=PRODUCT_ID,
                name=PRODUCT_NAME,
                planId=None,
                planName=None,
                quantity=1,
                priceInCents=value,
            )
        ],
        trackingParameters=TrackingParameters(
            src=inbound.src,
            sck=inbound.sck,
            utm_source=inbound.utm_source,
            utm_campaign=inbound.utm_campaign,
            utm_medium=inbound.utm_medium,
            utm_content=inbound.utm_content,
            utm_term=inbound.utm_term,
        ),
        commission=OrderCommission(
            totalPriceInCents=value,
            gatewayFeeInCents=0,
            userCommissionInCents=value,
            currency=integration.currency or default_currency,
        ),
    )
