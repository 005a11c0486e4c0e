"""
Inbound webhook record and the canonical upstream order payload.

Checkout platforms send loosely shaped JSON. InboundOrder turns it into
a record where every field is optional and has an explicit default
policy, so the normalizer never touches raw dicts.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def coerce_text(value: Any) -> Optional[str]:
    """Strings are stripped, numbers stringified, anything else is absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    return None


def coerce_cents(value: Any) -> int:
    """Numeric input (or numeric string) as integer cents, rounded half up; anything else is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        value = repr(value)
    if not isinstance(value, str):
        return 0
    try:
        amount = Decimal(value.strip())
    except InvalidOperation:
        return 0
    # Past float range counts as infinite.
    if not amount.is_finite() or amount.adjusted() > 308:
        return 0
    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


class InboundOrder(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    transaction_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("transactionId", "transaction_id", "id"),
    )
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    value: int = 0
    src: Optional[str] = None
    sck: Optional[str] = None
    utm_source: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_content: Optional[str] = None
    utm_term: Optional[str] = None

    @field_validator(
        "transaction_id",
        "name",
        "email",
        "phone",
        "src",
        "sck",
        "utm_source",
        "utm_campaign",
        "utm_medium",
        "utm_content",
        "utm_term",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return coerce_text(value)

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> int:
        return coerce_cents(value)

    @classmethod
    def from_raw(cls, raw: Any) -> "InboundOrder":
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)


class OrderCustomer(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    document: Optional[str] = None


class OrderProduct(BaseModel):
    id: str
    name: str
    planId: Optional[str] = None
    planName: Optional[str] = None
    quantity: int = 1
    priceInCents: int


class TrackingParameters(BaseModel):
    src: Optional[str] = None
    sck: Optional[str] = None
    utm_source: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_content: Optional[str] = None
    utm_term: Optional[str] = None


class OrderCommission(BaseModel):
    totalPriceInCents: int
    gatewayFeeInCents: int = 0
    userCommissionInCents: int
    currency: str


class OrderPayload(BaseModel):
    orderId: str
    platform: str
    paymentMethod: str
    status: Literal["paid"] = "paid"
    createdAt: str
    approvedDate: str
    refundedAt: Optional[str] = None
    customer: OrderCustomer
    products: list[OrderProduct]
    trackingParameters: TrackingParameters
    commission: OrderCommission
