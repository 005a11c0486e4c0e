"""
Domain errors. Every error carries a stable code, a human message and
the HTTP status it maps to; orderhub.main renders them uniformly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class OrderHubError(Exception):
    code: str
    message: str
    status_code: int

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class DuplicateEmail(OrderHubError):
    def __init__(self, message: str = "user exists"):
        super().__init__(code="duplicate_email", message=message, status_code=400)


class InvalidCredentials(OrderHubError):
    def __init__(self, message: str = "invalid login"):
        super().__init__(code="invalid_credentials", message=message, status_code=401)


class Unauthorized(OrderHubError):
    def __init__(self, message: str = "unauthorized"):
        super().__init__(code="unauthorized", message=message, status_code=401)


class NotFound(OrderHubError):
    def __init__(self, message: str = "not found"):
        super().__init__(code="not_found", message=message, status_code=404)


class MissingToken(OrderHubError):
    def __init__(self, message: str = "missing token"):
        super().__init__(code="missing_token", message=message, status_code=400)


class TransportError(OrderHubError):
    """The upstream could not be reached (DNS, refused, timeout)."""

    def __init__(self, message: str = "upstream unreachable"):
        super().__init__(code="transport_error", message=message, status_code=502)
