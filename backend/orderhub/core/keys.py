import hmac
import secrets
from uuid import uuid4


def generate_integration_id() -> str:
    return str(uuid4())


def generate_hook_secret() -> str:
    return secrets.token_urlsafe(32)


def secrets_match(presented: str | None, stored: str | None) -> bool:
    # Constant-time, byte-for-byte. A missing value never matches.
    if not presented or not stored:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), stored.encode("utf-8"))
