import base64

from cryptography.fernet import Fernet, InvalidToken


def _load_key(key_value: str | bytes | None) -> bytes:
    if not key_value:
        raise ValueError("INTEGRATION_ENCRYPTION_KEY is not set")
    if isinstance(key_value, str):
        key_bytes = key_value.encode("utf-8")
    else:
        key_bytes = key_value
    if len(key_bytes) == 32:
        key_bytes = base64.urlsafe_b64encode(key_bytes)
    return key_bytes


class SecretBox:
    """Symmetric encryption for secrets stored at rest (upstream tokens)."""

    def __init__(self, key_value: str | bytes | None):
        self._key_value = key_value
        self._fernet: Fernet | None = None

    def _get_fernet(self) -> Fernet:
        if self._fernet is None:
            try:
                self._fernet = Fernet(_load_key(self._key_value))
            except Exception as exc:
                raise ValueError("Invalid INTEGRATION_ENCRYPTION_KEY") from exc
        return self._fernet

    def encrypt(self, plaintext: str) -> str:
        token = self._get_fernet().encrypt(plaintext.encode("utf-8"))
        return token.decode("utf-8")

    def decrypt(self, token: str) -> str:
        try:
            raw = self._get_fernet().decrypt(token.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError("Invalid encrypted payload") from exc
        return raw.decode("utf-8")


def mask_secret(value: str | None, visible: int = 4) -> str | None:
    if not value:
        return None
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * 4 + value[-visible:]
