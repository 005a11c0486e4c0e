"""
Startup-time checks for required configuration.
"""

from __future__ import annotations

from orderhub.core.config import Settings


def _is_production(settings: Settings) -> bool:
    env = (settings.ENVIRONMENT or "").strip().lower()
    return env in {"production", "prod"}


def _has_placeholder_secret(value: str | None) -> bool:
    if not value:
        return True
    lowered = value.strip().lower()
    return lowered in {"changeme", "dev-secret", "secret", "super-secret-key"}


def run_startup_checks(settings: Settings) -> None:
    missing: list[str] = []
    insecure: list[str] = []

    if not settings.DATABASE_URL:
        missing.append("DATABASE_URL")
    if not settings.SECRET_KEY:
        missing.append("SECRET_KEY")
    if not settings.INTEGRATION_ENCRYPTION_KEY:
        missing.append("INTEGRATION_ENCRYPTION_KEY")
    if not settings.UPSTREAM_URL:
        missing.append("UPSTREAM_URL")

    if _is_production(settings):
        if _has_placeholder_secret(settings.SECRET_KEY) or len(settings.SECRET_KEY or "") < 32:
            insecure.append("SECRET_KEY")
        if settings.UPSTREAM_URL and not settings.UPSTREAM_URL.startswith("https://"):
            insecure.append("UPSTREAM_URL")

    if missing or insecure:
        parts = []
        if missing:
            parts.append(f"Missing required settings: {', '.join(sorted(set(missing)))}")
        if insecure:
            parts.append(f"Insecure settings detected: {', '.join(sorted(set(insecure)))}")
        raise RuntimeError("Startup checks failed. " + " ".join(parts))
