"""
Explicit application context.

Everything that would otherwise be process-wide state (the database
pool, the token signing key, the upstream client) hangs off one
AppContext built by create_app(). Lifecycle:

    ctx = AppContext.build(settings)
    ctx.open()    # acquire the connection pool, create tables
    ...           # serve requests
    ctx.close()   # release the pool

The FastAPI lifespan in orderhub.main drives open()/close().
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from orderhub.core.config import Settings
from orderhub.core.crypto import SecretBox
from orderhub.core.db import Database
import orderhub.models  # noqa: F401  (registers tables on Base.metadata)
from orderhub.upstream.dispatcher import UpstreamDispatcher
from orderhub.webhooks.ingress import WebhookIngress


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    database: Database
    secret_box: SecretBox
    dispatcher: UpstreamDispatcher
    ingress: WebhookIngress

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        secret_box = SecretBox(settings.INTEGRATION_ENCRYPTION_KEY)
        dispatcher = UpstreamDispatcher(
            url=settings.UPSTREAM_URL,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            token_header=settings.UPSTREAM_TOKEN_HEADER,
        )
        return cls(
            settings=settings,
            database=Database(settings.DATABASE_URL, echo=settings.DB_ECHO),
            secret_box=secret_box,
            dispatcher=dispatcher,
            ingress=WebhookIngress(settings=settings, secret_box=secret_box, dispatcher=dispatcher),
        )

    def open(self) -> None:
        self.database.connect()
        if os.getenv("SKIP_MIGRATIONS") != "1":
            self.database.create_all()
        logger.info("context.opened")

    def close(self) -> None:
        self.database.dispose()
        logger.info("context.closed")
