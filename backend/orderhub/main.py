# This file bootstraps the FastAPI app: it builds the application
# context, wires up logging/metrics middleware and CORS, registers the
# domain error handler, and includes the routers.
#
# create_app() takes an explicit Settings object; the module-level
# `app` is only for `uvicorn orderhub.main:app`.

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from orderhub.api.auth import router as auth_router
from orderhub.api.events import router as events_router
from orderhub.api.hooks import router as hooks_router
from orderhub.api.integrations import router as integrations_router
from orderhub.core.config import Settings, get_settings
from orderhub.core.context import AppContext
from orderhub.core.errors import OrderHubError
from orderhub.core.logging import APILoggingMiddleware, get_structured_logger
from orderhub.core.metrics import MetricsMiddleware
from orderhub.core.startup_checks import run_startup_checks
from orderhub.core.tracing import RequestContextMiddleware


def handle_domain_error(_request: Request, exc: OrderHubError):
    response = JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    response.headers["X-Error-Code"] = exc.code
    if exc.status_code == 401:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    get_structured_logger("orderhub")
    context = AppContext.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        run_startup_checks(settings)
        context.open()
        try:
            yield
        finally:
            context.close()

    app = FastAPI(title="orderhub", lifespan=lifespan)
    app.state.context = context

    app.add_exception_handler(OrderHubError, handle_domain_error)

    app.include_router(auth_router)
    app.include_router(integrations_router)
    app.include_router(events_router)
    app.include_router(hooks_router)

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/ping")
    def ping():
        return {"message": "pong"}

    # Observability layers
    app.add_middleware(APILoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


def __getattr__(name: str):
    # Lazily build the default app so importing this module does not
    # require DATABASE_URL / SECRET_KEY to be set.
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    raise AttributeError(name)
