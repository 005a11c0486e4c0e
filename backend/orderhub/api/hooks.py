# Public webhook endpoint the checkout platform calls. Authentication
# is the per-integration shared secret header, not a session token.

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from orderhub.api.dependencies import get_context, get_db
from orderhub.core.context import AppContext


router = APIRouter(prefix="/hook", tags=["webhooks"])


@router.post("/{integration_id}")
async def receive_hook(
    integration_id: str,
    request: Request,
    ctx: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
):
    raw_body = await request.body()
    presented_secret = request.headers.get(ctx.settings.HOOK_SECRET_HEADER)
    ack = await run_in_threadpool(
        ctx.ingress.receive, db, integration_id, presented_secret, raw_body
    )
    return JSONResponse(status_code=ack.status_code, content=ack.body)
