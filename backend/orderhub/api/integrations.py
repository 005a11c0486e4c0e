from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from orderhub.api.dependencies import get_context, get_current_user, get_db
from orderhub.core.context import AppContext
from orderhub.core.crypto import mask_secret
from orderhub.crud.integrations import create_integration, list_integrations_for_owner
from orderhub.models.integrations import Integration
from orderhub.models.users import User
from orderhub.schemas.integrations import IntegrationCreate, IntegrationRead


router = APIRouter(prefix="/integrations", tags=["integrations"])


def _to_read(ctx: AppContext, integration: Integration) -> IntegrationRead:
    # The upstream token only ever leaves the service as a masked hint.
    try:
        hint = mask_secret(ctx.secret_box.decrypt(integration.upstream_token_encrypted))
    except ValueError:
        hint = None
    return IntegrationRead(
        id=integration.id,
        name=integration.name,
        platform=integration.platform,
        currency=integration.currency,
        hook_secret=integration.hook_secret,
        upstream_token_hint=hint,
        hook_path=f"/hook/{integration.id}",
        created_at=integration.created_at,
    )


@router.get("", response_model=list[IntegrationRead])
def list_integrations_endpoint(
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    return [_to_read(ctx, item) for item in list_integrations_for_owner(db, current_user.id)]


@router.post("", response_model=IntegrationRead)
def create_integration_endpoint(
    payload: IntegrationCreate,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    current_user: User = Depends(get_current_user),
):
    integration = create_integration(
        db,
        ctx.secret_box,
        owner_id=current_user.id,
        name=payload.name,
        platform=payload.platform,
        currency=payload.currency,
        upstream_token=payload.upstream_token,
    )
    return _to_read(ctx, integration)
