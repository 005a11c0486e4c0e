# Recent delivery events for one integration, newest first. Only the
# owner of the integration may read them; anything else is a 404 so
# integration ids are not probeable.

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from orderhub.api.dependencies import get_current_user, get_db
from orderhub.core.errors import NotFound
from orderhub.crud.events import MAX_RECENT_EVENTS, list_recent_events
from orderhub.crud.integrations import get_integration_for_owner
from orderhub.models.users import User
from orderhub.schemas.events import EventRead


router = APIRouter(prefix="/events", tags=["events"])


@router.get("/{integration_id}", response_model=list[EventRead])
def read_events(
    integration_id: str,
    limit: int = Query(default=MAX_RECENT_EVENTS, ge=1, le=MAX_RECENT_EVENTS),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if get_integration_for_owner(db, current_user.id, integration_id) is None:
        raise NotFound("integration not found")
    return list_recent_events(db, integration_id, limit)
