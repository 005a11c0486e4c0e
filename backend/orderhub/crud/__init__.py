from .users import get_user, get_user_by_email, create_user
from .integrations import (
    create_integration,
    get_integration,
    get_integration_for_owner,
    list_integrations_for_owner,
)
from .events import append_event, list_recent_events
