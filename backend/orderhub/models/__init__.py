from orderhub.models.events import Event
from orderhub.models.integrations import Integration
from orderhub.models.users import User

__all__ = ["Event", "Integration", "User"]
