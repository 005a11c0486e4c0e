from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    integration_id: str
    status: str
    upstream_status: Optional[int] = None
    error: Optional[str] = None
    received_at: datetime
