from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class IntegrationCreate(BaseModel):
    name: Optional[str] = None
    platform: Optional[str] = None
    currency: Optional[str] = None
    upstream_token: Optional[str] = None


class IntegrationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str]
    platform: Optional[str]
    currency: Optional[str]
    hook_secret: str
    upstream_token_hint: Optional[str] = None
    hook_path: str
    created_at: datetime
