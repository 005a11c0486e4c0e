from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text

from orderhub.core.db import Base
from orderhub.core.time import utcnow


class Integration(Base):
    __tablename__ = "integrations"
    __table_args__ = (
        Index("ix_integrations_user_created_at", "user_id", "created_at"),
    )

    # Opaque UUID string; it appears in the public webhook URL.
    id = Column(String(36), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    name = Column(String, nullable=True)
    platform = Column(String, nullable=True)
    currency = Column(String, nullable=True)
    upstream_token_encrypted = Column(Text, nullable=False)
    # Written once at creation, never rotated.
    hook_secret = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
