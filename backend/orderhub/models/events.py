from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from orderhub.core.db import Base
from orderhub.core.time import utcnow


EVENT_STATUS_SUCCESS = "success"
EVENT_STATUS_ERROR = "error"


class Event(Base):
    """Append-only record of one webhook delivery attempt.

    integration_id is a weak reference on purpose: there is no foreign
    key, so events survive an integration becoming unreachable.
    """

    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_integration_received_at", "integration_id", "received_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    integration_id = Column(String(36), nullable=False)
    status = Column(String, nullable=False)
    upstream_status = Column(Integer, nullable=True)
    error = Column(Text, nullable=True)
    received_at = Column(DateTime, default=utcnow, nullable=False)
