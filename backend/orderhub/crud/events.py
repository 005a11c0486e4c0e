# The event ledger. Rows are only ever inserted; there is no update
# or delete path. Reads are newest first by received_at, with id as a
# tiebreaker for rows that share a timestamp.

from sqlalchemy.orm import Session

from orderhub.models.events import EVENT_STATUS_ERROR, EVENT_STATUS_SUCCESS, Event

MAX_RECENT_EVENTS = 50


def _validate_shape(status: str, status_code: int | None, error: str | None) -> None:
    if status == EVENT_STATUS_SUCCESS:
        if status_code is None:
            raise ValueError("success events require an upstream status code")
        if error is not None:
            raise ValueError("success events cannot carry an error")
        return
    if status == EVENT_STATUS_ERROR:
        if not error:
            raise ValueError("error events require an error detail")
        return
    raise ValueError(f"Unsupported event status: {status}")


def append_event(
    db: Session,
    integration_id: str,
    status: str,
    status_code: int | None = None,
    error: str | None = None,
) -> int:
    _validate_shape(status, status_code, error)
    event = Event(
        integration_id=integration_id,
        status=status,
        upstream_status=status_code,
        error=error,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event.id


def list_recent_events(
    db: Session,
    integration_id: str,
    limit: int = MAX_RECENT_EVENTS,
) -> list[Event]:
    limit = max(1, min(int(limit), MAX_RECENT_EVENTS))
    return (
        db.query(Event)
        .filter(Event.integration_id == integration_id)
        .order_by(Event.received_at.desc(), Event.id.desc())
        .limit(limit)
        .all()
    )
