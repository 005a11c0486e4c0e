from sqlalchemy.orm import Session

from orderhub.core.crypto import SecretBox
from orderhub.core.errors import MissingToken
from orderhub.core.keys import generate_hook_secret, generate_integration_id
from orderhub.models.integrations import Integration


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_integration(
    db: Session,
    secret_box: SecretBox,
    *,
    owner_id: int,
    name: str | None,
    platform: str | None,
    currency: str | None,
    upstream_token: str | None,
) -> Integration:
    token = _clean(upstream_token)
    if not token:
        raise MissingToken()
    currency = _clean(currency)
    integration = Integration(
        id=generate_integration_id(),
        user_id=owner_id,
        name=_clean(name),
        platform=_clean(platform),
        currency=currency.upper() if currency else None,
        upstream_token_encrypted=secret_box.encrypt(token),
        hook_secret=generate_hook_secret(),
    )
    db.add(integration)
    db.commit()
    db.refresh(integration)
    return integration


def list_integrations_for_owner(db: Session, owner_id: int) -> list[Integration]:
    return (
        db.query(Integration)
        .filter(Integration.user_id == owner_id)
        .order_by(Integration.created_at.asc(), Integration.id.asc())
        .all()
    )


def get_integration(db: Session, integration_id: str) -> Integration | None:
    if not integration_id:
        return None
    return db.query(Integration).filter(Integration.id == integration_id).first()


def get_integration_for_owner(db: Session, owner_id: int, integration_id: str) -> Integration | None:
    integration = get_integration(db, integration_id)
    if integration is None or integration.user_id != owner_id:
        return None
    return integration
