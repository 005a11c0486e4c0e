# Credential store operations: register a user and exchange
# email/password for a signed session token.

import logging

from sqlalchemy.orm import Session

from orderhub.core.config import Settings
from orderhub.core.errors import InvalidCredentials
from orderhub.core.security import create_access_token, get_password_hash, verify_password
from orderhub.crud.users import create_user, get_user_by_email
from orderhub.models.users import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def register_account(db: Session, email: str, password: str) -> User:
    # Hash before storing; never persist plaintext.
    user = create_user(db, normalize_email(email), get_password_hash(password))
    logger.info("account.registered", extra={"user_id": user.id})
    return user


def authenticate(db: Session, settings: Settings, email: str, password: str) -> str:
    user = get_user_by_email(db, normalize_email(email))
    # Same error for unknown email and wrong password.
    if not user or not verify_password(password, user.password_hash):
        logger.info("account.login_failed")
        raise InvalidCredentials()
    token = create_access_token(settings, {"sub": str(user.id), "email": user.email})
    logger.info("account.login", extra={"user_id": user.id})
    return token
