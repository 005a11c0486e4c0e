"""
FastAPI dependencies: the application context, a per-request database
session, and the authenticated user behind a bearer session token.
"""

from typing import Iterator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from orderhub.core.context import AppContext
from orderhub.core.errors import Unauthorized
from orderhub.core.security import decode_access_token
from orderhub.crud.users import get_user
from orderhub.models.users import User


bearer_scheme = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(ctx: AppContext = Depends(get_context)) -> Iterator[Session]:
    yield from ctx.database.session_scope()


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    ctx: AppContext = Depends(get_context),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise Unauthorized()
    try:
        payload = decode_access_token(ctx.settings, credentials.credentials)
    except ValueError as exc:
        raise Unauthorized("invalid token") from exc
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise Unauthorized("invalid token")
    user = get_user(db, int(subject))
    if user is None:
        raise Unauthorized("invalid token")
    return user
