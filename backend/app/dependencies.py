"""FastAPI dependencies: DB sessions and admin identity."""

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session

from adrevenue.services.errors import AuthenticationRequiredError, AuthorizationDeniedError
from db.connection import get_db as get_db  # noqa: F401
from db.models import Users


def get_current_user(
    authorization: str = Header(default=""),
    db: Session = Depends(get_db),
) -> Users:
    """Resolve the caller from an ``Authorization: Bearer <token>`` header."""
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationRequiredError()
    user: Users | None = db.scalar(select(Users).where(Users.api_token == token))
    if user is None:
        raise AuthenticationRequiredError()
    return user


def require_admin(user: Users = Depends(get_current_user)) -> Users:
    """Only users with an admin record may read revenue data."""
    if user.admin is None:
        raise AuthorizationDeniedError()
    return user
