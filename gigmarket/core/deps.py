"""FastAPI dependencies for authentication, presence, and database access."""

from typing import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from gigmarket.core.security import decode_access_token, extract_bearer_token
from gigmarket.core.websocket import PresenceRegistry
from gigmarket.db.session import SessionLocal
from gigmarket.schemas.auth import AuthenticatedPrincipal, TokenPayload


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def resolve_principal(db: Session, token: str | None) -> AuthenticatedPrincipal:
    """
    Turn a bearer token into the caller's principal.

    Validates:
    - Token is present
    - JWT signature and expiry (current or previous secret)
    - A local user exists for the provider subject and is active

    Raises:
        HTTPException 401: Authentication failed
    """
    # Import here to avoid circular imports
    from gigmarket.db.enums import Role
    from gigmarket.db.models import User

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        claims = TokenPayload.model_validate(decode_access_token(token))
    except (jwt.InvalidTokenError, PydanticValidationError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.execute(
        select(User).where(User.external_id == claims.sub)
    ).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    if not Role.has_value(user.role):
        raise HTTPException(status_code=401, detail=f"Unknown role '{user.role}'")

    return AuthenticatedPrincipal(
        user_id=user.id,
        email=user.email,
        role=Role(user.role),
        name=user.name,
    )


def get_current_principal(
    request: Request,
    db: Session = Depends(get_db),
) -> AuthenticatedPrincipal:
    """
    Get the authenticated caller from the Authorization header.

    This is the PRIMARY auth dependency for every order, review,
    payment and notification endpoint.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    return resolve_principal(db, token)


def get_presence(request: Request) -> PresenceRegistry:
    """Presence registry held on app.state (swappable per deployment/test)."""
    return request.app.state.presence
