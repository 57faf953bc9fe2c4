"""Bearer token verification for the third-party auth provider."""

from datetime import datetime, timedelta, timezone

import jwt

from gigmarket.core.config import settings


def create_access_token(subject: str, email: str | None = None) -> str:
    """
    Mint a signed bearer token.

    Production tokens come from the auth provider; this exists for
    local development and tests. Always signs with the current secret.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(hours=settings.AUTH_JWT_EXPIRES_HOURS),
    }
    if email:
        payload["email"] = email
    if settings.AUTH_JWT_AUDIENCE:
        payload["aud"] = settings.AUTH_JWT_AUDIENCE
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a bearer token.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    options = {"require": ["sub", "exp"]}
    audience = settings.AUTH_JWT_AUDIENCE or None
    if audience is None:
        options["verify_aud"] = False

    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[settings.AUTH_JWT_ALGORITHM],
                audience=audience,
                options=options,
            )
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
