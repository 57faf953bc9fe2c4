"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from gigmarket.db.enums import Role


class TokenPayload(BaseModel):
    """Decoded bearer token claims we rely on."""
    sub: str  # auth provider subject, matches users.external_id
    email: str | None = None


class AuthenticatedPrincipal(BaseModel):
    """
    The caller of an authenticated request.

    Returned by the get_current_principal dependency and passed
    explicitly into every service call that checks ownership.
    """
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str
    role: Role
    name: str | None = None
