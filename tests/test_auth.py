"""Bearer token verification and principal resolution."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException

from gigmarket.core import security
from gigmarket.core.config import settings
from gigmarket.core.deps import resolve_principal
from gigmarket.db.enums import Role


def test_extract_bearer_token():
    assert security.extract_bearer_token("Bearer abc") == "abc"
    assert security.extract_bearer_token("bearer  abc ") == "abc"
    assert security.extract_bearer_token("Basic abc") is None
    assert security.extract_bearer_token("Bearer ") is None
    assert security.extract_bearer_token(None) is None


def test_token_roundtrip_carries_subject():
    token = security.create_access_token("auth|123", email="a@test.com")
    payload = security.decode_access_token(token)
    assert payload["sub"] == "auth|123"
    assert payload["email"] == "a@test.com"


def test_previous_secret_still_accepted(monkeypatch):
    token = security.create_access_token("auth|rotated")
    monkeypatch.setattr(settings, "AUTH_JWT_SECRET_PREVIOUS", settings.AUTH_JWT_SECRET)
    monkeypatch.setattr(settings, "AUTH_JWT_SECRET", "a-brand-new-secret")

    assert security.decode_access_token(token)["sub"] == "auth|rotated"


def test_unknown_secret_rejected(monkeypatch):
    token = security.create_access_token("auth|old")
    monkeypatch.setattr(settings, "AUTH_JWT_SECRET", "a-brand-new-secret")

    with pytest.raises(jwt.InvalidTokenError):
        security.decode_access_token(token)


def test_expired_token_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "auth|late", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )
    with pytest.raises(jwt.ExpiredSignatureError):
        security.decode_access_token(token)


# =============================================================================
# resolve_principal
# =============================================================================


def test_resolve_principal(db, seller):
    token = security.create_access_token(seller.external_id)
    principal = resolve_principal(db, token)

    assert principal.user_id == seller.id
    assert principal.role == Role.SELLER
    assert principal.email == seller.email


@pytest.mark.parametrize("token", [None, "", "garbage"])
def test_resolve_principal_bad_token(db, token):
    with pytest.raises(HTTPException) as exc_info:
        resolve_principal(db, token)
    assert exc_info.value.status_code == 401


def test_resolve_principal_unknown_subject(db):
    token = security.create_access_token("auth|nobody")
    with pytest.raises(HTTPException) as exc_info:
        resolve_principal(db, token)
    assert exc_info.value.detail == "User not found"


def test_resolve_principal_inactive_user(db, buyer):
    buyer.is_active = False
    db.commit()

    with pytest.raises(HTTPException) as exc_info:
        resolve_principal(db, security.create_access_token(buyer.external_id))
    assert exc_info.value.detail == "Account disabled"
