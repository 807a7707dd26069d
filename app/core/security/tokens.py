"""
Access token issuance and verification.

Tokens carry the principal id in `sub` as a string; nothing else in them is
trusted for authorization, which is always re-evaluated against the store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings


class AuthTokenValidationError(Exception):
    """Raised when a bearer token cannot be trusted."""


def issue_access_token(user_id: int) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "iss": settings.AUTH_JWT_ISSUER,
        "iat": now,
        "exp": now + timedelta(seconds=settings.AUTH_JWT_TTL_SEC),
    }
    return jwt.encode(claims, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        claims = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            issuer=settings.AUTH_JWT_ISSUER,
            leeway=settings.AUTH_JWT_CLOCK_SKEW_SEC,
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthTokenValidationError("Access token expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthTokenValidationError("Invalid access token.") from exc
    return claims


def principal_id_from_claims(claims: dict) -> int:
    subject = str(claims.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthTokenValidationError("Access token subject is not a principal id.")
    return int(subject)
