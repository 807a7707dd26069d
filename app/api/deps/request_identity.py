from __future__ import annotations

import logging

from fastapi import HTTPException, Request

from app.core.config import settings
from app.core.security.tokens import (
    AuthTokenValidationError,
    decode_access_token,
    principal_id_from_claims,
)
from app.schemas.request_identity import RequestIdentity

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def _normalized_auth_mode() -> str:
    raw = (settings.AUTH_MODE or "dual").strip().lower()
    if raw in {"legacy_header", "dual", "jwt_only"}:
        return raw
    return "dual"


def _extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    prefix = "Bearer "
    if not header.startswith(prefix):
        return None
    token = header[len(prefix) :].strip()
    return token or None


def _identity_from_legacy_header(request: Request) -> RequestIdentity:
    raw = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not raw:
        return RequestIdentity()
    if not raw.isdigit():
        raise HTTPException(status_code=401, detail=f"{USER_ID_HEADER} must be a numeric user id.")
    return RequestIdentity(
        subject=raw,
        user_id=int(raw),
        auth_source="legacy_header",
        claims={},
    )


def _identity_from_token(token: str) -> RequestIdentity:
    try:
        claims = decode_access_token(token)
        user_id = principal_id_from_claims(claims)
    except AuthTokenValidationError as exc:
        logger.info("jwt_identity_rejected reason=%s", exc)
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return RequestIdentity(
        subject=str(claims.get("sub")),
        user_id=user_id,
        auth_source="jwt",
        claims=claims,
    )


def resolve_request_identity(request: Request) -> RequestIdentity:
    token = _extract_bearer_token(request)
    mode = _normalized_auth_mode()
    if mode == "legacy_header":
        return _identity_from_legacy_header(request)

    if mode == "jwt_only":
        if not token:
            raise HTTPException(status_code=401, detail="Missing Bearer access token.")
        return _identity_from_token(token)

    # dual mode: prefer JWT when present, otherwise fallback to legacy header.
    if token:
        return _identity_from_token(token)
    return _identity_from_legacy_header(request)


def get_request_identity(request: Request) -> RequestIdentity:
    return resolve_request_identity(request)


def get_current_user_id(request: Request) -> int:
    identity = resolve_request_identity(request)
    if identity.user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required.")
    return identity.user_id
