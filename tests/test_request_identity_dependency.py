from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.api.deps import request_identity as request_identity_module
from app.core.config import settings
from app.core.security.tokens import issue_access_token
from app.schemas.request_identity import RequestIdentity


def _build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    def whoami(identity: RequestIdentity = Depends(request_identity_module.get_request_identity)):
        return {
            "user_id": identity.user_id,
            "source": identity.auth_source,
            "sub": identity.subject,
        }

    @app.get("/me")
    def me(user_id: int = Depends(request_identity_module.get_current_user_id)):
        return {"user_id": user_id}

    return app


def test_legacy_header_mode_uses_x_user_id(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "7"})
        assert r.status_code == 200
        payload = r.json()
        assert payload["user_id"] == 7
        assert payload["source"] == "legacy_header"


def test_legacy_header_mode_ignores_bearer_token(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": f"Bearer {issue_access_token(42)}",
                "X-User-Id": "7",
            },
        )
        assert r.status_code == 200
        payload = r.json()
        assert payload["user_id"] == 7
        assert payload["source"] == "legacy_header"


def test_legacy_header_must_be_numeric(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "alice"})
        assert r.status_code == 401


def test_jwt_only_mode_requires_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "7"})
        assert r.status_code == 401


def test_dual_mode_prefers_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": f"Bearer {issue_access_token(42)}",
                "X-User-Id": "7",
            },
        )
        assert r.status_code == 200
        payload = r.json()
        assert payload["user_id"] == 42
        assert payload["sub"] == "42"
        assert payload["source"] == "jwt"


def test_dual_mode_falls_back_to_header(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"X-User-Id": "7"})
        assert r.status_code == 200
        assert r.json()["source"] == "legacy_header"


def test_expired_token_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {
            "sub": "42",
            "iss": settings.AUTH_JWT_ISSUER,
            "iat": issued,
            "exp": issued + timedelta(hours=1),
        },
        settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Access token expired."


def test_token_signed_with_other_secret_is_rejected(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    token = issue_access_token(42)
    monkeypatch.setattr(settings, "AUTH_JWT_SECRET", "a-different-secret")
    app = _build_app()
    with TestClient(app) as client:
        r = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 401


def test_anonymous_request_has_no_current_user(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    app = _build_app()
    with TestClient(app) as client:
        assert client.get("/whoami").json()["source"] == "anonymous"
        r = client.get("/me")
        assert r.status_code == 401
        assert r.json()["detail"] == "Authentication required."
