from __future__ import annotations

from collections.abc import Callable
import logging

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps.request_identity import get_current_user_id
from app.core.config import settings
from app.crud.assignments import SqlAssignmentStore
from app.db.session import get_db
from app.services.authorization_service import AuthorizationService, Decision

logger = logging.getLogger(__name__)


def _enforce(decision: Decision, *, user_id: int, kind: str, name: str) -> None:
    """
    Deny and error both end in 403 unless AUTHZ_FAIL_OPEN lets errors pass.
    They are logged differently so an outage is not mistaken for a denial.
    """
    if decision.allowed:
        return

    if decision.is_error:
        logger.warning(
            "authz_store_error user_id=%s %s=%s fail_open=%s detail=%s",
            user_id,
            kind,
            name,
            settings.AUTHZ_FAIL_OPEN,
            decision.detail,
        )
        if settings.AUTHZ_FAIL_OPEN:
            return
    else:
        logger.info("authz_denied user_id=%s %s=%s", user_id, kind, name)

    raise HTTPException(
        status_code=403,
        detail=f"Access denied: requires {name} {kind}",
    )


def require_role(role_name: str) -> Callable[..., int]:
    def _dependency(
        user_id: int = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ) -> int:
        decision = AuthorizationService(SqlAssignmentStore(db)).decide_role(user_id, role_name)
        _enforce(decision, user_id=user_id, kind="role", name=role_name)
        return user_id

    return _dependency


def require_permission(permission_name: str) -> Callable[..., int]:
    def _dependency(
        user_id: int = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ) -> int:
        decision = AuthorizationService(SqlAssignmentStore(db)).decide_permission(
            user_id, permission_name
        )
        _enforce(decision, user_id=user_id, kind="permission", name=permission_name)
        return user_id

    return _dependency


def require_admin(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> int:
    role_name = settings.AUTHZ_ADMIN_ROLE
    decision = AuthorizationService(SqlAssignmentStore(db)).decide_role(user_id, role_name)
    _enforce(decision, user_id=user_id, kind="role", name=role_name)
    return user_id
