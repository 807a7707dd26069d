from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps.rbac_guard import require_admin
from app.api.errors import raise_http_error
from app.core.errors import RBACError
from app.crud.sql import sql_stores
from app.db.session import get_db
from app.schemas.permissions import PermissionOut
from app.schemas.rbac import MessageOut, UserWithPermissions, UserWithRoles
from app.schemas.role_permissions import AssignPermissionRequest
from app.schemas.roles import RoleOut
from app.schemas.user_roles import AssignRoleRequest
from app.schemas.users import UserOut
from app.services.authorization_service import AuthorizationService, Decision
from app.services.rbac_service import RBACService

router = APIRouter(prefix="/rbac", tags=["rbac"], dependencies=[Depends(require_admin)])


def _service(db: Session) -> RBACService:
    return RBACService(sql_stores(db))


def _decision_payload(decision: Decision, *, user_id: int, name: str) -> dict:
    if decision.is_error:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"code": "INFRASTRUCTURE_ERROR", "message": decision.detail},
        )
    return {"user_id": user_id, "name": name, "allowed": decision.allowed}


@router.post("/user-roles", response_model=MessageOut)
def assign_role_api(payload: AssignRoleRequest, db: Session = Depends(get_db)):
    try:
        _service(db).assign_role(payload.user_id, payload.role_id)
    except RBACError as e:
        raise_http_error(e)
    return MessageOut(message="Role assigned successfully")


@router.delete("/user-roles/{user_id}/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_role_api(user_id: int, role_id: int, db: Session = Depends(get_db)):
    try:
        _service(db).revoke_role(user_id, role_id)
    except RBACError as e:
        raise_http_error(e)
    return None


@router.post("/role-permissions", response_model=MessageOut)
def assign_permission_api(payload: AssignPermissionRequest, db: Session = Depends(get_db)):
    try:
        _service(db).assign_permission(payload.role_id, payload.permission_id)
    except RBACError as e:
        raise_http_error(e)
    return MessageOut(message="Permission assigned successfully")


@router.delete(
    "/role-permissions/{role_id}/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def revoke_permission_api(role_id: int, permission_id: int, db: Session = Depends(get_db)):
    try:
        _service(db).revoke_permission(role_id, permission_id)
    except RBACError as e:
        raise_http_error(e)
    return None


@router.get("/users/{user_id}/roles", response_model=list[RoleOut])
def list_user_roles_api(user_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).roles_of(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/users/{user_id}/permissions", response_model=list[PermissionOut])
def list_user_permissions_api(user_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).permissions_of_user(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/users/{user_id}/with-roles", response_model=UserWithRoles)
def get_user_with_roles_api(user_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).user_with_roles(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/users/{user_id}/with-permissions", response_model=UserWithPermissions)
def get_user_with_permissions_api(user_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).user_with_permissions(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/users/{user_id}/has-role/{role_name}")
def check_user_role_api(user_id: int, role_name: str, db: Session = Depends(get_db)):
    evaluator = AuthorizationService(sql_stores(db).assignments)
    decision = evaluator.decide_role(user_id, role_name)
    return _decision_payload(decision, user_id=user_id, name=role_name)


@router.get("/users/{user_id}/has-permission/{permission_name}")
def check_user_permission_api(user_id: int, permission_name: str, db: Session = Depends(get_db)):
    evaluator = AuthorizationService(sql_stores(db).assignments)
    decision = evaluator.decide_permission(user_id, permission_name)
    return _decision_payload(decision, user_id=user_id, name=permission_name)


@router.get("/roles/{role_id}/permissions", response_model=list[PermissionOut])
def list_role_permissions_api(role_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).permissions_of_role(role_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/roles/{role_id}/users", response_model=list[UserOut])
def list_role_users_api(role_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).users_of_role(role_id)
    except RBACError as e:
        raise_http_error(e)
