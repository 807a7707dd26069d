from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps.request_identity import get_current_user_id
from app.api.errors import raise_http_error
from app.core.config import settings
from app.core.errors import RBACError
from app.core.security.tokens import issue_access_token
from app.crud.sql import sql_stores
from app.db.session import get_db
from app.models.users import User
from app.schemas.permissions import PermissionOut
from app.schemas.rbac import LoginResponse
from app.schemas.roles import RoleOut
from app.schemas.users import LoginRequest, RegisterRequest, UserOut, UserUpdate
from app.services.rbac_service import RBACService
from app.services.user_service import UserService

router = APIRouter(prefix="/api/v1", tags=["auth"])


def _login_response(db: Session, user: User) -> LoginResponse:
    roles = RBACService(sql_stores(db)).roles_of(user.id)
    return LoginResponse(
        token=issue_access_token(user.id),
        user=UserOut.model_validate(user),
        roles=[RoleOut.model_validate(r) for r in roles],
    )


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def register_api(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        stores = sql_stores(db)
        user = UserService(stores.users).register(payload)
        RBACService(stores).assign_default_role(user.id, settings.AUTHZ_DEFAULT_ROLE)
        return _login_response(db, user)
    except RBACError as e:
        raise_http_error(e)


@router.post("/login", response_model=LoginResponse)
def login_api(payload: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = UserService(sql_stores(db).users).authenticate(payload)
        return _login_response(db, user)
    except RBACError as e:
        raise_http_error(e)


@router.get("/me", response_model=UserOut)
def get_me_api(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return UserService(sql_stores(db).users).get(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.put("/me", response_model=UserOut)
def update_me_api(
    payload: UserUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return UserService(sql_stores(db).users).update(user_id, payload)
    except RBACError as e:
        raise_http_error(e)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me_api(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        UserService(sql_stores(db).users).delete(user_id)
    except RBACError as e:
        raise_http_error(e)
    return None


@router.get("/me/roles", response_model=list[RoleOut])
def get_my_roles_api(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return RBACService(sql_stores(db)).roles_of(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/me/permissions", response_model=list[PermissionOut])
def get_my_permissions_api(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        return RBACService(sql_stores(db)).permissions_of_user(user_id)
    except RBACError as e:
        raise_http_error(e)
