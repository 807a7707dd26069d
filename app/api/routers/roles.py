from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps.rbac_guard import require_admin
from app.api.errors import raise_http_error
from app.core.errors import RBACError
from app.crud.assignments import SqlAssignmentStore
from app.crud.roles import SqlRoleStore
from app.db.session import get_db
from app.schemas.rbac import RoleWithPermissions, RoleWithUsers
from app.schemas.roles import RoleCreate, RoleOut, RoleUpdate
from app.services.role_service import RoleService

router = APIRouter(prefix="/roles", tags=["roles"], dependencies=[Depends(require_admin)])


def _service(db: Session) -> RoleService:
    return RoleService(SqlRoleStore(db), SqlAssignmentStore(db))


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role_api(payload: RoleCreate, db: Session = Depends(get_db)):
    try:
        return _service(db).create(payload)
    except RBACError as e:
        raise_http_error(e)


@router.get("/by-name/{role_name}", response_model=RoleOut)
def get_role_by_name_api(role_name: str, db: Session = Depends(get_db)):
    try:
        return _service(db).get_by_name(role_name)
    except RBACError as e:
        raise_http_error(e)


@router.get("/{role_id}", response_model=RoleOut)
def get_role_api(role_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).get(role_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/{role_id}/with-permissions", response_model=RoleWithPermissions)
def get_role_with_permissions_api(role_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).with_permissions(role_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/{role_id}/with-users", response_model=RoleWithUsers)
def get_role_with_users_api(role_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).with_users(role_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("", response_model=list[RoleOut])
def list_roles_api(db: Session = Depends(get_db)):
    try:
        return _service(db).list()
    except RBACError as e:
        raise_http_error(e)


@router.patch("/{role_id}", response_model=RoleOut)
def update_role_api(role_id: int, payload: RoleUpdate, db: Session = Depends(get_db)):
    try:
        return _service(db).update(role_id, payload)
    except RBACError as e:
        raise_http_error(e)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role_api(role_id: int, db: Session = Depends(get_db)):
    try:
        _service(db).delete(role_id)
    except RBACError as e:
        raise_http_error(e)
    return None
