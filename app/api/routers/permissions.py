from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps.rbac_guard import require_admin
from app.api.errors import raise_http_error
from app.core.errors import RBACError
from app.crud.assignments import SqlAssignmentStore
from app.crud.permissions import SqlPermissionStore
from app.db.session import get_db
from app.schemas.permissions import PermissionCreate, PermissionOut, PermissionUpdate
from app.schemas.roles import RoleOut
from app.services.permission_service import PermissionService

router = APIRouter(
    prefix="/permissions",
    tags=["permissions"],
    dependencies=[Depends(require_admin)],
)


def _service(db: Session) -> PermissionService:
    return PermissionService(SqlPermissionStore(db), SqlAssignmentStore(db))


@router.post("", response_model=PermissionOut, status_code=status.HTTP_201_CREATED)
def create_permission_api(payload: PermissionCreate, db: Session = Depends(get_db)):
    try:
        return _service(db).create(payload)
    except RBACError as e:
        raise_http_error(e)


@router.get("/by-name/{permission_name}", response_model=PermissionOut)
def get_permission_by_name_api(permission_name: str, db: Session = Depends(get_db)):
    try:
        return _service(db).get_by_name(permission_name)
    except RBACError as e:
        raise_http_error(e)


@router.get("/{permission_id}", response_model=PermissionOut)
def get_permission_api(permission_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).get(permission_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("/{permission_id}/roles", response_model=list[RoleOut])
def list_permission_roles_api(permission_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).roles_of_permission(permission_id)
    except RBACError as e:
        raise_http_error(e)


@router.get("", response_model=list[PermissionOut])
def list_permissions_api(db: Session = Depends(get_db)):
    try:
        return _service(db).list()
    except RBACError as e:
        raise_http_error(e)


@router.patch("/{permission_id}", response_model=PermissionOut)
def update_permission_api(
    permission_id: int,
    payload: PermissionUpdate,
    db: Session = Depends(get_db),
):
    try:
        return _service(db).update(permission_id, payload)
    except RBACError as e:
        raise_http_error(e)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission_api(permission_id: int, db: Session = Depends(get_db)):
    try:
        _service(db).delete(permission_id)
    except RBACError as e:
        raise_http_error(e)
    return None
