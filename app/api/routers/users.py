from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps.rbac_guard import require_admin, require_permission
from app.api.errors import raise_http_error
from app.core.errors import RBACError
from app.crud.users import SqlUserStore
from app.db.session import get_db
from app.schemas.users import RegisterRequest, UserOut, UserUpdate
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _service(db: Session) -> UserService:
    return UserService(SqlUserStore(db))


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_user_api(payload: RegisterRequest, db: Session = Depends(get_db)):
    try:
        return _service(db).register(payload)
    except RBACError as e:
        raise_http_error(e)


@router.get(
    "/{user_id}",
    response_model=UserOut,
    dependencies=[Depends(require_permission("users.read"))],
)
def get_user_api(user_id: int, db: Session = Depends(get_db)):
    try:
        return _service(db).get(user_id)
    except RBACError as e:
        raise_http_error(e)


@router.get(
    "",
    response_model=list[UserOut],
    dependencies=[Depends(require_permission("users.list"))],
)
def list_users_api(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    try:
        return _service(db).list(skip=skip, limit=limit)
    except RBACError as e:
        raise_http_error(e)


@router.patch(
    "/{user_id}",
    response_model=UserOut,
    dependencies=[Depends(require_admin)],
)
def update_user_api(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)):
    try:
        return _service(db).update(user_id, payload)
    except RBACError as e:
        raise_http_error(e)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_user_api(user_id: int, db: Session = Depends(get_db)):
    try:
        _service(db).delete(user_id)
    except RBACError as e:
        raise_http_error(e)
    return None
