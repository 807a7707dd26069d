from __future__ import annotations

from sqlalchemy.orm import Session

from app.crud.assignments import SqlAssignmentStore
from app.crud.permissions import SqlPermissionStore
from app.crud.protocols import Stores
from app.crud.roles import SqlRoleStore
from app.crud.users import SqlUserStore


def sql_stores(db: Session) -> Stores:
    return Stores(
        users=SqlUserStore(db),
        roles=SqlRoleStore(db),
        permissions=SqlPermissionStore(db),
        assignments=SqlAssignmentStore(db),
    )
