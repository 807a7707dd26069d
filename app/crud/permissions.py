from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.crud.base import store_errors
from app.models.permissions import Permission
from app.models.role_permissions import RolePermission


class SqlPermissionStore:
    def __init__(self, db: Session):
        self.db = db

    def add(
        self,
        *,
        permission_name: str,
        resource: str,
        action: str,
        description: str,
    ) -> Permission:
        with store_errors(self.db, "create_permission"):
            obj = Permission(
                permission_name=permission_name,
                resource=resource,
                action=action,
                description=description,
            )
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj

    def get(self, permission_id: int) -> Permission | None:
        with store_errors(self.db, "get_permission"):
            return self.db.get(Permission, permission_id)

    def get_by_name(self, permission_name: str) -> Permission | None:
        with store_errors(self.db, "get_permission_by_name"):
            stmt = select(Permission).where(Permission.permission_name == permission_name)
            return self.db.execute(stmt).scalar_one_or_none()

    def get_by_resource_action(self, resource: str, action: str) -> Permission | None:
        with store_errors(self.db, "get_permission_by_resource_action"):
            stmt = (
                select(Permission)
                .where(Permission.resource == resource)
                .where(Permission.action == action)
            )
            return self.db.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Permission]:
        with store_errors(self.db, "list_permissions"):
            stmt = select(Permission).order_by(Permission.resource.asc(), Permission.action.asc())
            return list(self.db.execute(stmt).scalars().all())

    def update(self, permission_id: int, patch: dict[str, Any]) -> Permission | None:
        with store_errors(self.db, "update_permission"):
            obj = self.db.get(Permission, permission_id)
            if not obj:
                return None

            for k, v in patch.items():
                setattr(obj, k, v)

            self.db.commit()
            self.db.refresh(obj)
            return obj

    def delete(self, permission_id: int) -> bool:
        with store_errors(self.db, "delete_permission"):
            obj = self.db.get(Permission, permission_id)
            if not obj:
                return False

            self.db.execute(
                delete(RolePermission).where(RolePermission.permission_id == permission_id)
            )
            self.db.delete(obj)
            self.db.commit()
            return True
