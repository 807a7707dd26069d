from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.crud.base import store_errors
from app.models.role_permissions import RolePermission
from app.models.roles import Role
from app.models.user_roles import UserRole


class SqlRoleStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, *, role_name: str, description: str) -> Role:
        with store_errors(self.db, "create_role"):
            obj = Role(role_name=role_name, description=description)
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj

    def get(self, role_id: int) -> Role | None:
        with store_errors(self.db, "get_role"):
            return self.db.get(Role, role_id)

    def get_by_name(self, role_name: str) -> Role | None:
        with store_errors(self.db, "get_role_by_name"):
            stmt = select(Role).where(Role.role_name == role_name)
            return self.db.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Role]:
        with store_errors(self.db, "list_roles"):
            stmt = select(Role).order_by(Role.role_name.asc())
            return list(self.db.execute(stmt).scalars().all())

    def update(self, role_id: int, patch: dict[str, Any]) -> Role | None:
        with store_errors(self.db, "update_role"):
            obj = self.db.get(Role, role_id)
            if not obj:
                return None

            for k, v in patch.items():
                setattr(obj, k, v)

            self.db.commit()
            self.db.refresh(obj)
            return obj

    def delete(self, role_id: int) -> bool:
        with store_errors(self.db, "delete_role"):
            obj = self.db.get(Role, role_id)
            if not obj:
                return False

            self.db.execute(delete(RolePermission).where(RolePermission.role_id == role_id))
            self.db.execute(delete(UserRole).where(UserRole.role_id == role_id))
            self.db.delete(obj)
            self.db.commit()
            return True
