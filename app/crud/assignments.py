from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import store_errors
from app.models.permissions import Permission
from app.models.role_permissions import RolePermission
from app.models.roles import Role
from app.models.user_roles import UserRole
from app.models.users import User


class SqlAssignmentStore:
    """User<->Role and Role<->Permission edges plus the joins over them."""

    def __init__(self, db: Session):
        self.db = db

    def _insert_edge(self, model, key: tuple[int, int], **values) -> bool:
        if self.db.get(model, key) is not None:
            return False
        self.db.add(model(**values))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # a concurrent assign of the same pair won; the edge exists either way
            if self.db.get(model, key) is not None:
                return False
            raise
        return True

    def add_user_role(self, user_id: int, role_id: int) -> bool:
        with store_errors(self.db, "assign_role"):
            return self._insert_edge(
                UserRole,
                (user_id, role_id),
                user_id=user_id,
                role_id=role_id,
            )

    def remove_user_role(self, user_id: int, role_id: int) -> bool:
        with store_errors(self.db, "revoke_role"):
            result = self.db.execute(
                delete(UserRole)
                .where(UserRole.user_id == user_id)
                .where(UserRole.role_id == role_id)
            )
            self.db.commit()
            return result.rowcount > 0

    def add_role_permission(self, role_id: int, permission_id: int) -> bool:
        with store_errors(self.db, "assign_permission"):
            return self._insert_edge(
                RolePermission,
                (role_id, permission_id),
                role_id=role_id,
                permission_id=permission_id,
            )

    def remove_role_permission(self, role_id: int, permission_id: int) -> bool:
        with store_errors(self.db, "revoke_permission"):
            result = self.db.execute(
                delete(RolePermission)
                .where(RolePermission.role_id == role_id)
                .where(RolePermission.permission_id == permission_id)
            )
            self.db.commit()
            return result.rowcount > 0

    def roles_of_user(self, user_id: int) -> list[Role]:
        with store_errors(self.db, "roles_of_user"):
            stmt = (
                select(Role)
                .join(UserRole, UserRole.role_id == Role.id)
                .where(UserRole.user_id == user_id)
                .order_by(Role.role_name.asc())
            )
            return list(self.db.execute(stmt).scalars().all())

    def permissions_of_role(self, role_id: int) -> list[Permission]:
        with store_errors(self.db, "permissions_of_role"):
            stmt = (
                select(Permission)
                .join(RolePermission, RolePermission.permission_id == Permission.id)
                .where(RolePermission.role_id == role_id)
                .order_by(Permission.resource.asc(), Permission.action.asc())
            )
            return list(self.db.execute(stmt).scalars().all())

    def permissions_of_user(self, user_id: int) -> list[Permission]:
        with store_errors(self.db, "permissions_of_user"):
            granted = (
                select(RolePermission.permission_id)
                .join(UserRole, UserRole.role_id == RolePermission.role_id)
                .where(UserRole.user_id == user_id)
            )
            stmt = (
                select(Permission)
                .where(Permission.id.in_(granted))
                .order_by(Permission.resource.asc(), Permission.action.asc())
            )
            return list(self.db.execute(stmt).scalars().all())

    def users_of_role(self, role_id: int) -> list[User]:
        with store_errors(self.db, "users_of_role"):
            stmt = (
                select(User)
                .join(UserRole, UserRole.user_id == User.id)
                .where(UserRole.role_id == role_id)
                .order_by(User.name.asc())
            )
            return list(self.db.execute(stmt).scalars().all())

    def roles_of_permission(self, permission_id: int) -> list[Role]:
        with store_errors(self.db, "roles_of_permission"):
            stmt = (
                select(Role)
                .join(RolePermission, RolePermission.role_id == Role.id)
                .where(RolePermission.permission_id == permission_id)
                .order_by(Role.role_name.asc())
            )
            return list(self.db.execute(stmt).scalars().all())

    def user_has_role(self, user_id: int, role_name: str) -> bool:
        with store_errors(self.db, "user_has_role"):
            stmt = (
                select(UserRole.role_id)
                .join(Role, Role.id == UserRole.role_id)
                .where(UserRole.user_id == user_id)
                .where(Role.role_name == role_name)
                .limit(1)
            )
            return self.db.execute(stmt).first() is not None

    def user_has_permission(self, user_id: int, permission_name: str) -> bool:
        with store_errors(self.db, "user_has_permission"):
            stmt = (
                select(RolePermission.permission_id)
                .join(UserRole, UserRole.role_id == RolePermission.role_id)
                .join(Permission, Permission.id == RolePermission.permission_id)
                .where(UserRole.user_id == user_id)
                .where(Permission.permission_name == permission_name)
                .limit(1)
            )
            return self.db.execute(stmt).first() is not None
