"""
Seed the default roles, permissions and super admin.

Roles:        admin, user, moderator
Permissions:  users.create, users.read, users.update, users.delete, users.list
Grants:
  - admin => every permission
  - user  => users.read, users.update
Super admin:  SEED_SUPER_ADMIN_EMAIL / SEED_SUPER_ADMIN_PASSWORD, holds admin

Safe to run repeatedly: existing rows are reused and assignments are idempotent.
"""

from __future__ import annotations

from pathlib import Path
import sys

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app.core.config import settings
from app.core.errors import NotFoundError
from app.core.security.passwords import hash_password
from app.crud.protocols import Stores
from app.crud.sql import sql_stores
from app.db.session import SessionLocal
from app.models.permissions import Permission
from app.models.roles import Role
from app.models.users import User
from app.schemas.permissions import PermissionCreate
from app.schemas.roles import RoleCreate
from app.services.permission_service import PermissionService
from app.services.rbac_service import RBACService
from app.services.role_service import RoleService
from app.services.user_service import UserService

DEFAULT_ROLES = [
    ("admin", "Full system access"),
    ("user", "Standard user access"),
    ("moderator", "Content moderation access"),
]

DEFAULT_PERMISSIONS = [
    ("users.create", "users", "create", "Create users"),
    ("users.read", "users", "read", "View users"),
    ("users.update", "users", "update", "Update users"),
    ("users.delete", "users", "delete", "Delete users"),
    ("users.list", "users", "list", "List users"),
]

USER_ROLE_PERMISSIONS = ["users.read", "users.update"]


def _ensure_role(service: RoleService, name: str, description: str) -> Role:
    try:
        return service.get_by_name(name)
    except NotFoundError:
        return service.create(RoleCreate(role_name=name, description=description))


def _ensure_permission(
    service: PermissionService,
    name: str,
    resource: str,
    action: str,
    description: str,
) -> Permission:
    try:
        return service.get_by_name(name)
    except NotFoundError:
        return service.create(
            PermissionCreate(
                permission_name=name,
                resource=resource,
                action=action,
                description=description,
            )
        )


def _ensure_super_admin(service: UserService) -> User:
    try:
        return service.get_by_email(settings.SEED_SUPER_ADMIN_EMAIL)
    except NotFoundError:
        return service.create(
            email=settings.SEED_SUPER_ADMIN_EMAIL,
            password_hash=hash_password(settings.SEED_SUPER_ADMIN_PASSWORD),
            name="Super Admin",
        )


def seed_defaults(stores: Stores) -> None:
    roles = RoleService(stores.roles, stores.assignments)
    permissions = PermissionService(stores.permissions, stores.assignments)
    rbac = RBACService(stores)

    role_by_name = {
        name: _ensure_role(roles, name, description) for name, description in DEFAULT_ROLES
    }
    permission_by_name = {
        name: _ensure_permission(permissions, name, resource, action, description)
        for name, resource, action, description in DEFAULT_PERMISSIONS
    }

    for permission in permission_by_name.values():
        rbac.assign_permission(role_by_name["admin"].id, permission.id)
    for name in USER_ROLE_PERMISSIONS:
        rbac.assign_permission(role_by_name["user"].id, permission_by_name[name].id)

    admin = _ensure_super_admin(UserService(stores.users))
    rbac.assign_role(admin.id, role_by_name["admin"].id)


def seed() -> None:
    db = SessionLocal()
    try:
        seed_defaults(sql_stores(db))
        print("Seed completed.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
