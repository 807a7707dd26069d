"""
In-process implementation of the store protocols.

Rows are plain (transient) ORM instances so services and schemas treat them
exactly like rows loaded from the database. A lock serializes writes, which
gives each call the same all-or-nothing behavior as a committed transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
import threading
from typing import Any

from app.core.errors import InfrastructureError
from app.crud.protocols import Stores
from app.models.permissions import Permission
from app.models.roles import Role
from app.models.users import User


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _permission_sort_key(permission: Permission) -> tuple[str, str]:
    return (permission.resource, permission.action)


class MemoryState:
    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users: dict[int, User] = {}
        self.roles: dict[int, Role] = {}
        self.permissions: dict[int, Permission] = {}
        self.user_roles: dict[tuple[int, int], datetime] = {}
        self.role_permissions: dict[tuple[int, int], datetime] = {}
        self.user_ids = count(1)
        self.role_ids = count(1)
        self.permission_ids = count(1)
        # Flip to simulate an unreachable store.
        self.unavailable = False

    def check_available(self, operation: str) -> None:
        if self.unavailable:
            raise InfrastructureError(f"Store failure during {operation}.")


class _MemoryStoreBase:
    def __init__(self, state: MemoryState):
        self.state = state


class MemoryUserStore(_MemoryStoreBase):
    def add(self, *, email: str, name: str, password_hash: str) -> User:
        with self.state.lock:
            self.state.check_available("create_user")
            if any(u.email == email for u in self.state.users.values()):
                raise InfrastructureError("Store failure during create_user.")
            now = _now()
            obj = User(
                id=next(self.state.user_ids),
                email=email,
                name=name,
                password_hash=password_hash,
                created_at=now,
                updated_at=now,
            )
            self.state.users[obj.id] = obj
            return obj

    def get(self, user_id: int) -> User | None:
        with self.state.lock:
            self.state.check_available("get_user")
            return self.state.users.get(user_id)

    def get_by_email(self, email: str) -> User | None:
        with self.state.lock:
            self.state.check_available("get_user_by_email")
            for user in self.state.users.values():
                if user.email == email:
                    return user
            return None

    def list_all(self, skip: int = 0, limit: int = 50) -> list[User]:
        with self.state.lock:
            self.state.check_available("list_users")
            users = sorted(self.state.users.values(), key=lambda u: u.id, reverse=True)
            return users[skip : skip + limit]

    def update(self, user_id: int, patch: dict[str, Any]) -> User | None:
        with self.state.lock:
            self.state.check_available("update_user")
            obj = self.state.users.get(user_id)
            if obj is None:
                return None
            for k, v in patch.items():
                setattr(obj, k, v)
            obj.updated_at = _now()
            return obj

    def delete(self, user_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("delete_user")
            if user_id not in self.state.users:
                return False
            for key in [k for k in self.state.user_roles if k[0] == user_id]:
                del self.state.user_roles[key]
            del self.state.users[user_id]
            return True


class MemoryRoleStore(_MemoryStoreBase):
    def add(self, *, role_name: str, description: str) -> Role:
        with self.state.lock:
            self.state.check_available("create_role")
            if any(r.role_name == role_name for r in self.state.roles.values()):
                raise InfrastructureError("Store failure during create_role.")
            now = _now()
            obj = Role(
                id=next(self.state.role_ids),
                role_name=role_name,
                description=description,
                created_at=now,
                updated_at=now,
            )
            self.state.roles[obj.id] = obj
            return obj

    def get(self, role_id: int) -> Role | None:
        with self.state.lock:
            self.state.check_available("get_role")
            return self.state.roles.get(role_id)

    def get_by_name(self, role_name: str) -> Role | None:
        with self.state.lock:
            self.state.check_available("get_role_by_name")
            for role in self.state.roles.values():
                if role.role_name == role_name:
                    return role
            return None

    def list_all(self) -> list[Role]:
        with self.state.lock:
            self.state.check_available("list_roles")
            return sorted(self.state.roles.values(), key=lambda r: r.role_name)

    def update(self, role_id: int, patch: dict[str, Any]) -> Role | None:
        with self.state.lock:
            self.state.check_available("update_role")
            obj = self.state.roles.get(role_id)
            if obj is None:
                return None
            for k, v in patch.items():
                setattr(obj, k, v)
            obj.updated_at = _now()
            return obj

    def delete(self, role_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("delete_role")
            if role_id not in self.state.roles:
                return False
            for key in [k for k in self.state.role_permissions if k[0] == role_id]:
                del self.state.role_permissions[key]
            for key in [k for k in self.state.user_roles if k[1] == role_id]:
                del self.state.user_roles[key]
            del self.state.roles[role_id]
            return True


class MemoryPermissionStore(_MemoryStoreBase):
    def add(
        self,
        *,
        permission_name: str,
        resource: str,
        action: str,
        description: str,
    ) -> Permission:
        with self.state.lock:
            self.state.check_available("create_permission")
            for p in self.state.permissions.values():
                if p.permission_name == permission_name or (p.resource, p.action) == (resource, action):
                    raise InfrastructureError("Store failure during create_permission.")
            now = _now()
            obj = Permission(
                id=next(self.state.permission_ids),
                permission_name=permission_name,
                resource=resource,
                action=action,
                description=description,
                created_at=now,
                updated_at=now,
            )
            self.state.permissions[obj.id] = obj
            return obj

    def get(self, permission_id: int) -> Permission | None:
        with self.state.lock:
            self.state.check_available("get_permission")
            return self.state.permissions.get(permission_id)

    def get_by_name(self, permission_name: str) -> Permission | None:
        with self.state.lock:
            self.state.check_available("get_permission_by_name")
            for permission in self.state.permissions.values():
                if permission.permission_name == permission_name:
                    return permission
            return None

    def get_by_resource_action(self, resource: str, action: str) -> Permission | None:
        with self.state.lock:
            self.state.check_available("get_permission_by_resource_action")
            for permission in self.state.permissions.values():
                if permission.resource == resource and permission.action == action:
                    return permission
            return None

    def list_all(self) -> list[Permission]:
        with self.state.lock:
            self.state.check_available("list_permissions")
            return sorted(self.state.permissions.values(), key=_permission_sort_key)

    def update(self, permission_id: int, patch: dict[str, Any]) -> Permission | None:
        with self.state.lock:
            self.state.check_available("update_permission")
            obj = self.state.permissions.get(permission_id)
            if obj is None:
                return None
            for k, v in patch.items():
                setattr(obj, k, v)
            obj.updated_at = _now()
            return obj

    def delete(self, permission_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("delete_permission")
            if permission_id not in self.state.permissions:
                return False
            for key in [k for k in self.state.role_permissions if k[1] == permission_id]:
                del self.state.role_permissions[key]
            del self.state.permissions[permission_id]
            return True


class MemoryAssignmentStore(_MemoryStoreBase):
    def add_user_role(self, user_id: int, role_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("assign_role")
            if user_id not in self.state.users or role_id not in self.state.roles:
                # mirrors the foreign key constraint
                raise InfrastructureError("Store failure during assign_role.")
            if (user_id, role_id) in self.state.user_roles:
                return False
            self.state.user_roles[(user_id, role_id)] = _now()
            return True

    def remove_user_role(self, user_id: int, role_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("revoke_role")
            return self.state.user_roles.pop((user_id, role_id), None) is not None

    def add_role_permission(self, role_id: int, permission_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("assign_permission")
            if role_id not in self.state.roles or permission_id not in self.state.permissions:
                raise InfrastructureError("Store failure during assign_permission.")
            if (role_id, permission_id) in self.state.role_permissions:
                return False
            self.state.role_permissions[(role_id, permission_id)] = _now()
            return True

    def remove_role_permission(self, role_id: int, permission_id: int) -> bool:
        with self.state.lock:
            self.state.check_available("revoke_permission")
            return self.state.role_permissions.pop((role_id, permission_id), None) is not None

    def _role_ids_of_user(self, user_id: int) -> set[int]:
        return {role_id for (uid, role_id) in self.state.user_roles if uid == user_id}

    def _permission_ids_of_roles(self, role_ids: set[int]) -> set[int]:
        return {pid for (rid, pid) in self.state.role_permissions if rid in role_ids}

    def roles_of_user(self, user_id: int) -> list[Role]:
        with self.state.lock:
            self.state.check_available("roles_of_user")
            roles = [self.state.roles[rid] for rid in self._role_ids_of_user(user_id)]
        return sorted(roles, key=lambda r: r.role_name)

    def permissions_of_role(self, role_id: int) -> list[Permission]:
        with self.state.lock:
            self.state.check_available("permissions_of_role")
            permissions = [
                self.state.permissions[pid] for pid in self._permission_ids_of_roles({role_id})
            ]
        return sorted(permissions, key=_permission_sort_key)

    def permissions_of_user(self, user_id: int) -> list[Permission]:
        with self.state.lock:
            self.state.check_available("permissions_of_user")
            role_ids = self._role_ids_of_user(user_id)
            permissions = [
                self.state.permissions[pid] for pid in self._permission_ids_of_roles(role_ids)
            ]
        return sorted(permissions, key=_permission_sort_key)

    def users_of_role(self, role_id: int) -> list[User]:
        with self.state.lock:
            self.state.check_available("users_of_role")
            users = [
                self.state.users[uid] for (uid, rid) in self.state.user_roles if rid == role_id
            ]
        return sorted(users, key=lambda u: u.name)

    def roles_of_permission(self, permission_id: int) -> list[Role]:
        with self.state.lock:
            self.state.check_available("roles_of_permission")
            roles = [
                self.state.roles[rid]
                for (rid, pid) in self.state.role_permissions
                if pid == permission_id
            ]
        return sorted(roles, key=lambda r: r.role_name)

    def user_has_role(self, user_id: int, role_name: str) -> bool:
        return any(role.role_name == role_name for role in self.roles_of_user(user_id))

    def user_has_permission(self, user_id: int, permission_name: str) -> bool:
        return any(
            permission.permission_name == permission_name
            for permission in self.permissions_of_user(user_id)
        )


def memory_stores(state: MemoryState | None = None) -> Stores:
    state = state or MemoryState()
    return Stores(
        users=MemoryUserStore(state),
        roles=MemoryRoleStore(state),
        permissions=MemoryPermissionStore(state),
        assignments=MemoryAssignmentStore(state),
    )
