"""
Store interfaces, one per entity.

Services and the authorization evaluator depend only on these protocols.
`app.crud.sql` binds them to a SQLAlchemy session, `app.crud.memory` keeps
everything in process for tests.

Every store call is atomic: it either fully applies or raises
`InfrastructureError` and leaves nothing half-written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from app.models.permissions import Permission
from app.models.roles import Role
from app.models.users import User


class UserStore(Protocol):
    def add(self, *, email: str, name: str, password_hash: str) -> User: ...

    def get(self, user_id: int) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def list_all(self, skip: int = 0, limit: int = 50) -> list[User]: ...

    def update(self, user_id: int, patch: dict[str, Any]) -> User | None: ...

    def delete(self, user_id: int) -> bool:
        """Remove the user and every user_roles edge touching it."""
        ...


class RoleStore(Protocol):
    def add(self, *, role_name: str, description: str) -> Role: ...

    def get(self, role_id: int) -> Role | None: ...

    def get_by_name(self, role_name: str) -> Role | None: ...

    def list_all(self) -> list[Role]: ...

    def update(self, role_id: int, patch: dict[str, Any]) -> Role | None: ...

    def delete(self, role_id: int) -> bool:
        """Remove the role and every user_roles / role_permissions edge touching it."""
        ...


class PermissionStore(Protocol):
    def add(
        self,
        *,
        permission_name: str,
        resource: str,
        action: str,
        description: str,
    ) -> Permission: ...

    def get(self, permission_id: int) -> Permission | None: ...

    def get_by_name(self, permission_name: str) -> Permission | None: ...

    def get_by_resource_action(self, resource: str, action: str) -> Permission | None: ...

    def list_all(self) -> list[Permission]: ...

    def update(self, permission_id: int, patch: dict[str, Any]) -> Permission | None: ...

    def delete(self, permission_id: int) -> bool:
        """Remove the permission and every role_permissions edge touching it."""
        ...


class AssignmentStore(Protocol):
    def add_user_role(self, user_id: int, role_id: int) -> bool:
        """Insert the edge if absent. Returns False when it already existed."""
        ...

    def remove_user_role(self, user_id: int, role_id: int) -> bool: ...

    def add_role_permission(self, role_id: int, permission_id: int) -> bool: ...

    def remove_role_permission(self, role_id: int, permission_id: int) -> bool: ...

    def roles_of_user(self, user_id: int) -> list[Role]: ...

    def permissions_of_role(self, role_id: int) -> list[Permission]: ...

    def permissions_of_user(self, user_id: int) -> list[Permission]: ...

    def users_of_role(self, role_id: int) -> list[User]: ...

    def roles_of_permission(self, permission_id: int) -> list[Role]: ...

    def user_has_role(self, user_id: int, role_name: str) -> bool: ...

    def user_has_permission(self, user_id: int, permission_name: str) -> bool: ...


@dataclass
class Stores:
    users: UserStore
    roles: RoleStore
    permissions: PermissionStore
    assignments: AssignmentStore
