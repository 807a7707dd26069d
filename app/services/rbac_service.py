from __future__ import annotations

import logging

from app.core.errors import NotFoundError
from app.crud.protocols import Stores
from app.models.permissions import Permission
from app.models.roles import Role
from app.models.users import User
from app.schemas.permissions import PermissionOut
from app.schemas.rbac import UserWithPermissions, UserWithRoles
from app.schemas.roles import RoleOut
from app.schemas.users import UserOut
from app.services.normalization import normalize_key

logger = logging.getLogger(__name__)


class RBACService:
    """
    Assignment graph: User<->Role and Role<->Permission edges.

    Assigning is a set union: an edge that already exists is left alone and
    the call succeeds. Revoking reports NotFound when there was no edge.
    """

    def __init__(self, stores: Stores):
        self.users = stores.users
        self.roles = stores.roles
        self.permissions = stores.permissions
        self.assignments = stores.assignments

    def _require_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def _require_role(self, role_id: int) -> Role:
        role = self.roles.get(role_id)
        if role is None:
            raise NotFoundError("role not found")
        return role

    def _require_permission(self, permission_id: int) -> Permission:
        permission = self.permissions.get(permission_id)
        if permission is None:
            raise NotFoundError("permission not found")
        return permission

    def assign_role(self, user_id: int, role_id: int) -> None:
        self._require_user(user_id)
        self._require_role(role_id)
        inserted = self.assignments.add_user_role(user_id, role_id)
        logger.info(
            "role_assigned user_id=%s role_id=%s inserted=%s",
            user_id,
            role_id,
            inserted,
        )

    def assign_default_role(self, user_id: int, role_name: str) -> bool:
        """
        Grant `role_name` to a newly registered user. Returns False without
        touching the graph when the name is empty or the role is not defined.
        """
        name = normalize_key(role_name)
        if not name:
            return False
        role = self.roles.get_by_name(name)
        if role is None:
            logger.info("default_role_missing user_id=%s role=%s", user_id, name)
            return False
        self.assign_role(user_id, role.id)
        return True

    def revoke_role(self, user_id: int, role_id: int) -> None:
        if not self.assignments.remove_user_role(user_id, role_id):
            raise NotFoundError("user-role assignment not found")
        logger.info("role_revoked user_id=%s role_id=%s", user_id, role_id)

    def assign_permission(self, role_id: int, permission_id: int) -> None:
        self._require_role(role_id)
        self._require_permission(permission_id)
        inserted = self.assignments.add_role_permission(role_id, permission_id)
        logger.info(
            "permission_assigned role_id=%s permission_id=%s inserted=%s",
            role_id,
            permission_id,
            inserted,
        )

    def revoke_permission(self, role_id: int, permission_id: int) -> None:
        if not self.assignments.remove_role_permission(role_id, permission_id):
            raise NotFoundError("role-permission assignment not found")
        logger.info("permission_revoked role_id=%s permission_id=%s", role_id, permission_id)

    def roles_of(self, user_id: int) -> list[Role]:
        self._require_user(user_id)
        return self.assignments.roles_of_user(user_id)

    def permissions_of_role(self, role_id: int) -> list[Permission]:
        self._require_role(role_id)
        return self.assignments.permissions_of_role(role_id)

    def permissions_of_user(self, user_id: int) -> list[Permission]:
        self._require_user(user_id)
        return self.assignments.permissions_of_user(user_id)

    def users_of_role(self, role_id: int) -> list[UserOut]:
        self._require_role(role_id)
        # UserOut carries no credential field
        return [UserOut.model_validate(u) for u in self.assignments.users_of_role(role_id)]

    def user_with_roles(self, user_id: int) -> UserWithRoles:
        user = self._require_user(user_id)
        roles = self.assignments.roles_of_user(user_id)
        return UserWithRoles(
            **UserOut.model_validate(user).model_dump(),
            roles=[RoleOut.model_validate(r) for r in roles],
        )

    def user_with_permissions(self, user_id: int) -> UserWithPermissions:
        user = self._require_user(user_id)
        permissions = self.assignments.permissions_of_user(user_id)
        return UserWithPermissions(
            **UserOut.model_validate(user).model_dump(),
            permissions=[PermissionOut.model_validate(p) for p in permissions],
        )
