from __future__ import annotations

from app.core.errors import ConflictError, NotFoundError
from app.crud.protocols import AssignmentStore, RoleStore
from app.models.roles import Role
from app.schemas.permissions import PermissionOut
from app.schemas.rbac import RoleWithPermissions, RoleWithUsers
from app.schemas.roles import RoleCreate, RoleOut, RoleUpdate
from app.schemas.users import UserOut
from app.services.normalization import normalize_key


class RoleService:
    def __init__(self, roles: RoleStore, assignments: AssignmentStore):
        self.roles = roles
        self.assignments = assignments

    def create(self, data: RoleCreate) -> Role:
        role_name = normalize_key(data.role_name)
        if self.roles.get_by_name(role_name) is not None:
            raise ConflictError("role already exists")
        return self.roles.add(role_name=role_name, description=data.description)

    def get(self, role_id: int) -> Role:
        role = self.roles.get(role_id)
        if role is None:
            raise NotFoundError("role not found")
        return role

    def get_by_name(self, role_name: str) -> Role:
        role = self.roles.get_by_name(normalize_key(role_name))
        if role is None:
            raise NotFoundError("role not found")
        return role

    def list(self) -> list[Role]:
        return self.roles.list_all()

    def update(self, role_id: int, data: RoleUpdate) -> Role:
        self.get(role_id)

        patch = data.model_dump(exclude_unset=True, exclude_none=True)
        if "role_name" in patch:
            patch["role_name"] = normalize_key(patch["role_name"])
            existing = self.roles.get_by_name(patch["role_name"])
            if existing is not None and existing.id != role_id:
                raise ConflictError("role name already in use")

        role = self.roles.update(role_id, patch)
        if role is None:
            raise NotFoundError("role not found")
        return role

    def delete(self, role_id: int) -> None:
        if not self.roles.delete(role_id):
            raise NotFoundError("role not found")

    def with_permissions(self, role_id: int) -> RoleWithPermissions:
        role = self.get(role_id)
        permissions = self.assignments.permissions_of_role(role_id)
        return RoleWithPermissions(
            **RoleOut.model_validate(role).model_dump(),
            permissions=[PermissionOut.model_validate(p) for p in permissions],
        )

    def with_users(self, role_id: int) -> RoleWithUsers:
        role = self.get(role_id)
        users = self.assignments.users_of_role(role_id)
        return RoleWithUsers(
            **RoleOut.model_validate(role).model_dump(),
            users=[UserOut.model_validate(u) for u in users],
        )
