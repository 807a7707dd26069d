from __future__ import annotations

from app.core.errors import ConflictError, NotFoundError
from app.crud.protocols import AssignmentStore, PermissionStore
from app.models.permissions import Permission
from app.models.roles import Role
from app.schemas.permissions import PermissionCreate, PermissionUpdate
from app.services.normalization import normalize_key


class PermissionService:
    """
    Permission catalog. Two independent uniqueness axes are checked before
    every write: `permission_name` alone, and the `(resource, action)` pair.
    """

    def __init__(self, permissions: PermissionStore, assignments: AssignmentStore):
        self.permissions = permissions
        self.assignments = assignments

    def _check_unique(
        self,
        *,
        permission_name: str,
        resource: str,
        action: str,
        exclude_id: int | None = None,
    ) -> None:
        by_name = self.permissions.get_by_name(permission_name)
        if by_name is not None and by_name.id != exclude_id:
            raise ConflictError("permission name already in use")

        by_pair = self.permissions.get_by_resource_action(resource, action)
        if by_pair is not None and by_pair.id != exclude_id:
            raise ConflictError("permission for this resource and action already exists")

    def create(self, data: PermissionCreate) -> Permission:
        permission_name = normalize_key(data.permission_name)
        resource = normalize_key(data.resource)
        action = normalize_key(data.action)
        self._check_unique(permission_name=permission_name, resource=resource, action=action)
        return self.permissions.add(
            permission_name=permission_name,
            resource=resource,
            action=action,
            description=data.description,
        )

    def get(self, permission_id: int) -> Permission:
        permission = self.permissions.get(permission_id)
        if permission is None:
            raise NotFoundError("permission not found")
        return permission

    def get_by_name(self, permission_name: str) -> Permission:
        permission = self.permissions.get_by_name(normalize_key(permission_name))
        if permission is None:
            raise NotFoundError("permission not found")
        return permission

    def list(self) -> list[Permission]:
        return self.permissions.list_all()

    def update(self, permission_id: int, data: PermissionUpdate) -> Permission:
        current = self.get(permission_id)

        patch = data.model_dump(exclude_unset=True, exclude_none=True)
        for key in ("permission_name", "resource", "action"):
            if key in patch:
                patch[key] = normalize_key(patch[key])

        # both axes are re-checked against the values the row will end up with
        self._check_unique(
            permission_name=patch.get("permission_name", current.permission_name),
            resource=patch.get("resource", current.resource),
            action=patch.get("action", current.action),
            exclude_id=permission_id,
        )

        permission = self.permissions.update(permission_id, patch)
        if permission is None:
            raise NotFoundError("permission not found")
        return permission

    def delete(self, permission_id: int) -> None:
        if not self.permissions.delete(permission_id):
            raise NotFoundError("permission not found")

    def roles_of_permission(self, permission_id: int) -> list[Role]:
        self.get(permission_id)
        return self.assignments.roles_of_permission(permission_id)
