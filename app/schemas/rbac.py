from __future__ import annotations

from pydantic import BaseModel, Field

from app.schemas.permissions import PermissionOut
from app.schemas.roles import RoleOut
from app.schemas.users import UserOut


class UserWithRoles(UserOut):
    roles: list[RoleOut] = Field(default_factory=list)


class UserWithPermissions(UserOut):
    permissions: list[PermissionOut] = Field(default_factory=list)


class RoleWithPermissions(RoleOut):
    permissions: list[PermissionOut] = Field(default_factory=list)


class RoleWithUsers(RoleOut):
    users: list[UserOut] = Field(default_factory=list)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut
    roles: list[RoleOut] = Field(default_factory=list)


class MessageOut(BaseModel):
    message: str
