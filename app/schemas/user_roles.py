from pydantic import BaseModel, Field


class AssignRoleRequest(BaseModel):
    user_id: int = Field(ge=1)
    role_id: int = Field(ge=1)
