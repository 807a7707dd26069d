from pydantic import BaseModel, Field


class AssignPermissionRequest(BaseModel):
    role_id: int = Field(ge=1)
    permission_id: int = Field(ge=1)
