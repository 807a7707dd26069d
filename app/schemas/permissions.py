from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PermissionBase(BaseModel):
    # display key, e.g. "articles.publish"
    permission_name: str = Field(min_length=2, max_length=100)

    resource: str = Field(min_length=2, max_length=100)
    action: str = Field(min_length=2, max_length=50)
    description: str = Field(default="", max_length=500)


class PermissionCreate(PermissionBase):
    pass


class PermissionUpdate(BaseModel):
    permission_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    resource: Optional[str] = Field(default=None, min_length=2, max_length=100)
    action: Optional[str] = Field(default=None, min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class PermissionOut(PermissionBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
