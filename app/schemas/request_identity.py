from __future__ import annotations

from pydantic import BaseModel, Field


class RequestIdentity(BaseModel):
    subject: str | None = None
    user_id: int | None = None
    auth_source: str = "anonymous"
    claims: dict = Field(default_factory=dict)
