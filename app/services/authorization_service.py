from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from app.core.errors import InfrastructureError
from app.crud.protocols import AssignmentStore
from app.services.normalization import normalize_key

Outcome = Literal["allow", "deny", "error"]


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    detail: str | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls("allow")

    @classmethod
    def deny(cls) -> Decision:
        return cls("deny")

    @classmethod
    def error(cls, detail: str) -> Decision:
        return cls("error", detail)

    @property
    def allowed(self) -> bool:
        return self.outcome == "allow"

    @property
    def is_error(self) -> bool:
        return self.outcome == "error"


class AuthorizationService:
    """
    Answers membership queries for request gating.

    A principal that lacks the role or permission (or does not exist) gets
    False. Only store failures raise, as InfrastructureError.
    """

    def __init__(self, assignments: AssignmentStore):
        self.assignments = assignments

    def has_role(self, user_id: int, role_name: str) -> bool:
        name = normalize_key(role_name)
        if not name:
            return False
        return self.assignments.user_has_role(user_id, name)

    def has_permission(self, user_id: int, permission_name: str) -> bool:
        name = normalize_key(permission_name)
        if not name:
            return False
        return self.assignments.user_has_permission(user_id, name)

    def decide_role(self, user_id: int, role_name: str) -> Decision:
        try:
            granted = self.has_role(user_id, role_name)
        except InfrastructureError as exc:
            return Decision.error(exc.message)
        return Decision.allow() if granted else Decision.deny()

    def decide_permission(self, user_id: int, permission_name: str) -> Decision:
        try:
            granted = self.has_permission(user_id, permission_name)
        except InfrastructureError as exc:
            return Decision.error(exc.message)
        return Decision.allow() if granted else Decision.deny()
