from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RBACError(Exception):
    message: str
    code: str = "RBAC_ERROR"
    status_code: int = 400

    def __str__(self) -> str:
        return self.message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


@dataclass
class NotFoundError(RBACError):
    """Referenced user, role, permission or edge does not exist."""

    code: str = "NOT_FOUND"
    status_code: int = 404


@dataclass
class ConflictError(RBACError):
    """Uniqueness violation detected before the write."""

    code: str = "CONFLICT"
    status_code: int = 409


@dataclass
class InfrastructureError(RBACError):
    """
    The store could not answer: unreachable, timed out, or a constraint
    failed that the pre-checks did not anticipate.
    """

    code: str = "INFRASTRUCTURE_ERROR"
    status_code: int = 503


@dataclass
class AuthenticationError(RBACError):
    code: str = "UNAUTHENTICATED"
    status_code: int = 401
