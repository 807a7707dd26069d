from __future__ import annotations

import logging

from app.core.errors import AuthenticationError, ConflictError, NotFoundError
from app.core.security.passwords import hash_password, verify_password
from app.crud.protocols import UserStore
from app.models.users import User
from app.schemas.users import LoginRequest, RegisterRequest, UserUpdate
from app.services.normalization import normalize_email

logger = logging.getLogger(__name__)


class UserService:
    """Principal directory: identity records keyed by a normalized email."""

    def __init__(self, users: UserStore):
        self.users = users

    def create(self, *, email: str, password_hash: str, name: str) -> User:
        email = normalize_email(email)
        if self.users.get_by_email(email) is not None:
            raise ConflictError("email already registered")
        return self.users.add(email=email, name=name.strip(), password_hash=password_hash)

    def register(self, data: RegisterRequest) -> User:
        user = self.create(
            email=str(data.email),
            password_hash=hash_password(data.password),
            name=data.name,
        )
        logger.info("user_registered user_id=%s", user.id)
        return user

    def authenticate(self, data: LoginRequest) -> User:
        user = self.users.get_by_email(normalize_email(str(data.email)))
        # same message for unknown email and bad password
        if user is None or not verify_password(data.password, user.password_hash):
            raise AuthenticationError("invalid email or password")
        return user

    def get(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def get_by_email(self, email: str) -> User:
        user = self.users.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("user not found")
        return user

    def list(self, skip: int = 0, limit: int = 50) -> list[User]:
        return self.users.list_all(skip=skip, limit=limit)

    def update(self, user_id: int, data: UserUpdate) -> User:
        self.get(user_id)

        patch = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in patch:
            patch["email"] = normalize_email(str(patch["email"]))
            existing = self.users.get_by_email(patch["email"])
            if existing is not None and existing.id != user_id:
                raise ConflictError("email already in use")
        if "name" in patch:
            patch["name"] = patch["name"].strip()

        user = self.users.update(user_id, patch)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def delete(self, user_id: int) -> None:
        if not self.users.delete(user_id):
            raise NotFoundError("user not found")
        logger.info("user_deleted user_id=%s", user_id)
