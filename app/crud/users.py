from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.crud.base import store_errors
from app.models.user_roles import UserRole
from app.models.users import User


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def add(self, *, email: str, name: str, password_hash: str) -> User:
        with store_errors(self.db, "create_user"):
            obj = User(email=email, name=name, password_hash=password_hash)
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj

    def get(self, user_id: int) -> User | None:
        with store_errors(self.db, "get_user"):
            return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        with store_errors(self.db, "get_user_by_email"):
            stmt = select(User).where(User.email == email)
            return self.db.execute(stmt).scalar_one_or_none()

    def list_all(self, skip: int = 0, limit: int = 50) -> list[User]:
        with store_errors(self.db, "list_users"):
            stmt = select(User).order_by(User.id.desc()).offset(skip).limit(limit)
            return list(self.db.execute(stmt).scalars().all())

    def update(self, user_id: int, patch: dict[str, Any]) -> User | None:
        with store_errors(self.db, "update_user"):
            obj = self.db.get(User, user_id)
            if not obj:
                return None

            for k, v in patch.items():
                setattr(obj, k, v)

            self.db.commit()
            self.db.refresh(obj)
            return obj

    def delete(self, user_id: int) -> bool:
        with store_errors(self.db, "delete_user"):
            obj = self.db.get(User, user_id)
            if not obj:
                return False

            # edges first, row second, one commit
            self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
            self.db.delete(obj)
            self.db.commit()
            return True
