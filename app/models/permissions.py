from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.models.mixins import TimestampMixin


class Permission(TimestampMixin, Base):
    __tablename__ = "permissions"

    __table_args__ = (
        UniqueConstraint("permission_name", name="uq_permissions_permission_name"),
        UniqueConstraint("resource", "action", name="uq_permissions_resource_action"),
        Index("ix_permissions_resource_action", "resource", "action"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # e.g. "articles.publish"
    permission_name: Mapped[str] = mapped_column(String(100), nullable=False)

    resource: Mapped[str] = mapped_column(String(100), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
