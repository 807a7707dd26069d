"""rbac create roles

Revision ID: 514154c4382d
Revises: 2cfff2015862
Create Date: 2026-01-13 15:24:47.093883

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '514154c4382d'
down_revision: Union[str, Sequence[str], None] = '2cfff2015862'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("role_name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("role_name", name="uq_roles_role_name"),
    )
    op.create_index("ix_roles_role_name", "roles", ["role_name"])


def downgrade() -> None:
    op.drop_index("ix_roles_role_name", table_name="roles")
    op.drop_table("roles")
