# Import the declarative base
from app.db.base import Base  # noqa: F401

# Import all models so they register themselves on Base.metadata.
# This allows Alembic's env.py to simply do: "from app.models.base import Base"
from app.models.users import User  # noqa: F401
from app.models.roles import Role  # noqa: F401
from app.models.permissions import Permission  # noqa: F401
from app.models.user_roles import UserRole  # noqa: F401
from app.models.role_permissions import RolePermission  # noqa: F401
