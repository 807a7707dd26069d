from .users import User  # noqa: F401
from .roles import Role  # noqa: F401
from .permissions import Permission  # noqa: F401
from .user_roles import UserRole  # noqa: F401
from .role_permissions import RolePermission  # noqa: F401
