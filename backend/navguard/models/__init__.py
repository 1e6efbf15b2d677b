from .auth import User, Role, Permission, RolePermission, SessionToken
from .security import SecurityEvent

__all__ = [
    'User', 'Role', 'Permission', 'RolePermission', 'SessionToken',
    'SecurityEvent',
]
