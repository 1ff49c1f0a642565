from .password import PasswordService
from .permission import PermissionService
from .user import UserService

__all__ = [
    "PasswordService",
    "PermissionService",
    "UserService",
]
