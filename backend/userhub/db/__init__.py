from .base import Base
from .models import RoleEnum, User
from .session import Database

__all__ = ["Base", "Database", "RoleEnum", "User"]
