from __future__ import annotations

from typing import Any, Optional

from ..db.models import RoleEnum, User


class PermissionService:
    """Decides whether a requester may act on the user row with ``target_id``."""

    def has_permission(self, request_user: Optional[User], target_id: Any) -> bool:
        if request_user is None:
            return False
        if request_user.role == RoleEnum.admin.value:
            return True
        try:
            return request_user.id == int(target_id)
        except (TypeError, ValueError):
            return False
