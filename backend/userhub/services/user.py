from __future__ import annotations

from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..crud import CrudRequest, CrudService, GetManyResponse, is_get_many
from ..db.models import RoleEnum, User
from ..exceptions import DuplicateResourceError, EntityNotFoundError, ForbiddenError
from ..schemas.user import CreateUserPayload
from .password import PasswordService
from .permission import PermissionService

DUPLICATE_EMAIL_MESSAGE = "An user with this email was already registered"

QUERYABLE_FIELDS = ("id", "email", "name", "role", "created_at", "updated_at")


class UserService:
    """
    Reads and writes user rows on behalf of a requester.

    Persistence and query interpretation are delegated to a generic
    :class:`CrudService`; this class adds the email uniqueness check, the
    forced default role and the per-row permission checks.
    """

    def __init__(
        self,
        password_service: PasswordService,
        permission_service: PermissionService,
        crud: Optional[CrudService[User]] = None,
    ) -> None:
        self._password_service = password_service
        self._permission_service = permission_service
        self._crud = crud or CrudService(User, allowed_fields=QUERYABLE_FIELDS)

    async def create_one(
        self,
        db: AsyncSession,
        crud_request: CrudRequest,
        payload: CreateUserPayload,
    ) -> User:
        if await self.has_user_with_email(db, payload.email):
            raise DuplicateResourceError(DUPLICATE_EMAIL_MESSAGE)

        user = User(
            email=payload.email,
            name=payload.name,
            password=self._password_service.encrypt_password(payload.password),
            role=RoleEnum.common.value,
        )
        try:
            return await self._crud.save(db, user)
        except IntegrityError as exc:
            await db.rollback()
            raise DuplicateResourceError(DUPLICATE_EMAIL_MESSAGE) from exc

    async def get_one(
        self,
        db: AsyncSession,
        crud_request: CrudRequest,
        request_user: Optional[User] = None,
    ) -> User:
        user_id = self._crud.get_param_filters(crud_request.parsed).get("id")
        if user_id is None:
            raise EntityNotFoundError(None, User)
        if not self._permission_service.has_permission(request_user, user_id):
            raise ForbiddenError()

        user = await self._crud.get_one(db, crud_request)
        if not user:
            raise EntityNotFoundError(user_id, User)
        return user

    async def get_me(
        self,
        db: AsyncSession,
        crud_request: CrudRequest,
        request_user: Optional[User] = None,
    ) -> User:
        if request_user is None:
            raise ForbiddenError()

        user_id = request_user.id
        crud_request.parsed.search.setdefault("$and", []).append({"id": {"$eq": user_id}})

        user = await self._crud.get_one(db, crud_request)
        if not user:
            raise EntityNotFoundError(user_id, User)
        return user

    async def get_many(
        self,
        db: AsyncSession,
        crud_request: CrudRequest,
        request_user: Optional[User] = None,
    ) -> Union[GetManyResponse[User], List[User]]:
        users = await self._crud.get_many(db, crud_request)

        rows = users.data if is_get_many(users) else users
        allowed = all(
            self._permission_service.has_permission(request_user, user.id) for user in rows
        )
        if not allowed:
            raise ForbiddenError()
        return users

    async def has_user_with_email(self, db: AsyncSession, email: str) -> bool:
        return await self.find_by_email(db, email) is not None

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await self._crud.find_one(db, User.email == email)
