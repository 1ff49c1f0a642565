from __future__ import annotations

from typing import AsyncIterator, List, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from .container import AppContainer
from .crud import CrudRequest, parse_crud_request
from .db.models import User
from .exceptions import AuthenticationError

basic_auth = HTTPBasic(auto_error=False)


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def get_db_session(
    container: AppContainer = Depends(get_container),
) -> AsyncIterator[AsyncSession]:
    async with container.database.session() as session:
        yield session


async def get_request_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_auth),
    container: AppContainer = Depends(get_container),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[User]:
    if credentials is None:
        return None

    user = await container.user_service.find_by_email(db, credentials.username)
    if not user or not container.password_service.verify_password(
        credentials.password, user.password
    ):
        raise AuthenticationError("Invalid credentials")
    return user


async def require_request_user(
    user: Optional[User] = Depends(get_request_user),
) -> User:
    if user is None:
        raise AuthenticationError()
    return user


def get_crud_request(
    filter: List[str] = Query(default=[]),
    sort: List[str] = Query(default=[]),
    limit: Optional[int] = Query(default=None, ge=1),
    offset: Optional[int] = Query(default=None, ge=0),
    page: Optional[int] = Query(default=None, ge=1),
) -> CrudRequest:
    return parse_crud_request(filters=filter, sort=sort, limit=limit, offset=offset, page=page)
