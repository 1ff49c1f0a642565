from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .. import dependencies
from ..container import AppContainer
from ..crud import CrudRequest, QueryFilter, is_get_many
from ..db.models import User
from ..schemas.user import CreateUserPayload, UserPage, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserPayload,
    crud_request: CrudRequest = Depends(dependencies.get_crud_request),
    container: AppContainer = Depends(dependencies.get_container),
    db: AsyncSession = Depends(dependencies.get_db_session),
):
    user = await container.user_service.create_one(db, crud_request, payload)
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
async def get_me(
    crud_request: CrudRequest = Depends(dependencies.get_crud_request),
    request_user: User = Depends(dependencies.require_request_user),
    container: AppContainer = Depends(dependencies.get_container),
    db: AsyncSession = Depends(dependencies.get_db_session),
):
    user = await container.user_service.get_me(db, crud_request, request_user)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: int,
    crud_request: CrudRequest = Depends(dependencies.get_crud_request),
    request_user: Optional[User] = Depends(dependencies.get_request_user),
    container: AppContainer = Depends(dependencies.get_container),
    db: AsyncSession = Depends(dependencies.get_db_session),
):
    crud_request.parsed.param_filter.append(QueryFilter("id", "$eq", user_id))
    user = await container.user_service.get_one(db, crud_request, request_user)
    return UserRead.model_validate(user)


@router.get("", response_model=Union[UserPage, List[UserRead]])
async def get_users(
    crud_request: CrudRequest = Depends(dependencies.get_crud_request),
    request_user: Optional[User] = Depends(dependencies.get_request_user),
    container: AppContainer = Depends(dependencies.get_container),
    db: AsyncSession = Depends(dependencies.get_db_session),
):
    users = await container.user_service.get_many(db, crud_request, request_user)
    if is_get_many(users):
        return UserPage.model_validate(users)
    return [UserRead.model_validate(user) for user in users]
