from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import FastAPI

from .config import EnvironmentVariables
from .db import Database
from .services.password import PasswordService
from .services.permission import PermissionService
from .services.user import UserService

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    config: EnvironmentVariables
    database: Database
    password_service: PasswordService
    permission_service: PermissionService
    user_service: UserService

    @classmethod
    def build(cls, config: EnvironmentVariables) -> "AppContainer":
        database = Database(config.database_url)
        password_service = PasswordService()
        permission_service = PermissionService()
        user_service = UserService(password_service, permission_service)

        return cls(
            config=config,
            database=database,
            password_service=password_service,
            permission_service=permission_service,
            user_service=user_service,
        )

    async def startup(self, app: FastAPI) -> None:
        await self.database.create_all()
        app.state.container = self
        logger.info("Started in %s mode", self.config.node_env)

    async def shutdown(self, app: FastAPI) -> None:
        await self.database.dispose()
