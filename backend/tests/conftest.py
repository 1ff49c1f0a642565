from __future__ import annotations

from typing import Dict, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.db import Database, RoleEnum, User
from userhub.services import PasswordService, PermissionService, UserService

VALID_ENVIRONMENT: Dict[str, str] = {
    "NODE_ENV": "test",
    "PORT": "3000",
    "HTTP_TIMEOUT": "5000",
    "INFLUXDB_USER": "influx",
    "INFLUXDB_USER_PASSWORD": "influx-password",
    "INFLUXDB_ORG": "acme",
    "INFLUXDB_BUCKET": "readings",
    "INFLUXDB_MEASUREMENT_NAME": "temperature",
    "INFLUXDB_PORT": "8086",
    "INFLUXDB_HOST": "localhost",
    "INFLUXDB_URL": "http://localhost:8086",
    "INFLUXDB_TOKEN": "token",
    "INFLUXDB_PROTOCOL": "http",
}


@pytest.fixture
def environ(tmp_path) -> Dict[str, str]:
    values = dict(VALID_ENVIRONMENT)
    values["DATABASE_URL"] = f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"
    return values


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database):
    async with database.session() as session:
        yield session


@pytest.fixture
def password_service() -> PasswordService:
    # Low cost factor keeps the suite fast.
    return PasswordService(n=2**10)


@pytest.fixture
def user_service(password_service: PasswordService) -> UserService:
    return UserService(password_service, PermissionService())


@pytest.fixture
def make_user(db_session: AsyncSession, password_service: PasswordService):
    async def _make_user(
        email: str,
        user_id: Optional[int] = None,
        role: RoleEnum = RoleEnum.common,
        password: str = "secret-password",
    ) -> User:
        user = User(
            id=user_id,
            email=email,
            password=password_service.encrypt_password(password),
            role=role.value,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user
