from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Mapping, Optional

from fastapi import FastAPI

from .config import EnvironmentVariables, load_environment
from .container import AppContainer
from .exceptions import ConfigurationError
from .routers import health, users

logger = logging.getLogger(__name__)


def _load_config(environ: Optional[Mapping[str, str]]) -> EnvironmentVariables:
    try:
        return load_environment(environ)
    except ConfigurationError as exc:
        for error in exc.errors:
            logger.error("Invalid environment: %s", error)
        raise


def create_application(environ: Optional[Mapping[str, str]] = None) -> FastAPI:
    config = _load_config(environ)
    logging.basicConfig(level=config.log_level)
    container = AppContainer.build(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup(app)
        try:
            yield
        finally:
            await container.shutdown(app)

    app = FastAPI(
        title="userhub",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None if config.is_production else "/docs",
    )
    app.state.container = container

    app.include_router(health.router)
    app.include_router(users.router)

    return app
