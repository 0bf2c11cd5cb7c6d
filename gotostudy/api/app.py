"""FastAPI application factory.

``create_app()`` with no arguments serves the configured SQL database; tests
and embedders pass their own container factory instead.

    uvicorn --factory gotostudy.api.app:create_app
"""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI

from ..config import get_settings
from ..container import ContainerFactory, sql_container
from ..database import create_db_and_tables, get_engine
from ..observability import setup_logging
from .error_handlers import register_error_handlers
from .routes import health, tasks, users


logger = logging.getLogger(__name__)


def create_app(container_factory: ContainerFactory | None = None) -> FastAPI:
    """Build the application.

    Args:
        container_factory: Callable returning a context manager that yields
            an ``AppContainer`` per request. Defaults to SQL-backed
            containers on the configured engine, whose tables are created at
            startup.

    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.effective_log_level, settings.log_format)
        if container_factory is None:
            engine = get_engine()
            create_db_and_tables(engine)
            app.state.container_factory = partial(sql_container, engine)
        logger.info("GoToStudy API started")
        yield
        logger.info("GoToStudy API shutting down")

    app = FastAPI(title="GoToStudy API", version="1.0.0", lifespan=lifespan)
    if container_factory is not None:
        app.state.container_factory = container_factory

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(tasks.router)

    return app
