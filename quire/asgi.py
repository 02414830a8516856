"""ASGI application factory for Quire."""

import logging
from typing import Any

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar
from litestar.datastructures import State

import quire.db.models  # noqa: F401  register all models on Base
from quire.config import Settings, get_settings
from quire.controllers.admin import PageAdminController
from quire.controllers.web import PageController
from quire.db.base import Base
from quire.lib.exceptions import EXCEPTION_HANDLERS

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Send quire's log records to stderr at the configured level."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("quire").setLevel(settings.log_level.upper())


def create_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_kwargs: dict[str, Any] = dict(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            echo=settings.db.echo,
        )
        engine_config = EngineConfig(**engine_kwargs)

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=settings.db.create_all,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def create_app(settings: Settings | None = None) -> Litestar:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = Litestar(
        route_handlers=[PageAdminController, PageController],
        plugins=[SQLAlchemyPlugin(config=create_db_config(settings))],
        exception_handlers=EXCEPTION_HANDLERS,
        state=State({"settings": settings}),
        debug=settings.debug,
    )
    logger.debug("Application created (database: %s)", settings.db.url.split("://", 1)[0])
    return app


app = create_app()
