"""
FastAPI application factory.

    uvicorn wizeprompt.main:app
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from wizeprompt.api.v1.error_handlers import register_exception_handlers
from wizeprompt.api.v1.router import get_api_router
from wizeprompt.config import Settings, get_settings
from wizeprompt.core.logging import RequestIDMiddleware, setup_logging
from wizeprompt.database.session import create_all, engine
from wizeprompt.ui.layout import router as pages_router
from wizeprompt.utils.logging import get_project_version

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.DB_CREATE_TABLES:
            await create_all(engine)
            logger.info("app.startup.tables_created")
        logger.info("app.startup", extra={"env": settings.ENV})
        yield
        await engine.dispose()
        logger.info("app.shutdown")

    app = FastAPI(
        title="WizePrompt API",
        version=get_project_version(),
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": get_project_version(), "env": settings.ENV}

    app.include_router(get_api_router())
    app.include_router(pages_router)

    return app


app = create_app()
