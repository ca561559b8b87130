from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from finsmart.api.middleware.error_handler import (
    handle_finsmart_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from finsmart.api.middleware.logging import RequestLoggingMiddleware, configure_logging
from finsmart.api.v1 import router as v1_router
from finsmart.api.v1.health import router as health_router
from finsmart.config import settings
from finsmart.core.exceptions import FinSmartError
from finsmart.db.session import async_engine
from finsmart.models import Base


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.db_create_all:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await async_engine.dispose()


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(
        title="FinSmart API",
        description="Personal finance tracking with automatic savings goal funding",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(FinSmartError, handle_finsmart_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
