"""Application factory: settings, logging, store client, routes and error translation."""

import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from poolscore.api.routes import router
from poolscore.core.config import Settings
from poolscore.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    StoreError,
    StoreNotConfiguredError,
)
from poolscore.core.logging import setup_logging
from poolscore.db.database import build_url, create_db_engine, create_session_factory, init_db
from poolscore.db.repository import ScoreStore
from poolscore.db.sql_repository import SQLScoreStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> SQLScoreStore | None:
    """Connect to the configured database, or return None when the credentials are missing."""
    if not settings.store_configured:
        logger.error("POOLSCORE_DATABASE_URL or POOLSCORE_DATABASE_KEY missing, data endpoints will answer 503")
        return None

    engine = create_db_engine(build_url(settings.database_url, settings.database_key), echo=settings.sql_echo)
    init_db(engine)
    logger.info("Connected to %s database", engine.dialect.name)
    return SQLScoreStore(create_session_factory(engine))


def create_app(settings: Settings | None = None, store: ScoreStore | None = None) -> FastAPI:
    """Build the app. A store passed in is used as is, otherwise one is built from settings."""
    if settings is None:
        settings = Settings()
    if store is None:
        store = create_store(settings)

    app = FastAPI(title="poolscore", description="Score keeping for pool games", version="0.1.0")
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s - %d", request.method, request.url.path, response.status_code)
        return response

    setup_exception_handlers(app)
    app.include_router(router)
    return app


def setup_exception_handlers(app: FastAPI) -> None:
    """Every error leaves the API as {"error": message}."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(_request: Request, exc: InvalidRequestError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(StoreNotConfiguredError)
    async def store_not_configured_handler(_request: Request, exc: StoreNotConfiguredError) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts) or "invalid request"


settings = Settings()
setup_logging(log_dir=settings.log_dir, level=settings.log_level)
app = create_app(settings=settings)

if __name__ == "__main__":
    uvicorn.run("poolscore.main:app", host="0.0.0.0", port=8000)
