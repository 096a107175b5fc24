"""FastAPI application for the authenticated todo API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import time
import traceback
from typing import Any, Dict
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__, db
from .api.routes import router as todo_router
from .auth import router as auth_router
from .config import Settings, get_settings
from .errors import AppError
from .logging_utils import configure_logging, reset_request_id, set_request_id
from .repositories import (
    InMemoryTodoRepository,
    InMemoryUserRepository,
    MongoTodoRepository,
    MongoUserRepository,
)

configure_logging()
logger = logging.getLogger(__name__)

DEV_ORIGINS = [
    "http://localhost",
    "http://127.0.0.1",
    "http://localhost:3000",
    "http://localhost:5173",
]


async def _init_storage(app: FastAPI, settings: Settings) -> None:
    if settings.mongodb_uri:
        logger.info("MONGODB_URI detected, enabling MongoDB persistence")
        try:
            database = await db.init_db(
                settings.mongodb_uri,
                settings.mongodb_db,
                timeout_ms=settings.db_timeout_ms,
            )
        except Exception:
            logger.exception("Failed to initialize database connection")
            await db.close_db()
            raise
        app.state.users = MongoUserRepository(database[db.USERS_COLLECTION])
        app.state.todos = MongoTodoRepository(database[db.TODOS_COLLECTION])
    else:
        logger.warning("MONGODB_URI not set, using in-memory storage; data is lost on restart")
        app.state.users = InMemoryUserRepository()
        app.state.todos = InMemoryTodoRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings.validate()
    logger.info(
        "Starting Todo API environment=%s jwt_secret=%s token_lifetime=%s",
        settings.environment,
        "set" if settings.jwt_secret else "missing",
        settings.jwt_expire,
    )
    await _init_storage(app, settings)
    app.state.started_at = time.monotonic()

    yield

    logger.info("Shutting down Todo API...")
    await db.close_db()


app = FastAPI(
    title="Todo API",
    description="Authenticated todo management API",
    version=__version__,
    lifespan=lifespan,
)


def _envelope(message: str, code: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message, "error": code}
    body.update(extra)
    return body


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        content = _envelope(exc.message, exc.code)
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        content = _envelope(
            f"Route {request.method} {request.url.path} not found",
            "not_found",
        )
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        content = _envelope(message, "http_error")
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, content["message"])
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "Invalid input"
    field = None
    errors = exc.errors()
    if errors:
        message = errors[0].get("msg", message)
        location = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
        field = ".".join(location) or None
    content = _envelope(message, "validation_error")
    if field:
        content["field"] = field
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = _envelope("Server error", "internal_error")
    if not get_settings().is_production:
        content["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request_token = set_request_id(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
    finally:
        reset_request_id(request_token)
    response.headers["X-Request-ID"] = request_id
    return response


def resolve_allowed_origins(settings: Settings) -> list[str]:
    origins = [origin for origin in settings.allowed_origins if origin != "*"]
    if "*" in settings.allowed_origins:
        logger.warning("ALLOWED_ORIGINS contains '*', but allow_credentials is enabled; ignoring wildcard entry.")
    if not origins and not settings.is_production:
        return list(DEV_ORIGINS)
    if not origins:
        logger.warning("ALLOWED_ORIGINS is empty in production; CORS will block all cross-origin requests.")
    return origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=resolve_allowed_origins(get_settings()),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(todo_router)


@app.get("/")
async def root() -> Dict[str, Any]:
    """Basic API info."""
    settings = get_settings()
    return {
        "success": True,
        "message": "Todo API is running",
        "version": __version__,
        "environment": settings.environment,
    }


@app.get("/health")
async def health_check(request: Request) -> Dict[str, Any]:
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
        "database": "mongodb" if db.is_enabled() else "memory",
    }


def main() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "todo_api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
        log_level="info",
    )


if __name__ == "__main__":
    main()
