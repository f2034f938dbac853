"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.um_common.database import engine
from src.um_common.errors import AppError, InternalError, ValidationFailedError
from src.um_common.redis_client import close_redis, create_redis
from src.um_common.response import error_response
from src.um_gateway.api.router import router as auth_router
from src.um_gateway.middleware.request_log import RequestLogMiddleware
from src.um_user.api.router import router as user_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("um.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, create Redis client. Shutdown: dispose both."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    app.state.redis = await create_redis()
    yield
    await engine.dispose()
    await close_redis(app.state.redis)


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.details)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == 401 else None
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
        headers=headers,
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())) or "body",
            "message": str(err.get("msg", "Invalid value")),
        }
        for err in exc.errors()
    ]
    return _error_json(request, ValidationFailedError(errors))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_json(request, InternalError())


app.include_router(auth_router, prefix="/api/v1")
app.include_router(user_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
