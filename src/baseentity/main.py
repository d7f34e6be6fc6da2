from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from baseentity.config import settings
from baseentity.db.session import shutdown
from baseentity.dependencies import DB
from baseentity.exceptions import ConflictError, DatabaseError, DomainError, NotFoundError
from baseentity.logging import bind_pricing_environment, get_logger
from baseentity.middleware import RequestContextMiddleware
from baseentity.routers import entity, pricing
from baseentity.schemas.error import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: record the pricing environment. Shutdown: close pooled connections."""
    env = app.state.pricing_environment
    bind_pricing_environment(env)
    logger.info("startup", pricing_date=env.pricing_date.isoformat(), calc_env=env.calc_env)
    yield
    await shutdown()


app = FastAPI(lifespan=lifespan)
# Fixed for the life of the process; shared by the log context and /pricing-environment.
app.state.pricing_environment = settings.pricing_environment()
app.add_middleware(RequestContextMiddleware)
app.include_router(entity.router)
app.include_router(pricing.router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Return 404 with the entity details."""
    return JSONResponse(status_code=404, content=ErrorResponse.build("not_found", exc.message))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Return 409 for writes attempted through a read-only context."""
    logger.warning("conflict", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=409, content=ErrorResponse.build("conflict", exc.message))


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return 400 for generic domain-level violations."""
    logger.warning("domain_error", error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=ErrorResponse.build("domain_error", exc.message))


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Return 503; the cause chain goes to the logs only."""
    logger.error(
        "database_error",
        error=exc.message,
        cause=repr(exc.cause) if exc.cause is not None else None,
        path=request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=503, content=ErrorResponse.build("database_error", exc.message)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns generic error to client (no stack traces leaked)
    """
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse.build("internal_error", "Internal server error"),
    )


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint: verifies database connectivity."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise DatabaseError(f"Database ping failed: {exc}", exc) from exc
    return {"status": "ok"}
