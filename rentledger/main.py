"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rentledger import models  # noqa: F401
from rentledger.api.routes import health, invoices, landlords, properties, rents, states, tenants
from rentledger.core.config import settings
from rentledger.core.database import Base, engine
from rentledger.core.errors import ConflictError, NotFoundError, RentLedgerError, ValidationError
from rentledger.core.logging import configure_logging, correlation_id_var

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[RentLedgerError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    ConflictError: 409,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Rental billing: meter states, invoices and soft-deletable parties",
    lifespan=lifespan,
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Tag the request and its log records with a correlation id."""
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token = correlation_id_var.set(corr)
    request.state.correlation_id = corr
    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)
    response.headers["X-Correlation-ID"] = corr
    return response


def _error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_code,
            "error": {"type": error_type, "message": message, "details": details},
            "correlation_id": getattr(request.state, "correlation_id", None),
            "path": request.url.path,
            "method": request.method,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


@app.exception_handler(RentLedgerError)
async def domain_error_handler(request: Request, exc: RentLedgerError) -> JSONResponse:
    """Map domain errors raised by services to HTTP responses."""
    status_code = next(
        (code for kind, code in _STATUS_CODES.items() if isinstance(exc, kind)),
        400,
    )
    return _error_response(request, status_code, exc.error_type, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests with the standard error envelope."""
    # ctx may hold exception instances, which are not JSON serializable
    details = [{k: v for k, v in error.items() if k not in ("ctx", "input")} for error in exc.errors()]
    return _error_response(request, 422, "request_validation_error", "Request validation failed", details)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the client."""
    logger.exception("Unhandled error processing request")
    return _error_response(request, 500, "internal_error", "An unexpected error occurred")


# Include API routers
app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
app.include_router(landlords.router, prefix=settings.API_PREFIX)
app.include_router(tenants.router, prefix=settings.API_PREFIX)
app.include_router(properties.router, prefix=settings.API_PREFIX)
app.include_router(rents.router, prefix=settings.API_PREFIX)
app.include_router(states.router, prefix=settings.API_PREFIX)
app.include_router(invoices.router, prefix=settings.API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rentledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
