"""StayLedger: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stayledger import models  # noqa: F401  (registers tables on Base.metadata)
from stayledger.api.v1.bookings import router as bookings_router
from stayledger.api.v1.checkout import router as checkout_router
from stayledger.api.v1.payment_desk import router as payment_desk_router
from stayledger.api.v1.payments import router as payments_router
from stayledger.api.v1.units import router as units_router
from stayledger.config import settings
from stayledger.core.errors import (
    InputError,
    InvariantViolation,
    NotFoundError,
    StateConflictError,
    StayLedgerError,
)
from stayledger.database import Base, engine

# Configure root logger so all stayledger.* loggers output to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup: create any missing tables; existing ones are left alone.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown: dispose engine connections
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Booking, payment ledger and checkout settlement for short-let and hotel front desks.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def _error_response(status_code: int, exc: StayLedgerError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
    return _error_response(422, exc)


@app.exception_handler(StateConflictError)
async def state_conflict_handler(request: Request, exc: StateConflictError) -> JSONResponse:
    return _error_response(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation) -> JSONResponse:
    logger.error("Invariant violated on %s %s: %s", request.method, request.url.path, exc.message)
    return _error_response(status.HTTP_409_CONFLICT, exc)


# Routers
app.include_router(units_router)
app.include_router(bookings_router)
app.include_router(payments_router)
app.include_router(payment_desk_router)
app.include_router(checkout_router)


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
