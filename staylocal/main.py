"""StayLocal: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staylocal.api.exceptions import register_exception_handlers
from staylocal.api.v1.auth import router as auth_router
from staylocal.api.v1.notifications import router as notifications_router
from staylocal.api.v1.properties import router as properties_router
from staylocal.api.v1.reports import router as reports_router
from staylocal.api.v1.reservations import router as reservations_router
from staylocal.api.v1.tickets import router as tickets_router
from staylocal.api.v1.users import router as users_router
from staylocal.config import settings

# Configure root logger so all staylocal.* loggers output to stderr.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    yield
    # Shutdown: dispose engine connections
    from staylocal.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Short-term rental booking platform: listings, reservations, notifications and support.",
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

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(properties_router)
app.include_router(reservations_router)
app.include_router(notifications_router)
app.include_router(tickets_router)
app.include_router(reports_router)


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
