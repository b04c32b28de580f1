"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from portfolio_performance.config.settings import get_settings
from portfolio_performance.config.logging_config import setup_logging
from portfolio_performance.repositories.sqlalchemy.database import init_db
from portfolio_performance.api.routers import performance_router
from portfolio_performance.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    if get_settings().cache_database_url:
        init_db()
    yield
    # Shutdown (nothing to clean up)


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Portfolio valuation and realised/unrealised P/L over time",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(performance_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
