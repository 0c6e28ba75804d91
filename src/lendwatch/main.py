"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lendwatch import __version__
from lendwatch.config.settings import get_settings
from lendwatch.config.logging_config import setup_logging
from lendwatch.repositories.sqlalchemy.database import init_db
from lendwatch.api.deps import is_redis_url, reset_clients
from lendwatch.api.routers import lending_router, savings_router
from lendwatch.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    cache_url = get_settings().cache_url
    if cache_url and not is_redis_url(cache_url):
        init_db()
    yield
    # Shutdown
    reset_clients()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Vault position reconciliation with freshness-cached aggregation",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(lending_router)
app.include_router(savings_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=exc.status_code,
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
        "version": __version__,
        "docs": "/docs",
    }
