"""FastAPI process host for the pricing engine."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stocktracker.app_context import AppContext
from stocktracker.config.settings import get_settings
from stocktracker.config.logging_config import setup_logging
from stocktracker.core.exceptions import AppError
from stocktracker.repositories.sqlalchemy.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    init_db()
    context = AppContext(settings=get_settings())
    app.state.context = context
    context.start_background()
    yield
    # Shutdown
    await context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Portfolio valuation, price caching and Australian CGT reporting",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check(request: Request) -> dict[str, object]:
    """Health check endpoint."""
    context: AppContext = request.app.state.context
    return {
        "status": "healthy",
        "cached_prices": len(context.price_cache),
        "refresher_running": context.refresher.is_running,
    }


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
