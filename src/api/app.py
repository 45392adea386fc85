"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.api.routes import router
from src.calculators.tax_data import load_tax_year_data
from src.calculators.validation import ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: resolve the active tax table from settings."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up...")

    app.state.tax_year = load_tax_year_data(
        tax_year=settings.tax_year,
        acc_rate=settings.acc_rate,
        acc_max_liable_earnings=settings.acc_max_liable_earnings,
        tax_table_file=settings.tax_table_file,
    )
    logger.info(
        "Using tax year %s (ACC %s up to %s)",
        app.state.tax_year.label,
        app.state.tax_year.acc.rate,
        app.state.tax_year.acc.max_liable_earnings,
    )

    yield

    logger.info("Shutting down...")


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Return calculator input errors as 422 with the offending field."""
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": exc.message, "field": exc.field}, status_code=422)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="NZ PAYE Calculator", lifespan=lifespan)
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return app
