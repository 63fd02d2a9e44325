"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from recipe_nutrition.api.days import router as days_router
from recipe_nutrition.api.models import ConversionRequest
from recipe_nutrition.api.recipes import router as recipes_router
from recipe_nutrition.app_logging import configure_logging
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.domain.errors import (
    AggregationError,
    EngineError,
    RecipeNotFoundError,
    VersionNotFoundError,
)
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.units import convert

_UNPROCESSABLE = 422


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(recipes_router)
    app.include_router(days_router)

    @app.exception_handler(EngineError)
    async def engine_error(request: Request, exc: EngineError) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code == _UNPROCESSABLE:
            logger.warning("Aggregation failed for %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/conversions")
    async def conversions(payload: ConversionRequest) -> dict[str, object]:
        """Convert an amount between two units of the same category."""
        target = Unit.parse(payload.to_unit)
        amount = convert(payload.amount, payload.from_unit, target)
        return {"amount": amount, "unit": target.value}

    return app


def _status_for(exc: EngineError) -> int:
    if isinstance(exc, RecipeNotFoundError | VersionNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, AggregationError):
        return _UNPROCESSABLE
    return status.HTTP_400_BAD_REQUEST
