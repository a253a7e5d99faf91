"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from healthy_food_score.api.additives import router as additives_router
from healthy_food_score.api.models import ScoreRequest
from healthy_food_score.app_logging import configure_logging
from healthy_food_score.config import parse_version
from healthy_food_score.containers import AppContainer
from healthy_food_score.domain.errors import FoodNotFoundError, ScoreValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(additives_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/scores")
    @app.post("/scores/{version}")
    async def compute_scores(
        payload: ScoreRequest, request: Request, version: str | None = None
    ) -> dict[str, object]:
        """Compute scores without touching storage.

        Without a version in the path, ``?version=`` or the configured
        default is used.
        """
        state_container: AppContainer = request.app.state.container
        resolved = _resolve_version(version, state_container.settings.default_version)
        try:
            result = await state_container.score_orchestrator.compute(
                resolved,
                payload.nutrients,
                payload.ingredients_list,
                serving=payload.serving_context(),
                existing=payload.existing,
                ingredients_raw=payload.ingredients_raw,
            )
        except ScoreValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=exc.messages,
            ) from exc
        for warning in result.warnings:
            logger.info("Score %s warning: %s", resolved, warning)
        return result.model_dump(mode="json")

    @app.post("/foods/{food_id}/scores")
    @app.post("/foods/{food_id}/scores/{version}")
    async def rescore_food(
        food_id: str,
        payload: ScoreRequest,
        request: Request,
        version: str | None = None,
    ) -> dict[str, object]:
        """Compute scores and merge them into the food's stored record."""
        state_container: AppContainer = request.app.state.container
        resolved = _resolve_version(version, state_container.settings.default_version)
        try:
            result = await state_container.food_score_service.rescore(
                food_id,
                resolved,
                payload.nutrients,
                payload.ingredients_list,
                serving=payload.serving_context(),
                ingredients_raw=payload.ingredients_raw,
            )
        except FoodNotFoundError as exc:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
            ) from exc
        except ScoreValidationError as exc:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=exc.messages,
            ) from exc
        return result.model_dump(mode="json")

    return app


def _resolve_version(raw: str | None, default: str) -> str:
    """Map a requested version to a known one or fail with 404."""
    try:
        return parse_version(raw, default)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
