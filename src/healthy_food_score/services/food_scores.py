"""Rescoring of stored foods."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from healthy_food_score.domain.errors import FoodNotFoundError
from healthy_food_score.domain.nutrients import NutrientProfile, ServingContext
from healthy_food_score.domain.scores import ScoreRecord, ScoreResult
from healthy_food_score.services.scores import ScoreOrchestrator


class FoodScoreRepository(Protocol):
    """Persistence interface for per-food score records."""

    def get_score_record(self, food_id: str) -> ScoreRecord | None:
        """Return the stored record, or None when the food is unknown."""

    def save_score_record(
        self, food_id: str, record: ScoreRecord, numeric_score: float
    ) -> None:
        """Store the record and the headline score for a food."""


@dataclass
class FoodScoreService:
    """Loads the stored record, recomputes one version and saves the merge."""

    orchestrator: ScoreOrchestrator
    repository: FoodScoreRepository

    async def rescore(  # noqa: PLR0913
        self,
        food_id: str,
        version: str,
        profile: NutrientProfile | Mapping[str, object],
        ingredients: Sequence[object] | None,
        serving: ServingContext | None = None,
        ingredients_raw: str | None = None,
    ) -> ScoreResult:
        """Compute and persist scores; validation errors leave storage untouched."""
        existing = self.repository.get_score_record(food_id)
        if existing is None:
            raise FoodNotFoundError(food_id)
        result = await self.orchestrator.compute(
            version,
            profile,
            ingredients,
            serving=serving,
            existing=existing,
            ingredients_raw=ingredients_raw,
        )
        self.repository.save_score_record(
            food_id, result.record, result.record.numeric_score()
        )
        return result
