"""Request payloads accepted by the HTTP API."""

from pydantic import BaseModel, Field

from healthy_food_score.domain.additives import AdditiveRule
from healthy_food_score.domain.nutrients import ServingContext
from healthy_food_score.domain.scores import ScoreRecord
from healthy_food_score.services.normalizer import build_serving_context


class ScoreRequest(BaseModel):
    """Declared label data for one food."""

    nutrients: dict[str, object] = Field(default_factory=dict)
    ingredients_list: list[str] = Field(default_factory=list)
    ingredients_raw: str | None = None
    serving_size_value: float | None = None
    serving_size_unit: str | None = None
    density: float | None = None
    existing: ScoreRecord | None = None

    def serving_context(self) -> ServingContext | None:
        """Serving context, or None when values are already per 100 g."""
        if self.serving_size_value is None:
            return None
        return build_serving_context(
            self.serving_size_value, self.serving_size_unit, self.density
        )


class AdditiveRuleIn(BaseModel):
    """New additive rule."""

    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    weight: float = Field(ge=0.0)
    regex: str = Field(min_length=1)

    def to_domain(self) -> AdditiveRule:
        return AdditiveRule(
            name=self.name,
            category=self.category,
            weight=self.weight,
            regex=self.regex,
        )


class AdditiveRuleUpdate(BaseModel):
    """Replacement fields for an existing rule."""

    category: str = Field(min_length=1)
    weight: float = Field(ge=0.0)
    regex: str = Field(min_length=1)
