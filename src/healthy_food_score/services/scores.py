"""Score orchestration: validation, lookups, model dispatch and merge."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TypeVar

from healthy_food_score.domain.additives import AdditiveDetection, AdditiveRule
from healthy_food_score.domain.errors import ScoreValidationError
from healthy_food_score.domain.ingredients import MatchReport
from healthy_food_score.domain.nutrients import NutrientProfile, ServingContext
from healthy_food_score.domain.scores import (
    SCORE_VERSIONS,
    V1,
    V1_LEGACY,
    ScoreObject,
    ScoreRecord,
    ScoreResult,
    merge_score_record,
)
from healthy_food_score.services.additives import AdditiveRuleStore, detect_additives
from healthy_food_score.services.hfs_v1 import compute_v1
from healthy_food_score.services.hfs_v1_legacy import compute_v1_legacy
from healthy_food_score.services.hfs_v2 import compute_v2
from healthy_food_score.services.ingredients import (
    IngredientCandidateStore,
    IngredientMatcher,
    build_match_report,
    clean_ingredients,
    split_ingredients,
)
from healthy_food_score.services.normalizer import sanitize_profile, to_canonical

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_input(
    version: str,
    profile: NutrientProfile,
    ingredients: Sequence[str],
    ingredients_raw: str | None = None,
) -> None:
    """Raise ScoreValidationError listing every missing requirement."""
    if version not in SCORE_VERSIONS:
        raise ScoreValidationError([f"Unknown score version: {version}"])
    messages: list[str] = []
    if not ingredients and not (ingredients_raw and ingredients_raw.strip()):
        messages.append("No ingredients provided.")
    if not profile.energy_kcal:
        messages.append("Calories data not provided.")
    if version == V1_LEGACY and not profile.nova:
        messages.append("NOVA data not provided.")
    if messages:
        raise ScoreValidationError(messages)


@dataclass
class ScoreOrchestrator:
    """Runs one score model and merges it into the stored record."""

    rule_store: AdditiveRuleStore
    ingredient_matcher: IngredientMatcher
    lookup_timeout_seconds: float = 5.0

    async def compute(  # noqa: PLR0913
        self,
        version: str,
        profile: NutrientProfile | Mapping[str, object],
        ingredients: Sequence[object] | None,
        serving: ServingContext | None = None,
        existing: ScoreRecord | None = None,
        ingredients_raw: str | None = None,
    ) -> ScoreResult:
        """Compute ``version`` scores for a declared per-serving profile.

        Without a serving context the profile is taken as already per 100 g.
        Lookup failures degrade to a zero contribution and are reported in
        ``warnings``; only validation errors abort.
        """
        declared = (
            profile
            if isinstance(profile, NutrientProfile)
            else sanitize_profile(profile)
        )
        items = clean_ingredients(ingredients) or split_ingredients(ingredients_raw)
        validate_input(version, declared, items, ingredients_raw)

        canonical = (
            to_canonical(declared, serving, precision=None) if serving else declared
        )
        warnings: list[str] = []

        scores: ScoreObject
        if version == V1:
            scores = compute_v1(canonical, serving, ingredient_count=len(items))
        elif version == V1_LEGACY:
            detection = await self._detect_additives(items, warnings)
            scores = compute_v1_legacy(canonical, additive_count=detection.count)
        else:
            detection = await self._detect_additives(items, warnings)
            report = await self._match_ingredients(items, warnings)
            scores = compute_v2(
                canonical,
                matches=report,
                additives=detection,
                serving_known=serving is not None,
            )

        record = merge_score_record(existing, version, scores)
        return ScoreResult(
            version=version,
            subscores=scores,
            record=record,
            warnings=warnings,
        )

    async def _detect_additives(
        self, items: list[str], warnings: list[str]
    ) -> AdditiveDetection:
        if not items:
            return AdditiveDetection()
        rules: list[AdditiveRule] = await self._lookup(
            "additive rules", self.rule_store.list_rules, [], warnings
        )
        detection = detect_additives(items, rules)
        for name in detection.invalid_rules:
            warnings.append(f"Additive rule {name} has an invalid pattern; skipped.")
        return detection

    async def _match_ingredients(
        self, items: list[str], warnings: list[str]
    ) -> MatchReport:
        fallback = build_match_report(items, [])
        report: MatchReport = await self._lookup(
            "ingredient matching",
            lambda: self.ingredient_matcher.match(items),
            fallback,
            warnings,
        )
        review = report.summary()["needs_review"]
        if review:
            warnings.append(f"{review} ingredient(s) need review.")
        return report

    async def _lookup(
        self,
        action: str,
        func: Callable[[], Awaitable[T]],
        fallback: T,
        warnings: list[str],
    ) -> T:
        """Await a collaborator with a timeout, falling back on failure."""
        try:
            return await asyncio.wait_for(func(), timeout=self.lookup_timeout_seconds)
        except Exception as exc:
            if isinstance(exc, TimeoutError):
                reason = "timed out"
            else:
                reason = str(exc) or type(exc).__name__
            _logger.warning("Lookup %s failed: %s", action, reason)
            warnings.append(f"{action} unavailable ({reason}); ignored.")
            return fallback


async def compute_score(  # noqa: PLR0913
    version: str,
    profile: NutrientProfile | Mapping[str, object],
    ingredients: Sequence[object] | None,
    serving: ServingContext | None,
    *,
    rule_store: AdditiveRuleStore,
    candidate_store: IngredientCandidateStore,
    existing: ScoreRecord | None = None,
    ingredients_raw: str | None = None,
    lookup_timeout_seconds: float = 5.0,
) -> ScoreResult:
    """One-shot score computation without building an orchestrator."""
    orchestrator = ScoreOrchestrator(
        rule_store=rule_store,
        ingredient_matcher=IngredientMatcher(candidate_store),
        lookup_timeout_seconds=lookup_timeout_seconds,
    )
    return await orchestrator.compute(
        version,
        profile,
        ingredients,
        serving,
        existing,
        ingredients_raw=ingredients_raw,
    )
