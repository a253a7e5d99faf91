"""Ingredient name normalization and taxonomy matching."""

import re
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from healthy_food_score.domain.ingredients import (
    ACCEPTED,
    ACCEPTED_WITH_WARNING,
    NEEDS_REVIEW,
    IngredientCandidate,
    IngredientDecision,
    MatchedIngredient,
    MatchReport,
    MatchResult,
)

ACCEPT_THRESHOLD = 0.95
UMBRELLA_THRESHOLD = 0.85

_WHITESPACE = re.compile(r"\s+")
_UNDERSCORES = re.compile(r"_{2,}")


class IngredientCandidateStore(Protocol):
    """Taxonomy lookup returning ranked candidates per normalized name."""

    async def match(self, names: list[str]) -> list[MatchResult]:
        """Return one result per requested name."""


def normalize_ingredient_name(name: object) -> str:
    """Lower-case, strip accents and join words with underscores.

    ``"Açúcar  Refinado"`` becomes ``"acucar_refinado"``.
    """
    if not isinstance(name, str) or not name:
        return ""
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    joined = _UNDERSCORES.sub("_", _WHITESPACE.sub("_", stripped))
    return joined.strip("_")


def clean_ingredients(ingredients: Iterable[object] | None) -> list[str]:
    """Trim entries and drop blanks, keeping label order."""
    if ingredients is None:
        return []
    return [
        item.strip()
        for item in ingredients
        if isinstance(item, str) and item.strip()
    ]


def split_ingredients(raw: str | None) -> list[str]:
    """Split free ingredient text on commas."""
    if not raw:
        return []
    return clean_ingredients(raw.split(","))


def decide(candidates: Sequence[IngredientCandidate]) -> IngredientDecision:
    """Apply the acceptance policy to ranked candidates."""
    if not candidates:
        return IngredientDecision(status=NEEDS_REVIEW, reason="no candidates found")
    top = candidates[0]
    if top.score >= ACCEPT_THRESHOLD:
        return IngredientDecision(
            status=ACCEPTED,
            ingredient_id=top.ingredient_id,
            confidence=round(top.score, 2),
        )
    if top.score >= UMBRELLA_THRESHOLD and len(candidates) > 1:
        return IngredientDecision(
            status=ACCEPTED_WITH_WARNING,
            ingredient_id=top.ingredient_id,
            confidence=round(top.score, 2),
            warning="umbrella ingredient",
        )
    return IngredientDecision(status=NEEDS_REVIEW, reason="low confidence")


def build_match_report(
    ingredients: Sequence[str], results: Iterable[MatchResult]
) -> MatchReport:
    """Pair raw ingredients with store results and decide each one."""
    by_name: dict[str, tuple[IngredientCandidate, ...]] = {}
    for result in results:
        by_name.setdefault(result.name, result.candidates)

    matched = []
    for index, raw in enumerate(ingredients):
        normalized = normalize_ingredient_name(raw)
        ranked = tuple(
            sorted(by_name.get(normalized, ()), key=lambda c: c.score, reverse=True)
        )
        matched.append(
            MatchedIngredient(
                index=index,
                raw=raw,
                normalized=normalized,
                candidates=ranked,
                decision=decide(ranked),
            )
        )
    return MatchReport(results=tuple(matched))


@dataclass
class IngredientMatcher:
    """Resolves raw ingredient strings through a candidate store."""

    store: IngredientCandidateStore

    async def match(self, ingredients: Sequence[str]) -> MatchReport:
        """Match every ingredient; order of the report follows the label."""
        if not ingredients:
            return MatchReport()
        normalized = (normalize_ingredient_name(raw) for raw in ingredients)
        names = list(dict.fromkeys(normalized))
        results = await self.store.match(names)
        return build_match_report(ingredients, results)
