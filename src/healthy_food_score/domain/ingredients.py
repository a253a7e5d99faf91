"""Ingredient matching domain models."""

from dataclasses import dataclass, field

ACCEPTED = "accepted"
ACCEPTED_WITH_WARNING = "accepted_with_warning"
NEEDS_REVIEW = "needs_review"

CONCENTRATED_PROTEIN = "concentrated_protein"


@dataclass(frozen=True)
class IngredientCandidate:
    """Canonical ingredient proposed by the taxonomy for a raw name."""

    ingredient_id: int
    canonical_name: str
    match_method: str
    score: float
    is_whole: bool = False
    categories: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class MatchResult:
    """Ranked candidates returned by the taxonomy for one name."""

    name: str
    candidates: tuple[IngredientCandidate, ...] = ()


@dataclass(frozen=True)
class IngredientDecision:
    """Acceptance decision for a matched ingredient."""

    status: str
    ingredient_id: int | None = None
    confidence: float | None = None
    reason: str | None = None
    warning: str | None = None

    @property
    def is_usable(self) -> bool:
        """Return True when candidate attributes may be used downstream."""
        return self.status in {ACCEPTED, ACCEPTED_WITH_WARNING}


@dataclass(frozen=True)
class MatchedIngredient:
    """Raw ingredient with its candidates and decision."""

    index: int
    raw: str
    normalized: str
    candidates: tuple[IngredientCandidate, ...]
    decision: IngredientDecision

    @property
    def top_candidate(self) -> IngredientCandidate | None:
        if not self.decision.is_usable or not self.candidates:
            return None
        return self.candidates[0]

    @property
    def is_whole(self) -> bool:
        top = self.top_candidate
        return bool(top and top.is_whole)

    @property
    def categories(self) -> frozenset[str]:
        top = self.top_candidate
        if top is None:
            return frozenset()
        return top.categories


@dataclass(frozen=True)
class MatchReport:
    """Matching results for a whole ingredient list."""

    results: tuple[MatchedIngredient, ...] = ()

    def summary(self) -> dict[str, int]:
        """Count results per decision status."""
        statuses = [result.decision.status for result in self.results]
        return {
            "total": len(statuses),
            "accepted": statuses.count(ACCEPTED),
            "accepted_with_warning": statuses.count(ACCEPTED_WITH_WARNING),
            "needs_review": statuses.count(NEEDS_REVIEW),
            "unmatched": sum(1 for result in self.results if not result.candidates),
        }

    def whole_flags(self) -> list[bool]:
        return [result.is_whole for result in self.results]

    def concentrated_protein_flags(self) -> list[bool]:
        return [CONCENTRATED_PROTEIN in result.categories for result in self.results]
