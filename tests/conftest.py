"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field

import pytest

from healthy_food_score.config import Settings
from healthy_food_score.containers import AppContainer
from healthy_food_score.domain.additives import AdditiveRule
from healthy_food_score.domain.ingredients import (
    CONCENTRATED_PROTEIN,
    IngredientCandidate,
    MatchResult,
)
from healthy_food_score.domain.scores import ScoreRecord
from healthy_food_score.services.additive_rules import (
    AdditiveRuleRepository,
    AdditiveRuleService,
)
from healthy_food_score.services.additives import (
    AdditiveRuleStore,
    CachedAdditiveRuleStore,
)
from healthy_food_score.services.cache import InMemoryCache
from healthy_food_score.services.food_scores import (
    FoodScoreRepository,
    FoodScoreService,
)
from healthy_food_score.services.ingredients import (
    IngredientCandidateStore,
    IngredientMatcher,
)
from healthy_food_score.services.scores import ScoreOrchestrator

DEFAULT_RULES = [
    AdditiveRule(name="corante", category="colorant", weight=1.0, regex=r"corante"),
    AdditiveRule(
        name="aromatizante",
        category="flavoring",
        weight=0.5,
        regex=r"(?i)aromatizantes?",
    ),
    AdditiveRule(
        name="glutamato",
        category="flavor_enhancer",
        weight=0.25,
        regex=r"glutamato\s+monoss[oó]dico",
    ),
]


def candidate(  # noqa: PLR0913
    ingredient_id: int,
    name: str,
    score: float,
    is_whole: bool = False,
    categories: frozenset[str] = frozenset(),
    method: str = "exact",
) -> IngredientCandidate:
    return IngredientCandidate(
        ingredient_id=ingredient_id,
        canonical_name=name,
        match_method=method,
        score=score,
        is_whole=is_whole,
        categories=categories,
    )


DEFAULT_CANDIDATES: dict[str, tuple[IngredientCandidate, ...]] = {
    "aveia": (candidate(1, "aveia", 1.0, is_whole=True),),
    "leite": (candidate(2, "leite", 0.97, is_whole=True),),
    "acucar": (candidate(3, "acucar", 0.99),),
    "proteina_isolada_de_soja": (
        candidate(
            4,
            "proteina_de_soja",
            0.96,
            categories=frozenset({CONCENTRATED_PROTEIN}),
        ),
    ),
    "oleo_vegetal": (
        candidate(5, "oleo_de_soja", 0.88, method="umbrella"),
        candidate(6, "oleo_de_girassol", 0.86, method="umbrella"),
    ),
    "farinha_especial": (candidate(7, "farinha_de_trigo", 0.7, method="fuzzy"),),
}


@dataclass
class InMemoryAdditiveRuleRepository(AdditiveRuleRepository):
    """In-memory additive rule table for tests."""

    rules: dict[str, AdditiveRule] = field(default_factory=dict)
    reads: int = 0

    async def list_rules(self) -> list[AdditiveRule]:
        self.reads += 1
        return [self.rules[name] for name in sorted(self.rules)]

    def create_rule(self, rule: AdditiveRule) -> AdditiveRule:
        self.rules[rule.name] = rule
        return rule

    def update_rule(
        self, name: str, category: str, weight: float, regex: str
    ) -> AdditiveRule | None:
        if name not in self.rules:
            return None
        updated = AdditiveRule(name=name, category=category, weight=weight, regex=regex)
        self.rules[name] = updated
        return updated

    def delete_rule(self, name: str) -> None:
        self.rules.pop(name, None)


@dataclass
class FailingRuleStore(AdditiveRuleStore):
    """Rule store that is always down."""

    async def list_rules(self) -> list[AdditiveRule]:
        raise ConnectionError("rules database unreachable")


@dataclass
class FakeCandidateStore(IngredientCandidateStore):
    """Taxonomy store answering from a fixed candidate table."""

    candidates: dict[str, tuple[IngredientCandidate, ...]] = field(
        default_factory=lambda: dict(DEFAULT_CANDIDATES)
    )
    requests: list[list[str]] = field(default_factory=list)

    async def match(self, names: list[str]) -> list[MatchResult]:
        self.requests.append(list(names))
        return [
            MatchResult(name=name, candidates=self.candidates.get(name, ()))
            for name in names
        ]


@dataclass
class SlowCandidateStore(IngredientCandidateStore):
    """Taxonomy store that never answers in time."""

    delay_seconds: float = 1.0

    async def match(self, names: list[str]) -> list[MatchResult]:
        await asyncio.sleep(self.delay_seconds)
        return []


@dataclass
class InMemoryFoodScoreRepository(FoodScoreRepository):
    """In-memory food score storage for tests.

    Like the foods table, only ids already present in ``records`` can be saved.
    """

    records: dict[str, ScoreRecord] = field(default_factory=dict)
    numeric_scores: dict[str, float] = field(default_factory=dict)

    def get_score_record(self, food_id: str) -> ScoreRecord | None:
        return self.records.get(food_id)

    def save_score_record(
        self, food_id: str, record: ScoreRecord, numeric_score: float
    ) -> None:
        if food_id not in self.records:
            raise RuntimeError("Failed to update food score")
        self.records[food_id] = record
        self.numeric_scores[food_id] = numeric_score


def build_orchestrator(
    rule_store: AdditiveRuleStore | None = None,
    candidate_store: IngredientCandidateStore | None = None,
    lookup_timeout_seconds: float = 5.0,
) -> ScoreOrchestrator:
    if rule_store is None:
        rule_store = InMemoryAdditiveRuleRepository(
            rules={rule.name: rule for rule in DEFAULT_RULES}
        )
    return ScoreOrchestrator(
        rule_store=rule_store,
        ingredient_matcher=IngredientMatcher(candidate_store or FakeCandidateStore()),
        lookup_timeout_seconds=lookup_timeout_seconds,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        admin_token="admin-token",
        taxonomy_base_url="https://taxonomy.example.com",
        taxonomy_api_key="taxonomy-key",
    )


@pytest.fixture
def rule_repository() -> InMemoryAdditiveRuleRepository:
    return InMemoryAdditiveRuleRepository(
        rules={rule.name: rule for rule in DEFAULT_RULES}
    )


@pytest.fixture
def candidate_store() -> FakeCandidateStore:
    return FakeCandidateStore()


@pytest.fixture
def food_score_repository() -> InMemoryFoodScoreRepository:
    return InMemoryFoodScoreRepository()


@pytest.fixture
def container(
    settings: Settings,
    rule_repository: InMemoryAdditiveRuleRepository,
    candidate_store: FakeCandidateStore,
    food_score_repository: InMemoryFoodScoreRepository,
) -> AppContainer:
    rule_store = CachedAdditiveRuleStore(
        store=rule_repository,
        cache=InMemoryCache(),
        ttl_seconds=settings.additive_rules_ttl_seconds,
    )
    orchestrator = build_orchestrator(rule_store, candidate_store)
    food_score_service = FoodScoreService(
        orchestrator=orchestrator,
        repository=food_score_repository,
    )
    additive_rule_service = AdditiveRuleService(
        repository=rule_repository,
        cached_store=rule_store,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        score_orchestrator=orchestrator,
        food_score_service=food_score_service,
        additive_rule_service=additive_rule_service,
        close_resources=close_resources,
    )
