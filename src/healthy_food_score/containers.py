"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from healthy_food_score.adapters.supabase_additive_rule_repository import (
    SupabaseAdditiveRuleRepository,
)
from healthy_food_score.adapters.supabase_food_score_repository import (
    SupabaseFoodScoreRepository,
)
from healthy_food_score.adapters.taxonomy_client import HttpxTaxonomyClient
from healthy_food_score.config import Settings
from healthy_food_score.services.additive_rules import AdditiveRuleService
from healthy_food_score.services.additives import CachedAdditiveRuleStore
from healthy_food_score.services.cache import InMemoryCache
from healthy_food_score.services.food_scores import FoodScoreService
from healthy_food_score.services.ingredients import IngredientMatcher
from healthy_food_score.services.scores import ScoreOrchestrator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    score_orchestrator: ScoreOrchestrator
    food_score_service: FoodScoreService
    additive_rule_service: AdditiveRuleService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    rule_repository = SupabaseAdditiveRuleRepository(supabase_client)
    rule_store = CachedAdditiveRuleStore(
        store=rule_repository,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.additive_rules_ttl_seconds,
    )
    taxonomy_client = HttpxTaxonomyClient.create(
        base_url=resolved_settings.taxonomy_base_url,
        api_key=resolved_settings.taxonomy_api_key,
    )
    orchestrator = ScoreOrchestrator(
        rule_store=rule_store,
        ingredient_matcher=IngredientMatcher(taxonomy_client),
        lookup_timeout_seconds=resolved_settings.lookup_timeout_seconds,
    )
    food_score_service = FoodScoreService(
        orchestrator=orchestrator,
        repository=SupabaseFoodScoreRepository(supabase_client),
    )
    additive_rule_service = AdditiveRuleService(
        repository=rule_repository,
        cached_store=rule_store,
    )

    async def close_resources() -> None:
        await taxonomy_client.close()

    return AppContainer(
        settings=resolved_settings,
        score_orchestrator=orchestrator,
        food_score_service=food_score_service,
        additive_rule_service=additive_rule_service,
        close_resources=close_resources,
    )
