"""Management of the additive rule table."""

import re
from dataclasses import dataclass
from typing import Protocol

from healthy_food_score.domain.additives import AdditiveRule
from healthy_food_score.services.additives import CachedAdditiveRuleStore, compile_rule


class AdditiveRuleRepository(Protocol):
    """Persistence interface for additive rules."""

    async def list_rules(self) -> list[AdditiveRule]:
        """Return every additive rule ordered by name."""

    def create_rule(self, rule: AdditiveRule) -> AdditiveRule:
        """Insert a rule and return it."""

    def update_rule(
        self, name: str, category: str, weight: float, regex: str
    ) -> AdditiveRule | None:
        """Update a rule by name; None when it does not exist."""

    def delete_rule(self, name: str) -> None:
        """Delete a rule by name."""


def validate_rule(rule: AdditiveRule) -> list[str]:
    """Return problems that would make a rule unusable."""
    problems: list[str] = []
    if not rule.name.strip():
        problems.append("name is required")
    if not rule.category.strip():
        problems.append("category is required")
    if rule.weight < 0:
        problems.append("weight must be non-negative")
    if not rule.regex.strip():
        problems.append("regex is required")
    else:
        try:
            compile_rule(rule)
        except re.error as exc:
            problems.append(f"regex does not compile: {exc}")
    return problems


@dataclass
class AdditiveRuleService:
    """Application service for editing rules; keeps the cache coherent."""

    repository: AdditiveRuleRepository
    cached_store: CachedAdditiveRuleStore | None = None

    async def list_rules(self) -> list[AdditiveRule]:
        return await self.repository.list_rules()

    def create_rule(self, rule: AdditiveRule) -> AdditiveRule:
        problems = validate_rule(rule)
        if problems:
            raise ValueError("; ".join(problems))
        created = self.repository.create_rule(rule)
        self._invalidate()
        return created

    def update_rule(
        self, name: str, category: str, weight: float, regex: str
    ) -> AdditiveRule | None:
        problems = validate_rule(
            AdditiveRule(name=name, category=category, weight=weight, regex=regex)
        )
        if problems:
            raise ValueError("; ".join(problems))
        updated = self.repository.update_rule(name, category, weight, regex)
        self._invalidate()
        return updated

    def delete_rule(self, name: str) -> None:
        self.repository.delete_rule(name)
        self._invalidate()

    def _invalidate(self) -> None:
        if self.cached_store is not None:
            self.cached_store.invalidate()
