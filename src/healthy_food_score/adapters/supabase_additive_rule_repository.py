"""Supabase implementation of the additive rule table."""

import asyncio
from dataclasses import dataclass

from supabase import Client

from healthy_food_score.domain.additives import AdditiveRule
from healthy_food_score.services.additive_rules import AdditiveRuleRepository
from healthy_food_score.services.normalizer import sanitize_value


@dataclass
class SupabaseAdditiveRuleRepository(AdditiveRuleRepository):
    """Supabase-backed repository for ``additive_rules``."""

    client: Client

    async def list_rules(self) -> list[AdditiveRule]:
        """Return every rule ordered by name."""
        return await asyncio.to_thread(self._fetch_rules)

    def _fetch_rules(self) -> list[AdditiveRule]:
        response = (
            self.client.table("additive_rules")
            .select("*")
            .order("name", desc=False)
            .execute()
        )
        return [_parse_rule(row) for row in response.data or []]

    def create_rule(self, rule: AdditiveRule) -> AdditiveRule:
        """Insert a rule and return the stored row."""
        response = (
            self.client.table("additive_rules")
            .insert(
                {
                    "name": rule.name,
                    "category": rule.category,
                    "weight": rule.weight,
                    "regex": rule.regex,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create additive rule")
        return _parse_rule(response.data[0])

    def update_rule(
        self, name: str, category: str, weight: float, regex: str
    ) -> AdditiveRule | None:
        """Update a rule by name."""
        response = (
            self.client.table("additive_rules")
            .update({"category": category, "weight": weight, "regex": regex})
            .eq("name", name)
            .execute()
        )
        if not response.data:
            return None
        return _parse_rule(response.data[0])

    def delete_rule(self, name: str) -> None:
        """Delete a rule by name."""
        self.client.table("additive_rules").delete().eq("name", name).execute()


def _parse_rule(row: dict[str, object]) -> AdditiveRule:
    """Parse an additive rule row into a domain model."""
    return AdditiveRule(
        name=str(row.get("name") or ""),
        category=str(row.get("category") or ""),
        weight=sanitize_value(row.get("weight")),
        regex=str(row.get("regex") or ""),
    )
