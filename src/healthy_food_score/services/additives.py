"""Additive detection against regex rules."""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from healthy_food_score.domain.additives import AdditiveDetection, AdditiveRule
from healthy_food_score.services.cache import Cache

# Multiplier applied to every detected additive weight. Kept numerically as
# calibrated; it still lacks a documented rationale.
ADDITIVE_CONTRIBUTION_FACTOR = 0.80

_INLINE_FLAGS = re.compile(r"\(\?[aiLmsux]*\)")

_logger = logging.getLogger(__name__)


class AdditiveRuleStore(Protocol):
    """Read access to the additive rule table."""

    async def list_rules(self) -> list[AdditiveRule]:
        """Return every additive rule."""


@dataclass
class CachedAdditiveRuleStore(AdditiveRuleStore):
    """Rule store that keeps the table in a TTL cache."""

    store: AdditiveRuleStore
    cache: Cache
    ttl_seconds: int = 300

    _CACHE_KEY = "additive_rules:all"

    async def list_rules(self) -> list[AdditiveRule]:
        """Return cached rules, refreshing from the store after the TTL."""
        cached = self.cache.get(self._CACHE_KEY)
        if isinstance(cached, list):
            return list(cached)
        rules = await self.store.list_rules()
        self.cache.set(self._CACHE_KEY, list(rules), ttl_seconds=self.ttl_seconds)
        return rules

    def invalidate(self) -> None:
        """Force the next read to hit the underlying store."""
        self.cache.invalidate(self._CACHE_KEY)


def compile_rule(rule: AdditiveRule) -> re.Pattern[str]:
    """Compile a rule pattern case-insensitively, dropping inline flag groups."""
    cleaned = _INLINE_FLAGS.sub("", rule.regex)
    return re.compile(cleaned, re.IGNORECASE)


def detect_additives(
    ingredients: Iterable[object], rules: Iterable[AdditiveRule]
) -> AdditiveDetection:
    """Detect additives in ingredient entries.

    Each rule counts at most once across the list, so the contribution is a
    sum over distinct additive names and does not depend on ingredient
    order. Rules with an invalid pattern are skipped and reported.
    """
    compiled: list[tuple[AdditiveRule, re.Pattern[str]]] = []
    invalid: list[str] = []
    for rule in rules:
        if not rule.name or not rule.regex:
            continue
        try:
            compiled.append((rule, compile_rule(rule)))
        except re.error as exc:
            _logger.warning(
                "Invalid regex for additive %s: %r (%s)", rule.name, rule.regex, exc
            )
            invalid.append(rule.name)

    detected: list[str] = []
    seen: set[str] = set()
    total = 0.0
    for ingredient in ingredients:
        if not isinstance(ingredient, str) or not ingredient.strip():
            continue
        text = ingredient.lower().strip()
        for rule, pattern in compiled:
            if rule.name in seen:
                continue
            if pattern.search(text):
                seen.add(rule.name)
                detected.append(rule.name)
                total += rule.weight * ADDITIVE_CONTRIBUTION_FACTOR

    return AdditiveDetection(
        detected=tuple(detected),
        contribution=total,
        invalid_rules=tuple(invalid),
    )
