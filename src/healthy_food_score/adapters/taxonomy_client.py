"""HTTP client for the ingredient taxonomy service."""

from dataclasses import dataclass

import httpx

from healthy_food_score.domain.ingredients import IngredientCandidate, MatchResult
from healthy_food_score.services.ingredients import IngredientCandidateStore


@dataclass
class HttpxTaxonomyClient(IngredientCandidateStore):
    """HTTPX-backed candidate store."""

    base_url: str
    http_client: httpx.AsyncClient
    api_key: str | None = None
    top_k: int = 5
    timeout_seconds: float = 15

    @classmethod
    def create(
        cls, base_url: str, api_key: str | None = None
    ) -> "HttpxTaxonomyClient":
        """Create a taxonomy client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            api_key=api_key,
        )

    async def match(self, names: list[str]) -> list[MatchResult]:
        """Request ranked candidates for normalized names."""
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        response = await self.http_client.post(
            f"{self.base_url}/match",
            json={"names": names, "top_k": self.top_k},
            headers=headers,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        payload = response.json()
        return [_parse_result(item) for item in payload.get("results", [])]

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_result(item: dict[str, object]) -> MatchResult:
    """Parse one result entry, accepting ``name`` or ``normalized`` keys."""
    name = item.get("name") or item.get("normalized") or ""
    raw_candidates = item.get("candidates") or []
    candidates = tuple(
        _parse_candidate(candidate)
        for candidate in raw_candidates
        if isinstance(candidate, dict)
    )
    return MatchResult(name=str(name), candidates=candidates)


def _parse_candidate(row: dict[str, object]) -> IngredientCandidate:
    categories = row.get("categories") or []
    return IngredientCandidate(
        ingredient_id=int(row["ingredient_id"]),
        canonical_name=str(row.get("canonical_name", "")),
        match_method=str(row.get("match_method") or row.get("method") or "fuzzy"),
        score=float(row.get("score", 0.0)),
        is_whole=bool(row.get("is_whole", False)),
        categories=frozenset(str(category) for category in categories),
    )
