"""Supabase repository for stored food scores."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from healthy_food_score.domain.scores import ScoreRecord
from healthy_food_score.services.food_scores import FoodScoreRepository


@dataclass
class SupabaseFoodScoreRepository(FoodScoreRepository):
    """Reads and writes the ``hfs_score`` JSON column of ``foods``."""

    client: Client

    def get_score_record(self, food_id: str) -> ScoreRecord | None:
        """Return the stored record, or None when the food is unknown."""
        response = (
            self.client.table("foods")
            .select("id, hfs_score")
            .eq("id", food_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        payload = response.data[0].get("hfs_score")
        return ScoreRecord.from_json(payload if isinstance(payload, dict) else None)

    def save_score_record(
        self, food_id: str, record: ScoreRecord, numeric_score: float
    ) -> None:
        """Store the merged record and the headline score."""
        response = (
            self.client.table("foods")
            .update(
                {
                    "hfs_score": record.to_json(),
                    "hfs": numeric_score,
                    "last_update": datetime.now(tz=UTC).isoformat(),
                }
            )
            .eq("id", food_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food score")
