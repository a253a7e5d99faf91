"""Errors raised by score computation."""


class ScoreValidationError(ValueError):
    """Input is insufficient to compute a score."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages


class FoodNotFoundError(LookupError):
    """No stored food matches the requested id."""

    def __init__(self, food_id: str) -> None:
        super().__init__(f"Food not found: {food_id}")
        self.food_id = food_id
