"""Additive domain models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AdditiveRule:
    """Named regex pattern flagging an additive inside ingredient text."""

    name: str
    category: str
    weight: float
    regex: str


@dataclass(frozen=True)
class AdditiveDetection:
    """Additives detected in an ingredient list."""

    detected: tuple[str, ...] = ()
    contribution: float = 0.0
    invalid_rules: tuple[str, ...] = field(default=())

    @property
    def count(self) -> int:
        return len(self.detected)
