"""Nutrient domain models."""

from dataclasses import dataclass

MASS_FIELDS: tuple[str, ...] = (
    "energy_kcal",
    "carbs_total_g",
    "sugars_total_g",
    "sugars_added_g",
    "fiber_g",
    "protein_g",
    "fat_total_g",
    "saturated_fat_g",
    "trans_fat_g",
    "sodium_mg",
)


@dataclass(frozen=True)
class NutrientProfile:
    """Sanitized nutrient values, per 100 g inside the engines.

    ``abv_percentage`` and ``nova`` are intensive values and are never
    scaled between serving and 100 g bases.
    """

    energy_kcal: float = 0.0
    carbs_total_g: float = 0.0
    sugars_total_g: float = 0.0
    sugars_added_g: float = 0.0
    fiber_g: float = 0.0
    protein_g: float = 0.0
    fat_total_g: float = 0.0
    saturated_fat_g: float = 0.0
    trans_fat_g: float = 0.0
    sodium_mg: float = 0.0
    abv_percentage: float = 0.0
    nova: int = 0

    @property
    def is_empty(self) -> bool:
        """Return True when no mass or energy value is present."""
        return all(getattr(self, name) == 0 for name in MASS_FIELDS)


@dataclass(frozen=True)
class ServingContext:
    """Serving size declared on the label."""

    serving_size: float = 100.0
    serving_unit: str = "g"
    density_g_per_ml: float = 1.0

    @property
    def is_liquid(self) -> bool:
        return self.serving_unit.lower() == "ml"

    @property
    def serving_size_g(self) -> float:
        """Serving size expressed in grams."""
        if self.is_liquid and self.density_g_per_ml > 0:
            return self.serving_size * self.density_g_per_ml
        return self.serving_size

    @property
    def serving_volume_ml(self) -> float:
        """Serving size expressed in millilitres."""
        if self.is_liquid:
            return self.serving_size
        if self.density_g_per_ml > 0:
            return self.serving_size / self.density_g_per_ml
        return self.serving_size

    @property
    def conversion_factor(self) -> float:
        """Factor turning per-serving values into per-100 g values."""
        grams = self.serving_size_g
        if grams > 0:
            return 100 / grams
        return 1.0
