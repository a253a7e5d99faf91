"""Nutrient sanitization and serving/100 g conversions."""

import math
from collections.abc import Callable, Mapping
from dataclasses import replace

from healthy_food_score.domain.nutrients import (
    MASS_FIELDS,
    NutrientProfile,
    ServingContext,
)

# Nested label layout produced by the label parser: (section, key) -> field.
_PARSED_FIELDS: dict[tuple[str, str], str] = {
    ("carbohydrates", "sugars_total_g"): "sugars_total_g",
    ("carbohydrates", "sugars_added_g"): "sugars_added_g",
    ("fats", "saturated_fats_g"): "saturated_fat_g",
    ("fats", "trans_fats_g"): "trans_fat_g",
    ("minerals_mg", "sodium_mg"): "sodium_mg",
}

_SERVING_UNITS = {"g", "ml"}


def sanitize_value(value: object) -> float:
    """Coerce a raw nutrient value to a non-negative float.

    Missing, non-numeric, NaN, infinite and negative values become 0. This
    is the intended policy: every formula downstream treats absent data as
    absent signal.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def sanitize_nova(value: object) -> int:
    """Return NOVA as an int in 1..4, or 0 when absent or out of range."""
    number = sanitize_value(value)
    rounded = math.floor(number + 0.5)
    if 1 <= rounded <= 4:
        return rounded
    return 0


def sanitize_profile(raw: Mapping[str, object]) -> NutrientProfile:
    """Build a fully populated profile from loosely typed input."""
    values = {name: sanitize_value(raw.get(name)) for name in MASS_FIELDS}

    parsed = raw.get("nutrition_parsed")
    if isinstance(parsed, Mapping):
        for (section, key), name in _PARSED_FIELDS.items():
            group = parsed.get(section)
            if not isinstance(group, Mapping):
                continue
            nested = sanitize_value(group.get(key))
            if nested:
                values[name] = nested

    nova_raw = raw.get("nova", raw.get("NOVA"))
    return NutrientProfile(
        **values,
        abv_percentage=sanitize_value(raw.get("abv_percentage")),
        nova=sanitize_nova(nova_raw),
    )


def build_serving_context(
    serving_size: object = None,
    serving_unit: object = None,
    density: object = None,
) -> ServingContext:
    """Build a serving context, defaulting to 100 g at density 1."""
    size = sanitize_value(serving_size) or 100.0
    unit = str(serving_unit or "g").strip().lower()
    if unit not in _SERVING_UNITS:
        unit = "g"
    density_value = sanitize_value(density) or 1.0
    return ServingContext(
        serving_size=size,
        serving_unit=unit,
        density_g_per_ml=density_value,
    )


def to_canonical(
    declared: NutrientProfile,
    serving: ServingContext,
    precision: int | None = 2,
) -> NutrientProfile:
    """Convert per-serving values to per 100 g."""
    factor = serving.conversion_factor
    return _scale(declared, lambda value: value * factor, precision)


def from_canonical(
    per_100g: NutrientProfile,
    serving: ServingContext,
    precision: int | None = 2,
) -> NutrientProfile:
    """Convert per 100 g values back to the declared serving."""
    factor = serving.conversion_factor
    return _scale(per_100g, lambda value: value / factor, precision)


def natural_sugars_g(profile: NutrientProfile) -> float:
    """Sugars that were not declared as added."""
    return max(0.0, profile.sugars_total_g - profile.sugars_added_g)


def _scale(
    profile: NutrientProfile,
    convert: Callable[[float], float],
    precision: int | None,
) -> NutrientProfile:
    """Apply ``convert`` to every mass field, optionally rounding."""
    changes: dict[str, float] = {}
    for name in MASS_FIELDS:
        converted = convert(getattr(profile, name))
        if precision is not None:
            converted = _round_half_up(converted, precision)
        changes[name] = converted
    return replace(profile, **changes)


def _round_half_up(value: float, precision: int) -> float:
    """Round like label calculators do, halves away from zero."""
    scale = 10**precision
    return math.floor(value * scale + 0.5) / scale
