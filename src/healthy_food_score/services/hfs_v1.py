"""Sigmoid benefit/risk Healthy Food Score (v1)."""

from dataclasses import dataclass

from healthy_food_score.domain.nutrients import NutrientProfile, ServingContext
from healthy_food_score.domain.scores import V1Scores
from healthy_food_score.services.saturation import logistic, saturate

ETHANOL_DENSITY_G_PER_ML = 0.789
CALIBRATION_OFFSET = 0.174

# Weights of each term inside the metabolic noisy-OR.
_METABOLIC_WEIGHTS = {
    "energy": 0.35,
    "carbs": 0.45,
    "fat": 0.35,
    "sodium": 0.30,
    "alcohol": 0.60,
}
_SAT_FAT_DISCOUNT = 0.25
_FIBER_PROTECTION = 0.15

_NOVA_PROCESSING = {0: 0.0, 1: 0.0, 2: 0.25, 3: 0.60, 4: 1.0}


@dataclass(frozen=True)
class _Derived:
    net_carbs: float
    ethanol_g: float
    non_water_mass: float
    water_eq: float
    carb_fiber_ratio: float


def _derive(profile: NutrientProfile, serving: ServingContext) -> _Derived:
    net_carbs = max(0.0, profile.carbs_total_g - profile.fiber_g)
    ethanol_g = 0.0
    if serving.is_liquid:
        ethanol_g = (
            ETHANOL_DENSITY_G_PER_ML
            * (profile.abv_percentage / 100)
            * serving.serving_volume_ml
        )
    non_water_mass = (
        profile.carbs_total_g
        + profile.protein_g
        + profile.fat_total_g
        + profile.fiber_g
    )
    return _Derived(
        net_carbs=net_carbs,
        ethanol_g=ethanol_g,
        non_water_mass=non_water_mass,
        water_eq=max(0.0, serving.serving_size_g - non_water_mass),
        carb_fiber_ratio=profile.carbs_total_g / (profile.fiber_g + 1),
    )


def _benefits(
    profile: NutrientProfile, derived: _Derived
) -> tuple[float, float, float]:
    """Return (dose_relevance, hydration_benefit, benefits)."""
    if profile.is_empty:
        return 0.0, 0.0, 0.0
    dose_relevance = saturate(derived.non_water_mass, 10)
    hydration = (
        saturate(derived.water_eq, 140)
        * (1 - saturate(derived.net_carbs, 25))
        * (1 - saturate(profile.abv_percentage, 2))
    )
    nutrients = 0.40 * saturate(profile.fiber_g, 5) + 0.35 * saturate(
        profile.protein_g, 10
    )
    return dose_relevance, hydration, dose_relevance * nutrients + 0.25 * hydration


def _metabolic_risk(profile: NutrientProfile, derived: _Derived) -> float:
    carb_stress = max(
        saturate(profile.sugars_added_g, 12),
        0.5 * saturate(derived.carb_fiber_ratio, 8),
        0.3 * saturate(derived.net_carbs, 20),
    )
    sat_fat = saturate(profile.saturated_fat_g, 10)
    sat_fat_counts = (
        profile.fiber_g < 3 or derived.carb_fiber_ratio > 8 or profile.nova >= 3
    )
    if not sat_fat_counts:
        sat_fat *= _SAT_FAT_DISCOUNT
    fat = 0.75 * sat_fat + 0.25 * saturate(profile.trans_fat_g, 0.5)

    terms = {
        "energy": saturate(profile.energy_kcal, 300),
        "carbs": carb_stress,
        "fat": fat,
        "sodium": saturate(profile.sodium_mg, 600),
        "alcohol": saturate(derived.ethanol_g, 14),
    }
    survival = 1.0
    for name, term in terms.items():
        survival *= 1 - _METABOLIC_WEIGHTS[name] * term
    combined = 1 - survival
    return combined * (1 - _FIBER_PROTECTION * saturate(profile.fiber_g, 5))


def _processing_risk(profile: NutrientProfile, ingredient_count: int) -> float:
    ingredients = saturate(max(0, ingredient_count - 1), 10)
    nova = _NOVA_PROCESSING.get(profile.nova, 0.0)
    return 1 - (1 - 0.5 * ingredients) * (1 - 0.5 * nova * ingredients)


def _behavioral_risk(
    profile: NutrientProfile, serving: ServingContext, derived: _Derived
) -> float:
    if not serving.is_liquid:
        return 0.0
    sodium_per_100ml = profile.sodium_mg * serving.density_g_per_ml
    return saturate(max(0.0, derived.net_carbs - 5), 10) * saturate(
        sodium_per_100ml, 50
    )


def _red_flag_risk(profile: NutrientProfile, derived: _Derived) -> float:
    """Largest single extreme; flags do not average out."""
    return max(
        saturate(max(0.0, profile.trans_fat_g - 0.5), 1),
        saturate(max(0.0, profile.saturated_fat_g - 10), 10),
        saturate(max(0.0, profile.sodium_mg - 1000), 1000),
        saturate(max(0.0, profile.sugars_added_g - 22.5), 20),
        saturate(max(0.0, profile.sugars_total_g - 30), 30),
        saturate(max(0.0, derived.ethanol_g - 28), 14),
    )


def compute_v1(
    profile: NutrientProfile,
    serving: ServingContext | None = None,
    ingredient_count: int = 0,
) -> V1Scores:
    """Score a per-100 g profile on the 0-100 sigmoid scale."""
    serving = serving or ServingContext()
    derived = _derive(profile, serving)
    dose_relevance, hydration, benefits = _benefits(profile, derived)

    metabolic = _metabolic_risk(profile, derived)
    processing = _processing_risk(profile, ingredient_count)
    behavioral = _behavioral_risk(profile, serving, derived)
    red_flag = _red_flag_risk(profile, derived)

    risk_core = 1 - (
        (1 - 0.60 * metabolic) * (1 - 0.30 * processing) * (1 - 0.15 * behavioral)
    )
    total_risk = 1 - (1 - risk_core) * (1 - 0.50 * red_flag)
    raw_score = 0.30 * benefits - 0.70 * total_risk + CALIBRATION_OFFSET
    hfs = 100 * logistic(4 * raw_score)

    return V1Scores(
        net_carbs=round(derived.net_carbs, 3),
        ethanol_g=round(derived.ethanol_g, 3),
        non_water_mass=round(derived.non_water_mass, 3),
        water_eq=round(derived.water_eq, 3),
        dose_relevance=round(dose_relevance, 3),
        hydration_benefit=round(hydration, 3),
        benefits=round(benefits, 3),
        metabolic_risk=round(metabolic, 3),
        processing_risk=round(processing, 3),
        behavioral_risk=round(behavioral, 3),
        red_flag_risk=round(red_flag, 3),
        risk_core=round(risk_core, 3),
        total_risk=round(total_risk, 3),
        raw_score=round(raw_score, 3),
        HFS=round(hfs, 3),
    )
