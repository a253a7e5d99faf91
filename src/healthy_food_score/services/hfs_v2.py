"""Saturation-curve benefit model (v2).

Produces ``B_nutr``, a 0-1 nutritional benefit index, plus risk signals that
are reported as they are. No risk-adjusted composite is derived from them.
"""

from healthy_food_score.domain.additives import AdditiveDetection
from healthy_food_score.domain.ingredients import MatchReport
from healthy_food_score.domain.nutrients import NutrientProfile
from healthy_food_score.domain.scores import V2Scores
from healthy_food_score.services.saturation import positional_weights, saturate

BENEFIT_WEIGHTS = {
    "fiber": 0.27,
    "protein": 0.23,
    "net_carb_benefit": 0.18,
    "energy_benefit": 0.12,
    "whole_ingredients": 0.10,
    "hydration": 0.10,
}
MAX_CONCENTRATED_PROTEIN_DISCOUNT = 0.5


def protein_factor(concentrated: list[bool]) -> float:
    """Discount for protein coming from isolates and concentrates."""
    weights = positional_weights(len(concentrated))
    share = sum(w for w, flag in zip(weights, concentrated, strict=True) if flag)
    return 1 - MAX_CONCENTRATED_PROTEIN_DISCOUNT * share


def whole_ingredient_score(whole: list[bool]) -> float:
    """Saturated share of label mass attributed to whole ingredients."""
    weights = positional_weights(len(whole))
    share = sum(w for w, flag in zip(weights, whole, strict=True) if flag)
    return saturate(share, 0.5)


def compute_v2(
    profile: NutrientProfile,
    matches: MatchReport | None = None,
    additives: AdditiveDetection | None = None,
    serving_known: bool = False,
) -> V2Scores:
    """Score a per-100 g profile with matched ingredients."""
    matches = matches or MatchReport()
    additives = additives or AdditiveDetection()

    net_carbs = max(0.0, profile.carbs_total_g - profile.fiber_g)
    non_water_mass = (
        profile.carbs_total_g
        + profile.protein_g
        + profile.fat_total_g
        + profile.fiber_g
    )
    water_eq = max(0.0, 100 - non_water_mass)

    fiber = saturate(profile.fiber_g, 5)
    protein_raw = saturate(profile.protein_g, 12 if serving_known else 10)
    factor = protein_factor(matches.concentrated_protein_flags())
    protein = protein_raw * factor
    whole = whole_ingredient_score(matches.whole_flags())

    # Absence-based terms only mean something once a food has been described.
    if profile.is_empty:
        net_carb_benefit = energy_benefit = hydration = 0.0
    else:
        net_carb_benefit = 1 - saturate(net_carbs, 20)
        energy_benefit = 1 - saturate(profile.energy_kcal, 250)
        hydration = (
            saturate(water_eq, 70)
            * (1 - saturate(net_carbs, 25))
            * (1 - saturate(profile.abv_percentage, 2))
        )

    terms = {
        "fiber": fiber,
        "protein": protein,
        "net_carb_benefit": net_carb_benefit,
        "energy_benefit": energy_benefit,
        "whole_ingredients": whole,
        "hydration": hydration,
    }
    b_nutr = sum(BENEFIT_WEIGHTS[name] * value for name, value in terms.items())

    return V2Scores(
        fiber=round(fiber, 3),
        protein_raw=round(protein_raw, 3),
        protein_factor=round(factor, 3),
        protein=round(protein, 3),
        net_carb_benefit=round(net_carb_benefit, 3),
        energy_benefit=round(energy_benefit, 3),
        hydration=round(hydration, 3),
        whole_ingredients=round(whole, 3),
        B_nutr=round(b_nutr, 3),
        S_net_carbs=round(saturate(net_carbs + 0.5 * profile.sugars_added_g, 25), 3),
        S_carb_fiber_ratio=round(
            saturate(profile.carbs_total_g / max(profile.fiber_g, 1), 8), 3
        ),
        S_trans_fat=round(saturate(profile.trans_fat_g, 0.10), 3),
        S_sodium=round(saturate(profile.sodium_mg, 400), 3),
        S_energy_density=round(saturate(profile.energy_kcal, 350), 3),
        additive_contribution=round(additives.contribution, 3),
        additives=round(saturate(additives.contribution, 0.25), 3),
        detected_additives=list(additives.detected),
    )
