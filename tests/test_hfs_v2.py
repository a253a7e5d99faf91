"""Tests for the saturation-curve v2 benefit model."""

import math

import pytest

from healthy_food_score.domain.additives import AdditiveDetection
from healthy_food_score.domain.ingredients import (
    CONCENTRATED_PROTEIN,
    MatchReport,
    MatchResult,
)
from healthy_food_score.domain.nutrients import NutrientProfile
from healthy_food_score.services.hfs_v2 import (
    BENEFIT_WEIGHTS,
    compute_v2,
    protein_factor,
    whole_ingredient_score,
)
from healthy_food_score.services.ingredients import build_match_report
from tests.conftest import candidate

ISOLATE = candidate(4, "proteina", 0.99, categories=frozenset({CONCENTRATED_PROTEIN}))


def test_benefit_weights_sum_to_one() -> None:
    assert sum(BENEFIT_WEIGHTS.values()) == pytest.approx(1.0)


def test_empty_profile_has_zero_benefit() -> None:
    scores = compute_v2(NutrientProfile())

    assert scores.B_nutr == 0
    assert scores.hydration == 0
    assert scores.net_carb_benefit == 0
    assert scores.hfs_score is None


def test_protein_factor_discounts_leading_isolates() -> None:
    first = math.exp(0) / (math.exp(0) + math.exp(-0.25))

    assert protein_factor([]) == 1.0
    assert protein_factor([False, False]) == 1.0
    assert protein_factor([True, False]) == pytest.approx(1 - 0.5 * first)
    assert protein_factor([True]) == pytest.approx(0.5)


def test_whole_ingredient_score_saturates() -> None:
    assert whole_ingredient_score([]) == 0.0
    assert whole_ingredient_score([True]) == pytest.approx(1 / 1.5)


def test_protein_constant_depends_on_serving_knowledge() -> None:
    profile = NutrientProfile(energy_kcal=100, protein_g=12)

    known = compute_v2(profile, serving_known=True)
    unknown = compute_v2(profile)

    assert known.protein_raw == pytest.approx(0.5)
    assert unknown.protein_raw == pytest.approx(12 / 22, abs=1e-3)


def test_matches_feed_protein_and_whole_terms() -> None:
    report = build_match_report(
        ["Proteína isolada de soja", "aveia"],
        [
            MatchResult(
                name="proteina_isolada_de_soja",
                candidates=(ISOLATE,),
            ),
            MatchResult(name="aveia", candidates=(candidate(1, "aveia", 1.0, True),)),
        ],
    )
    profile = NutrientProfile(energy_kcal=380, protein_g=30, fiber_g=8)

    scores = compute_v2(profile, matches=report)

    assert scores.protein_factor < 1
    assert scores.protein == pytest.approx(
        scores.protein_raw * scores.protein_factor, abs=2e-3
    )
    assert scores.whole_ingredients > 0


def test_risk_signals_are_reported() -> None:
    profile = NutrientProfile(
        energy_kcal=350, carbs_total_g=40, fiber_g=4, trans_fat_g=0.1, sodium_mg=400
    )
    additives = AdditiveDetection(detected=("corante",), contribution=0.8)

    scores = compute_v2(profile, MatchReport(), additives)

    assert scores.S_trans_fat == pytest.approx(0.5)
    assert scores.S_sodium == pytest.approx(0.5)
    assert scores.S_energy_density == pytest.approx(0.5)
    assert scores.S_carb_fiber_ratio == pytest.approx(10 / 18, abs=1e-3)
    assert scores.additive_contribution == pytest.approx(0.8)
    assert scores.additives == pytest.approx(0.8 / 1.05, abs=1e-3)
    assert scores.detected_additives == ["corante"]


def test_benefit_index_is_bounded() -> None:
    rich = NutrientProfile(energy_kcal=50, protein_g=80, fiber_g=80)

    scores = compute_v2(rich)

    assert 0 <= scores.B_nutr <= 1
