"""Point-based Healthy Food Score, the first v1 generation.

Only used to recompute or read back scores stored before the sigmoid model
replaced it. Every sub-score is on a 0-100 scale.
"""

import math

from healthy_food_score.domain.nutrients import NutrientProfile
from healthy_food_score.domain.scores import LegacyV1Scores
from healthy_food_score.services.normalizer import natural_sugars_g

NOVA_SCORES = {1: 100.0, 2: 85.0, 3: 60.0, 4: 25.0}


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(min(value, high), low)


def nova_score(nova: int) -> float | None:
    """Map a NOVA class to S7, or None when the class is unknown."""
    return NOVA_SCORES.get(nova)


def compute_v1_legacy(
    profile: NutrientProfile, additive_count: int = 0
) -> LegacyV1Scores:
    """Compute S1-S8 and the composite from a per-100 g profile."""
    s1a = profile.sugars_added_g
    s1b = natural_sugars_g(profile)
    s2 = profile.fiber_g
    s3a = profile.saturated_fat_g
    s3b = profile.trans_fat_g
    s4 = profile.energy_kcal
    s5 = profile.protein_g
    s6 = profile.sodium_mg
    s8 = max(0, additive_count)

    sugars = s1a + s1b
    sugar_fiber_ratio = sugars / max(min(s2, 4), 0.5)
    S1 = _clamp(
        100
        - 4 * s1a
        - 2.5 * max(sugars - s2, 0)
        - 4 * max(sugar_fiber_ratio - 4, 0)
    )
    S2 = min(100 * (s2 / 8) ** 0.454, 100) if s2 > 0 else 0.0
    s3 = s3a + 10 * s3b
    S3 = max(100 - 2 * s3 / (1 + 0.5 * min(s2 / 8, 0.75)), 0)
    S4 = ((0.6 + 0.4 * min(1, s2 / 8)) * 100) / (1 + (s4 / 250) ** 1.3)
    S5 = min(100 * (1 - math.exp(-s5 / 8)), 100)
    S6 = _clamp(113.85 - 0.1154 * s6)
    S7 = nova_score(profile.nova)
    S8 = max(0, 100 - 12 * min(s8, 6))

    N = (20 * S1 + 15 * S2 + 20 * S3 + 15 * S4 + 10 * S5 + 10 * S6) / 90
    M = _clamp(100 - 0.25 * s4 - 2.5 * s1a - 0.02 * s6)
    P = 0.85 + 0.15 * min(S1, S3, S4, S6) / 100
    R = 0.7 + 0.3 * ((0.7 * (S7 or 0) + 0.3 * S8) / 100)
    hfs = 0.6 * M * P * R + 0.4 * N

    return LegacyV1Scores(
        s1a=round(s1a, 3),
        s1b=round(s1b, 3),
        s2=round(s2, 3),
        s3a=round(s3a, 3),
        s3b=round(s3b, 3),
        s4=round(s4, 3),
        s5=round(s5, 3),
        s6=round(s6, 3),
        s7=profile.nova,
        s8=s8,
        S1=round(S1, 3),
        S2=round(S2, 3),
        s3=round(s3, 3),
        S3=round(S3, 3),
        S4=round(S4, 3),
        S5=round(S5, 3),
        S6=round(S6, 3),
        S7=round(S7, 3) if S7 is not None else None,
        S8=round(S8, 3),
        N=round(N, 3),
        M=round(M, 3),
        P=round(P, 3),
        R=round(R, 3),
        HFSv1=round(hfs, 3),
    )
