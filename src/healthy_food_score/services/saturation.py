"""Saturation-curve primitives shared by the score models."""

import math

POSITION_DECAY = 0.25


def saturate(x: float, k: float) -> float:
    """Michaelis-Menten saturation ``x / (x + k)``.

    Negative inputs count as an absent signal. With ``k == 0`` the curve
    degenerates to a step at zero.
    """
    if k == 0:
        return 1.0 if x > 0 else 0.0
    if x < 0:
        return 0.0
    return x / (x + k)


def positional_weight(j: int, n: int) -> float:
    """Normalized exponential weight of 1-based position ``j`` among ``n``."""
    if n <= 0 or j < 1 or j > n:
        return 0.0
    total = sum(math.exp(-POSITION_DECAY * i) for i in range(n))
    return math.exp(-POSITION_DECAY * (j - 1)) / total


def positional_weights(n: int) -> list[float]:
    """Return the weights of every position in a list of ``n`` items."""
    if n <= 0:
        return []
    raw = [math.exp(-POSITION_DECAY * i) for i in range(n)]
    total = sum(raw)
    return [value / total for value in raw]


def logistic(z: float) -> float:
    """Standard logistic function."""
    if z >= 0:
        return 1 / (1 + math.exp(-z))
    exp_z = math.exp(z)
    return exp_z / (1 + exp_z)
