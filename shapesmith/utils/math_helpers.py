"""Math helpers: seeded LCG, hash noise, fractal noise. No engine imports."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Numerical Recipes LCG constants, modulus 2^32
LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2**32


def lcg_step(state: int) -> tuple[int, float]:
    """Advance the generator once. Returns (new_state, draw in [0, 1))."""
    state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
    return state, state / LCG_MODULUS


@dataclass
class Lcg:
    """Explicit-state linear congruential generator.

    Each instance owns its state; nothing global is touched, so the same seed
    always replays the same sequence.
    """

    state: int

    def __post_init__(self) -> None:
        self.state = int(self.state) % LCG_MODULUS

    def next(self) -> float:
        self.state, draw = lcg_step(self.state)
        return draw

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.next()


def hash_noise(x: float, y: float) -> float:
    """Single-sample hash noise in [-1, 1).

    Deterministic but not continuous; callers pre-scale coordinates into a
    small frequency domain.
    """
    n = math.sin(x * 12.9898 + y * 78.233) * 43758.5453123
    return (n - math.floor(n)) * 2 - 1


def fractal_noise(x: float, y: float, octaves: int, seed: float) -> float:
    """Sum ``octaves`` of hash noise, halving amplitude and doubling frequency.

    Normalized by the total amplitude, so the result stays in [-1, 1].
    """
    value = 0.0
    amplitude = 1.0
    frequency = 1.0
    max_value = 0.0

    for _ in range(octaves):
        value += hash_noise(x * frequency + seed, y * frequency + seed) * amplitude
        max_value += amplitude
        amplitude *= 0.5
        frequency *= 2

    if max_value == 0:
        return 0.0
    return value / max_value
