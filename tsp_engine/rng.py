# rng.py
# Per-solve random sources for the Random construction strategy.
# A seeded solve uses a 32-bit linear congruential generator so that a given
# seed always reproduces the same shuffle; an unseeded solve draws from the OS.

from __future__ import annotations
import random
from typing import Optional, Union

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32


class LcgRandom:
    """Linear congruential generator: state = (state * a + c) mod 2^32.

    ``random()`` advances the state once and returns ``state / 2^32``, a float
    in ``[0, 1)``. The seed is reduced modulo 2^32 (negative seeds wrap).
    """

    def __init__(self, seed: int):
        self.state = int(seed) % LCG_MODULUS

    def random(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS


RandomSource = Union[LcgRandom, random.Random]


def make_rng(seed: Optional[int] = None) -> RandomSource:
    # fresh generator per call; never share one between solves
    if seed is None:
        return random.Random()
    return LcgRandom(seed)
