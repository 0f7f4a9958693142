"""Deterministic random source for TTK simulations.

Every stochastic step in the engine (hit sampling, recoil wobble, drift cap
noise) draws from a single seedable generator so that an evaluation can be
reproduced exactly from its seed.
"""

import math
import os
from typing import Optional

MASK_32 = 0xFFFFFFFF
UINT32_RANGE = 4294967296.0
MULBERRY_INCREMENT = 0x6D2B79F5


class RNG:
    """Mulberry32 generator with uniform and standard-normal draws.

    All arithmetic is masked to 32 bits so a given seed produces the same
    sequence on every platform.

    Gaussian draws use the polar rejection method. Each accepted pair yields
    two independent normals: the first is returned immediately and the
    second is held in ``spare`` until the next ``gauss()`` call.
    """

    def __init__(self, seed: Optional[int] = None):
        if seed is None:
            seed = int.from_bytes(os.urandom(4), "little")
        self.seed = seed & MASK_32
        self._state = self.seed
        self.has_spare = False
        self.spare = 0.0

    def _next_u32(self) -> int:
        self._state = (self._state + MULBERRY_INCREMENT) & MASK_32
        s = self._state
        t = ((s ^ (s >> 15)) * (1 | s)) & MASK_32
        t = (t ^ ((t + ((t ^ (t >> 7)) * (61 | t))) & MASK_32)) & MASK_32
        return (t ^ (t >> 14)) & MASK_32

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._next_u32() / UINT32_RANGE

    def gauss(self) -> float:
        """Standard normal draw N(0, 1)."""
        if self.has_spare:
            self.has_spare = False
            return self.spare

        while True:
            u = 2.0 * self.random() - 1.0
            v = 2.0 * self.random() - 1.0
            r = u * u + v * v
            if 0.0 < r < 1.0:
                break

        f = math.sqrt(-2.0 * math.log(r) / r)
        self.spare = v * f
        self.has_spare = True
        return u * f

    # Aliases
    next_uniform = random
    next_gaussian = gauss


def hash_seed(key: str) -> int:
    """Derive a 32-bit seed from a free-form key.

    Classic ``h = h * 31 + c`` string hash over UTF-16 code units, wrapped
    to a signed 32-bit integer after every step. The absolute value is
    returned, so the result lies in [0, 2**31].
    """
    h = 0
    encoded = key.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h << 5) - h + code_unit) & MASK_32
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def seed_key(weapon_name: str, distance: float, skill_deg: float) -> str:
    """Stable cache/seed key for one (weapon, distance, skill) evaluation.

    Skill is rounded to two decimals so nearby slider positions share a key.
    """
    return f"{weapon_name}-{_format_number(distance)}-{skill_deg:.2f}"


def rng_for(weapon_name: str, distance: float, skill_deg: float) -> RNG:
    """Seeded generator for one (weapon, distance, skill) evaluation."""
    return RNG(hash_seed(seed_key(weapon_name, distance, skill_deg)))
