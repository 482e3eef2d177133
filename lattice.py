# lattice.py
"""
Deterministic 2D simplex noise used to steer particles.

This module defines the SimplexNoise class, which owns a fixed
permutation lattice and samples a smooth scalar field from it. A single
instance is built once at startup and handed to every generation run, so
every field generated in a process shares the same noise function.
"""
import logging
import math
from typing import Optional, Protocol

import numpy as np
from numba import jit

from constants import (
    GRADIENTS_2D, PERMUTATION_SIZE, SIMPLEX_F2, SIMPLEX_G2, SIMPLEX_SCALE
)

# --- Data Contracts ---
#
# class NoiseSource (Protocol):
#   - sample(self, x: float, y: float) -> float
#     - Any object with this method can drive the integrator. Tests use
#       this to substitute a fixed noise function.
#
# class SimplexNoise:
#   - __init__(self, seed: Optional[int] = None):
#     - Inputs:
#       - seed: seed for the lattice permutation. None draws fresh OS
#         entropy, so the lattice differs between processes.
#     - Side Effects: Builds read-only lattice arrays. There is no way to
#       reseed an existing instance.
#
#   - sample(self, x: float, y: float) -> float:
#     - Outputs: noise value in [-1, 1]; NaN for non-finite input.
#     - Invariants: Pure. Identical inputs give identical outputs for the
#       lifetime of the instance. Safe to call from several threads.


class NoiseSource(Protocol):
    def sample(self, x: float, y: float) -> float:
        ...


@jit(nopython=True)
def _simplex_2d_numba(x, y, perm, perm_grad_x, perm_grad_y):
    """
    Numba-jitted 2D simplex noise for a single coordinate pair.

    The lattice arrays are 512 entries long (the 256-entry permutation
    repeated), so corner lookups never need a second wrap.
    """
    if not (math.isfinite(x) and math.isfinite(y)):
        return np.nan

    # Skew the input space to find the simplex cell
    s = (x + y) * SIMPLEX_F2
    i = math.floor(x + s)
    j = math.floor(y + s)

    # Unskew the cell origin back to (x, y) space
    t = (i + j) * SIMPLEX_G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    # Lower or upper triangle of the cell
    if x0 > y0:
        i1 = 1
        j1 = 0
    else:
        i1 = 0
        j1 = 1

    x1 = x0 - i1 + SIMPLEX_G2
    y1 = y0 - j1 + SIMPLEX_G2
    x2 = x0 - 1.0 + 2.0 * SIMPLEX_G2
    y2 = y0 - 1.0 + 2.0 * SIMPLEX_G2

    ii = int(i) & 255
    jj = int(j) & 255

    n0 = 0.0
    t0 = 0.5 - x0 * x0 - y0 * y0
    if t0 >= 0.0:
        gi0 = ii + perm[jj]
        t0 *= t0
        n0 = t0 * t0 * (perm_grad_x[gi0] * x0 + perm_grad_y[gi0] * y0)

    n1 = 0.0
    t1 = 0.5 - x1 * x1 - y1 * y1
    if t1 >= 0.0:
        gi1 = ii + i1 + perm[jj + j1]
        t1 *= t1
        n1 = t1 * t1 * (perm_grad_x[gi1] * x1 + perm_grad_y[gi1] * y1)

    n2 = 0.0
    t2 = 0.5 - x2 * x2 - y2 * y2
    if t2 >= 0.0:
        gi2 = ii + 1 + perm[jj + 1]
        t2 *= t2
        n2 = t2 * t2 * (perm_grad_x[gi2] * x2 + perm_grad_y[gi2] * y2)

    return SIMPLEX_SCALE * (n0 + n1 + n2)


class SimplexNoise:
    """
    A fixed simplex noise lattice. Build it once and share it.
    """
    def __init__(self, seed: Optional[int] = None):
        """
        Initializes the permutation lattice.

        Args:
            seed (Optional[int]): Lattice seed. None self-seeds.
        """
        self.seed = seed
        rng = np.random.default_rng(seed)
        permutation = rng.permutation(PERMUTATION_SIZE)

        perm = np.concatenate([permutation, permutation]).astype(np.int64)
        gradients = np.array(GRADIENTS_2D, dtype=np.float64)
        lookup = gradients[perm % len(GRADIENTS_2D)]

        self._perm = perm
        self._perm_grad_x = np.ascontiguousarray(lookup[:, 0])
        self._perm_grad_y = np.ascontiguousarray(lookup[:, 1])

        # The lattice is shared by every generation run; nothing may write to it.
        for arr in (self._perm, self._perm_grad_x, self._perm_grad_y):
            arr.setflags(write=False)

        logging.info(
            f"SimplexNoise initialized "
            f"({'seed ' + str(seed) if seed is not None else 'self-seeded'})."
        )

    def sample(self, x: float, y: float) -> float:
        return float(_simplex_2d_numba(
            float(x), float(y), self._perm, self._perm_grad_x, self._perm_grad_y
        ))
