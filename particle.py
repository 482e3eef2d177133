# particle.py
"""
Particle state, the bounding rectangle, and initial particle placement.

This module defines the immutable Particle record that the integrator
advances, the Bounds rectangle derived from (width, height, margin), and
seed_particles(), which places particles uniformly at random inside that
rectangle using a seedable NumPy generator.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

# --- Data Contracts ---
#
# class Particle (frozen):
#   - x, y: current position. vx, vy: current velocity.
#   - line: tuple of (x, y) points visited so far, oldest first.
#   - Invariants: never mutated. Integration produces new instances.
#
# class Bounds (frozen):
#   - from_dimensions(width, height, margin) -> Bounds
#     - Insets each side by margin * dimension. No validation; a margin of
#       0.5 or more gives an empty (or inverted) rectangle.
#   - contains(x, y) -> bool: strict inequality on all four sides.
#
# seed_particles(count, width, height, margin, seed=None) -> List[Particle]:
#   - Outputs: exactly max(count, 0) particles at rest with empty lines.
#   - Invariants:
#     - Positions lie strictly inside the bounds whenever the bounds are
#       non-degenerate.
#     - The same arguments with a non-None seed give identical positions.
#     - Draws are sequential: x then y for particle 0, then particle 1...
#
# filter_line(line, bounds) -> Tuple[Point, ...]:
#   - Outputs: the order-preserving subsequence of points inside bounds.
#     Points are tested one at a time, so a line leaving and re-entering
#     the rectangle comes back in disconnected pieces.


@dataclass(frozen=True)
class Particle:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    line: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class Bounds:
    min_width: float
    max_width: float
    min_height: float
    max_height: float

    @classmethod
    def from_dimensions(cls, width: float, height: float, margin: float) -> "Bounds":
        margin_width = width * margin
        margin_height = height * margin
        return cls(
            min_width=margin_width,
            max_width=width - margin_width,
            min_height=margin_height,
            max_height=height - margin_height,
        )

    def contains(self, x: float, y: float) -> bool:
        return (
            self.min_width < x < self.max_width
            and self.min_height < y < self.max_height
        )

    @property
    def is_degenerate(self) -> bool:
        """True when no point can satisfy contains()."""
        return not (self.min_width < self.max_width and self.min_height < self.max_height)


def _open_uniform(rng: np.random.Generator, low: np.ndarray, high: np.ndarray, size) -> np.ndarray:
    """
    Uniform draws on the open box (low, high).

    Drawn as low + (high - low) * u with u in [0, 1), so an inverted axis
    (low > high) is sampled backwards rather than rejected. On open axes,
    samples landing on either endpoint are redrawn. Degenerate axes
    (low >= high) are returned as drawn.
    """
    span = high - low
    samples = low + span * rng.random(size)
    open_axes = low < high
    while True:
        on_edge = ((samples <= low) | (samples >= high)) & open_axes
        if not on_edge.any():
            return samples
        # Only the offending entries are redrawn, in array order.
        rows, cols = np.nonzero(on_edge)
        samples[rows, cols] = low[cols] + span[cols] * rng.random(len(cols))


def seed_particles(
    count: int,
    width: float,
    height: float,
    margin: float,
    seed: Optional[int] = None,
) -> List[Particle]:
    """
    Places `count` particles uniformly inside the margin-inset rectangle.

    Args:
        count (int): Number of particles. Zero or less yields none.
        width (float): Width of the space.
        height (float): Height of the space.
        margin (float): Fractional inset applied to each side.
        seed (Optional[int]): RNG seed. None self-seeds and is not
            reproducible.

    Returns:
        List[Particle]: Particles at rest with empty lines.
    """
    count = max(int(count), 0)
    bounds = Bounds.from_dimensions(width, height, margin)
    if bounds.is_degenerate:
        logging.warning(
            f"Seeding into a degenerate rectangle {bounds}; "
            f"no trajectory point can survive the bounds filter."
        )

    rng = np.random.default_rng(seed)
    low = np.array([bounds.min_width, bounds.min_height], dtype=np.float64)
    high = np.array([bounds.max_width, bounds.max_height], dtype=np.float64)

    # Row-major draw: x0, y0, x1, y1, ...
    positions = _open_uniform(rng, low, high, size=(count, 2))

    particles = [Particle(x=float(x), y=float(y)) for x, y in positions]

    logging.info(f"Seeded {count} particles (seed={seed}).")
    logging.debug(f"Seeding rectangle: {bounds}")
    return particles


def filter_line(line: Sequence[Point], bounds: Bounds) -> Tuple[Point, ...]:
    return tuple(point for point in line if bounds.contains(point[0], point[1]))
