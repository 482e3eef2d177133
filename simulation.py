# simulation.py
"""
Handles the trajectory integration of a single particle.

This module advances a particle through the noise field one step at a
time. Each step reads the noise at the particle's position, turns it into
a steering angle, nudges the velocity along that angle, moves the
particle, then decays the velocity. Nothing here checks bounds; a
particle may wander arbitrarily far from the drawing space.
"""
import math
from dataclasses import dataclass
from typing import Tuple

from lattice import NoiseSource
from particle import Particle

# --- Data Contracts ---
#
# class IntegratorParams (frozen):
#   - amplitude: noise-to-angle multiplier (radians per unit noise).
#   - damping: velocity factor applied after each move. Expected in (0, 1];
#     values >= 1 make velocity grow without bound. Not clamped.
#   - frequency: multiplier applied to positions before sampling noise.
#   - step_length: velocity added per step along the steering angle.
#
# step(particle, noise, params) -> Particle:
#   - Outputs: a new Particle with updated position/velocity and exactly
#     one more point in its line (the new position).
#   - Invariants: Damping is applied after the position update, so the
#     velocity used to move on step n includes the undamped kick of step n.
#
# trace(particle, noise, params, max_steps) -> Particle:
#   - Steps while len(line) < max_steps. A fresh particle therefore gets
#     exactly max_steps points; a particle that already has k points gets
#     max_steps - k more (none if k >= max_steps).


@dataclass(frozen=True)
class IntegratorParams:
    amplitude: float
    damping: float
    frequency: float
    step_length: float


def _advance(
    x: float, y: float, vx: float, vy: float,
    noise: NoiseSource, params: IntegratorParams
) -> Tuple[float, float, float, float]:
    # 1. Steering angle from the noise at the current position
    angle = noise.sample(x * params.frequency, y * params.frequency) * params.amplitude

    # 2. Kick the velocity along the angle
    vx += math.cos(angle) * params.step_length
    vy += math.sin(angle) * params.step_length

    # 3. Move
    x += vx
    y += vy

    # 4. Friction, after the move
    vx *= params.damping
    vy *= params.damping

    return x, y, vx, vy


def step(particle: Particle, noise: NoiseSource, params: IntegratorParams) -> Particle:
    """
    Advances a particle by one integration step.

    Args:
        particle (Particle): The current state. Left untouched.
        noise (NoiseSource): Noise field sampled at the current position.
        params (IntegratorParams): Step parameters.

    Returns:
        Particle: The next state, with the new position appended to its line.
    """
    x, y, vx, vy = _advance(particle.x, particle.y, particle.vx, particle.vy, noise, params)
    return Particle(x=x, y=y, vx=vx, vy=vy, line=particle.line + ((x, y),))


def trace(
    particle: Particle, noise: NoiseSource, params: IntegratorParams, max_steps: int
) -> Particle:
    """
    Integrates a particle until its line holds `max_steps` points.

    Equivalent to calling step() repeatedly, without rebuilding the line
    tuple on every step.
    """
    x, y, vx, vy = particle.x, particle.y, particle.vx, particle.vy
    line = list(particle.line)
    while len(line) < max_steps:
        x, y, vx, vy = _advance(x, y, vx, vy, noise, params)
        line.append((x, y))
    return Particle(x=x, y=y, vx=vx, vy=vy, line=tuple(line))
