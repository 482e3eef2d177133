# field.py
"""
Generates a complete flow field.

This module ties the pieces together: it resolves where the particles
come from (freshly seeded or supplied by the caller), traces every
particle through the shared noise field, and finally trims each line down
to the points that fall inside the margin-inset rectangle.
"""
import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union

from constants import (
    BASE_FREQUENCY, DEFAULT_AMPLITUDE, DEFAULT_COUNT, DEFAULT_DAMPING,
    DEFAULT_MARGIN, DEFAULT_SCALE, STEP_LENGTH_PER_SCALE, STEPS_PER_SCALE
)
from lattice import NoiseSource
from particle import Bounds, Particle, filter_line, seed_particles
from simulation import IntegratorParams, trace

# --- Data Contracts ---
#
# class FieldConfig (frozen):
#   - width, height, count, amplitude, damping, scale, margin, seed.
#   - Derived: max_steps = round-half-up(30 * scale),
#     step_length = 5 * scale, frequency = 0.001 / scale,
#     bounds = Bounds.from_dimensions(width, height, margin).
#   - frequency raises ZeroDivisionError when scale == 0.
#
# ParticleSource = Seeded(config) | Provided(particles)
#   - Resolved once, at the start of generate().
#
# generate(config, noise, source=None, log_throttle=0) -> List[Particle]:
#   - Inputs:
#     - config: FieldConfig for this run.
#     - noise: the process-wide noise source.
#     - source: where particles come from. None means Seeded(config).
#     - log_throttle: emit a DEBUG progress line every N particles (0 = off).
#   - Outputs: one particle per resolved input particle, same order, with
#     its line filtered point-wise against config.bounds. Lines with 0 or
#     1 surviving points are kept.
#   - Side Effects: None on the inputs; supplied particles are not mutated.
#
# summarize(particles) -> Dict[str, Any]:
#   - Aggregate counts used for logging.


@dataclass(frozen=True)
class FieldConfig:
    width: float
    height: float
    count: int = DEFAULT_COUNT
    amplitude: float = DEFAULT_AMPLITUDE
    damping: float = DEFAULT_DAMPING
    scale: float = DEFAULT_SCALE
    margin: float = DEFAULT_MARGIN
    seed: Optional[int] = None

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "FieldConfig":
        """
        Builds a config from the `flow_field` section of config.json.

        Missing or null options take their defaults. A missing width or
        height is not an error: it becomes 0 and the rectangle is degenerate.
        """
        def option(key, default):
            value = params.get(key)
            return default if value is None else value

        for key in ('width', 'height'):
            if params.get(key) is None:
                logging.warning(f"No '{key}' in flow field config; using 0.")

        return cls(
            width=float(option('width', 0.0)),
            height=float(option('height', 0.0)),
            count=int(option('count', DEFAULT_COUNT)),
            amplitude=float(option('amplitude', DEFAULT_AMPLITUDE)),
            damping=float(option('damping', DEFAULT_DAMPING)),
            scale=float(option('scale', DEFAULT_SCALE)),
            margin=float(option('margin', DEFAULT_MARGIN)),
            seed=params.get('seed'),
        )

    @property
    def max_steps(self) -> int:
        return int(math.floor(STEPS_PER_SCALE * self.scale + 0.5))

    @property
    def step_length(self) -> float:
        return STEP_LENGTH_PER_SCALE * self.scale

    @property
    def frequency(self) -> float:
        return BASE_FREQUENCY / self.scale

    @property
    def bounds(self) -> Bounds:
        return Bounds.from_dimensions(self.width, self.height, self.margin)

    def integrator_params(self) -> IntegratorParams:
        return IntegratorParams(
            amplitude=self.amplitude,
            damping=self.damping,
            frequency=self.frequency,
            step_length=self.step_length,
        )


@dataclass(frozen=True)
class Seeded:
    config: FieldConfig


@dataclass(frozen=True)
class Provided:
    particles: Sequence[Particle]


ParticleSource = Union[Seeded, Provided]


def _warn_on_suspicious(config: FieldConfig) -> None:
    # Out-of-range values are allowed through; the output just degrades.
    if not 0.0 <= config.margin < 0.5:
        logging.warning(f"Margin {config.margin} is outside [0, 0.5); the bounding rectangle is empty.")
    if not 0.0 < config.damping <= 1.0:
        logging.warning(f"Damping {config.damping} is outside (0, 1]; trajectories may diverge.")
    if config.scale <= 0:
        logging.warning(f"Scale {config.scale} is not positive.")


def _resolve_particles(source: ParticleSource) -> List[Particle]:
    if isinstance(source, Seeded):
        cfg = source.config
        return seed_particles(cfg.count, cfg.width, cfg.height, cfg.margin, cfg.seed)
    if isinstance(source, Provided):
        logging.info(f"Using {len(source.particles)} supplied particles; skipping seeding.")
        return list(source.particles)
    raise TypeError(f"Unknown particle source: {type(source).__name__}")


def generate(
    config: FieldConfig,
    noise: NoiseSource,
    source: Optional[ParticleSource] = None,
    log_throttle: int = 0,
) -> List[Particle]:
    """
    Traces a full flow field.

    Args:
        config (FieldConfig): Field parameters for this run.
        noise (NoiseSource): Shared noise field.
        source (Optional[ParticleSource]): Particle origin. Defaults to
            seeding from `config`.
        log_throttle (int): DEBUG progress interval in particles.

    Returns:
        List[Particle]: Traced particles with bounds-filtered lines.
    """
    _warn_on_suspicious(config)

    # Resolve scale-derived quantities first; scale == 0 fails here.
    params = config.integrator_params()
    max_steps = config.max_steps

    if source is None:
        source = Seeded(config)
    particles = _resolve_particles(source)

    logging.info(
        f"Generating field: {len(particles)} particles, {max_steps} steps, "
        f"step length {params.step_length:.3f}, frequency {params.frequency:.6f}."
    )

    traced = []
    for index, particle in enumerate(particles):
        traced.append(trace(particle, noise, params, max_steps))
        if log_throttle and (index + 1) % log_throttle == 0:
            logging.debug(f"Traced {index + 1}/{len(particles)} particles.")

    bounds = config.bounds
    field = [replace(p, line=filter_line(p.line, bounds)) for p in traced]

    stats = summarize(field)
    logging.info(
        f"Field generated: {stats['points']} points kept, "
        f"{stats['degenerate_lines']} degenerate lines."
    )
    return field


def summarize(particles: Sequence[Particle]) -> Dict[str, Any]:
    lengths = [len(p.line) for p in particles]
    return {
        'particles': len(lengths),
        'points': sum(lengths),
        'degenerate_lines': sum(1 for n in lengths if n < 2),
        'mean_line_length': (sum(lengths) / len(lengths)) if lengths else 0.0,
    }
