import logging
import math

import pytest

from field import FieldConfig, Provided, Seeded, generate, summarize
from particle import Particle, filter_line, seed_particles
from simulation import step, trace


def is_subsequence(short, long):
    remaining = iter(long)
    return all(point in remaining for point in short)


def test_derived_quantities():
    config = FieldConfig(width=100, height=100)
    assert config.max_steps == 30
    assert config.step_length == 5.0
    assert config.frequency == pytest.approx(0.001)

    scaled = FieldConfig(width=100, height=100, scale=0.8)
    assert scaled.max_steps == 24
    assert scaled.step_length == pytest.approx(4.0)
    assert scaled.frequency == pytest.approx(0.00125)


def test_max_steps_rounds_half_up():
    assert FieldConfig(width=1, height=1, scale=0.05).max_steps == 2
    assert FieldConfig(width=1, height=1, scale=0.1).max_steps == 3


def test_defaults():
    config = FieldConfig(width=10, height=20)
    assert (config.count, config.amplitude, config.damping) == (1000, 5.0, 0.1)
    assert (config.scale, config.margin, config.seed) == (1.0, 0.1, None)


def test_from_params_fills_defaults():
    config = FieldConfig.from_params({'width': 640, 'height': 480, 'seed': 3, 'noise_seed': 9})
    assert config == FieldConfig(width=640.0, height=480.0, seed=3)


def test_from_params_missing_dimensions(caplog):
    with caplog.at_level(logging.WARNING):
        config = FieldConfig.from_params({'count': 5})
    assert (config.width, config.height) == (0.0, 0.0)
    assert "width" in caplog.text and "height" in caplog.text


def test_zero_scale_is_a_numeric_error(simplex):
    with pytest.raises(ZeroDivisionError):
        generate(FieldConfig(width=100, height=100, scale=0), simplex)


def test_zero_count_gives_empty_field(simplex):
    assert generate(FieldConfig(width=100, height=100, count=0, seed=1), simplex) == []


def test_generation_is_deterministic(simplex):
    config = FieldConfig(width=400, height=300, count=50, seed=42)
    assert generate(config, simplex) == generate(config, simplex)


def test_filtered_lines_are_bounded_subsequences(simplex):
    config = FieldConfig(width=200, height=200, count=40, margin=0.2, amplitude=8.0, seed=5)
    bounds = config.bounds
    unfiltered = [
        trace(p, simplex, config.integrator_params(), config.max_steps)
        for p in seed_particles(config.count, config.width, config.height, config.margin, config.seed)
    ]
    field = generate(config, simplex)

    assert len(field) == len(unfiltered) == 40
    for kept, full in zip(field, unfiltered):
        assert len(full.line) == 30
        assert kept.line == filter_line(full.line, bounds)
        assert is_subsequence(kept.line, full.line)
        assert all(bounds.contains(x, y) for x, y in kept.line)
        assert (kept.x, kept.y, kept.vx, kept.vy) == (full.x, full.y, full.vx, full.vy)


def test_every_line_has_max_steps_before_filtering(simplex):
    # A huge space keeps every point, so the filtered length is the raw length.
    config = FieldConfig(width=1e6, height=1e6, margin=0.0, scale=1.5)
    supplied = [Particle(5e5, 5e5), Particle(4e5, 6e5)]
    for particle in generate(config, simplex, Provided(supplied)):
        assert len(particle.line) == 45


def test_supplied_particles_are_not_reseeded(simplex):
    supplied = [Particle(30.0, 40.0), Particle(60.0, 70.0), Particle(500.0, 500.0)]
    snapshot = list(supplied)
    config = FieldConfig(width=1000, height=1000, count=999, seed=1, margin=0.0)

    field = generate(config, simplex, Provided(supplied))

    assert len(field) == 3
    assert supplied == snapshot
    params = config.integrator_params()
    for original, traced in zip(supplied, field):
        assert traced.line[0] == step(original, simplex, params).line[0]


def test_explicit_seeded_source_matches_default(simplex):
    config = FieldConfig(width=300, height=300, count=10, seed=8)
    assert generate(config, simplex, Seeded(config)) == generate(config, simplex)


def test_unknown_source_is_rejected(simplex):
    with pytest.raises(TypeError):
        generate(FieldConfig(width=10, height=10), simplex, source=[Particle(1.0, 1.0)])


def test_fragmented_lines_are_preserved(function_noise):
    # Bounces between x=55 (inside) and x=60 (on the edge, outside).
    noise = function_noise(lambda x, y: 0.0 if x < 0.0575 else math.pi)
    config = FieldConfig(width=100, height=100, amplitude=1.0, damping=0.0, margin=0.4)

    [particle] = generate(config, noise, Provided([Particle(50.0, 50.0)]))

    assert len(particle.line) == 15
    assert all(x == 55.0 for x, _ in particle.line)


def test_degenerate_lines_are_kept(simplex):
    config = FieldConfig(width=100, height=100, count=5, margin=0.5, seed=3)
    field = generate(config, simplex)
    assert len(field) == 5
    assert all(p.line == () for p in field)


def test_missing_dimensions_give_empty_lines(simplex):
    config = FieldConfig.from_params({'count': 4, 'seed': 1})
    field = generate(config, simplex)
    assert len(field) == 4
    assert all(p.line == () for p in field)


def test_end_to_end_single_particle(simplex):
    config = FieldConfig(width=100, height=100, count=1, scale=1, margin=0, seed=42)
    [seeded] = seed_particles(1, 100, 100, 0, seed=42)
    full = trace(seeded, simplex, config.integrator_params(), config.max_steps)

    first = generate(config, simplex)
    second = generate(config, simplex)

    assert len(full.line) == 30
    assert first == second
    assert first[0].line == filter_line(full.line, config.bounds)


def test_progress_is_logged(simplex, caplog):
    config = FieldConfig(width=100, height=100, count=6, seed=2)
    with caplog.at_level(logging.DEBUG):
        generate(config, simplex, log_throttle=3)
    assert "Traced 3/6 particles." in caplog.text
    assert "Traced 6/6 particles." in caplog.text


def test_suspicious_parameters_warn(simplex, caplog):
    config = FieldConfig(width=100, height=100, count=1, damping=1.5, margin=0.6, seed=1)
    with caplog.at_level(logging.WARNING):
        generate(config, simplex)
    assert "Damping 1.5" in caplog.text
    assert "Margin 0.6" in caplog.text


def test_summarize():
    particles = [
        Particle(0.0, 0.0, line=()),
        Particle(0.0, 0.0, line=((1.0, 1.0),)),
        Particle(0.0, 0.0, line=((1.0, 1.0), (2.0, 2.0), (3.0, 3.0))),
    ]
    assert summarize(particles) == {
        'particles': 3,
        'points': 4,
        'degenerate_lines': 2,
        'mean_line_length': pytest.approx(4 / 3),
    }
    assert summarize([])['mean_line_length'] == 0.0


def test_inverted_margin_gives_empty_lines(simplex):
    config = FieldConfig(width=100, height=100, count=3, margin=0.6, seed=1)
    field = generate(config, simplex)
    assert len(field) == 3
    assert all(p.line == () for p in field)


def test_negative_width_gives_empty_lines(simplex):
    config = FieldConfig(width=-100, height=100, count=2, seed=1)
    field = generate(config, simplex)
    assert len(field) == 2
    assert all(p.line == () for p in field)


def test_negative_scale_takes_no_steps(simplex, caplog):
    config = FieldConfig(width=100, height=100, count=3, scale=-1, seed=1)
    with caplog.at_level(logging.WARNING):
        field = generate(config, simplex)
    assert "Scale -1" in caplog.text and "is not positive" in caplog.text
    assert len(field) == 3
    assert all(p.line == () for p in field)


def test_from_params_null_options_take_defaults():
    config = FieldConfig.from_params({
        'width': 10, 'height': 10, 'count': None, 'amplitude': None,
        'damping': None, 'scale': None, 'margin': None, 'seed': None,
    })
    assert config == FieldConfig(width=10.0, height=10.0)


def test_from_params_keeps_zero_count():
    assert FieldConfig.from_params({'width': 10, 'height': 10, 'count': 0}).count == 0
