# main.py
"""
Main entry point for the flow field generator.

This script orchestrates the entire run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the process-wide noise field once.
4. Generates one or more fields against that same noise field.
5. Logs a summary and a performance profile for each run.
"""
import argparse
import cProfile
import io
import logging
import pstats

from utils import setup_logging, load_config


def main(argv=None):
    """
    The main function to run the generator.
    """
    parser = argparse.ArgumentParser(description="Trace particles through a 2D noise flow field.")
    parser.add_argument('--config', default='config.json', help="Path to the JSON config file.")
    args = parser.parse_args(argv)

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"FATAL: Could not load {args.config}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Flow Field Generator Starting ---")

    field_params = config.get('flow_field', {})
    run_params = config.get('run_control', {})

    from lattice import SimplexNoise
    from field import FieldConfig, generate

    # One noise lattice for the whole process; only particle seeding varies per run.
    noise = SimplexNoise(seed=field_params.get('noise_seed'))
    field_config = FieldConfig.from_params(field_params)

    generations = run_params.get('generations', 1)
    log_throttle = run_params.get('log_throttle_particles', 250)

    profiler = cProfile.Profile()
    profiler.enable()
    for generation in range(generations):
        particles = generate(field_config, noise, log_throttle=log_throttle)

        drawable = sum(1 for p in particles if len(p.line) > 1)
        logging.info(
            f"Generation {generation + 1}/{generations}: "
            f"{drawable}/{len(particles)} drawable lines."
        )
    profiler.disable()

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Flow Field Generator Shutting Down ---")


if __name__ == "__main__":
    main()
