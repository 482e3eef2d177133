# utils.py
"""
Utility functions for the flow field generator.

This module provides helper functions, such as logging setup and config
loading, that are used across different parts of the application but do
not belong to a specific domain like noise or integration.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary whose optional "logging" section may hold
#       "level", "format", "log_file", "max_bytes" and "backup_count".
#   - Outputs: None
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler and a rotating file handler. Creates the log directory.
#   - Invariants: After this function runs, the root logger has exactly
#     two handlers, regardless of how many times it was called.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Inputs: path to a JSON file.
#   - Outputs: the parsed JSON object.
#   - Side Effects: Logs the outcome. Re-raises FileNotFoundError and
#     json.JSONDecodeError after logging them.
#   - Raises ValueError if the file is not a JSON object, or if one of the
#     sections in CONFIG_SECTIONS is present but is not an object.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/flow_field.log'
DEFAULT_LOG_MAX_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5

CONFIG_SECTIONS = ('logging', 'flow_field', 'run_control')


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the root logger from the "logging" section of the config.

    Everything goes to the console and to a size-rotated log file, so long
    batch runs of many generations keep a bounded history on disk.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    max_bytes = log_config.get('max_bytes', DEFAULT_LOG_MAX_BYTES)
    backup_count = log_config.get('backup_count', DEFAULT_LOG_BACKUP_COUNT)

    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    formatter = logging.Formatter(log_format)
    handlers = [
        logging.StreamHandler(),
        logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=max_bytes, backupCount=backup_count
        ),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(
        f"Log level {log_level}, file {log_file_path} "
        f"(rotates at {max_bytes} bytes, keeps {backup_count})."
    )


def load_config(path: str) -> Dict[str, Any]:
    """Loads the JSON run configuration and checks its section layout."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        msg = f"Configuration error: {path} must hold a JSON object, got {type(config).__name__}."
        logging.critical(msg)
        raise ValueError(msg)

    for section in CONFIG_SECTIONS:
        if section in config and not isinstance(config[section], dict):
            msg = f"Configuration error: section '{section}' in {path} must be a JSON object."
            logging.critical(msg)
            raise ValueError(msg)

    logging.info(f"Configuration loaded with sections: {', '.join(sorted(config))}.")
    return config
