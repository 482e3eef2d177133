import logging

import pytest

from lattice import SimplexNoise


class FunctionNoise:
    """Noise source backed by a plain function; records every call."""
    def __init__(self, fn):
        self.fn = fn
        self.calls = []

    def sample(self, x, y):
        self.calls.append((x, y))
        return self.fn(x, y)


@pytest.fixture
def function_noise():
    return FunctionNoise


@pytest.fixture
def constant_noise():
    def make(value=0.0):
        return FunctionNoise(lambda x, y: value)
    return make


@pytest.fixture(scope="session")
def simplex():
    return SimplexNoise(seed=7)


@pytest.fixture
def restore_root_logger():
    logger = logging.getLogger()
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved_handlers:
            handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)
