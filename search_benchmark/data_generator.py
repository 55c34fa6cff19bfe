from enum import Enum

import numpy as np

from .exceptions import InvalidArgumentError

# Configuration
MAX_VALUE = 2000                  # Generated values lie in [0, MAX_VALUE] (the outlier excepted)
OUTLIER_FACTOR = 100              # The "Linear Outlier" shape ends at MAX_VALUE * OUTLIER_FACTOR


class Shape(Enum):
    RANDOM = "Random"
    LINEAR = "Linear"
    LINEAR_OUTLIER = "Linear Outlier"
    QUADRATIC = "Quadratic"
    CUBIC = "Cubic"
    LOG = "Log"

    @property
    def label(self) -> str:
        return self.value


def _unit_positions(count: int) -> np.ndarray:
    # index / (count - 1), which is just [0.] for a single value
    return np.linspace(0.0, 1.0, count)


def _scale(y: np.ndarray, max_value: int) -> list[int]:
    values = (y * max_value).astype(np.int64)
    values.sort()
    return values.tolist()


def make_random(count: int, rng: np.random.Generator, max_value: int = MAX_VALUE) -> list[int]:
    values = rng.integers(0, max_value, size=count, endpoint=True)
    values.sort()
    return values.tolist()


def make_linear(count: int, max_value: int = MAX_VALUE) -> list[int]:
    return _scale(_unit_positions(count), max_value)


def make_linear_outlier(count: int, max_value: int = MAX_VALUE) -> list[int]:
    """A linear ramp whose final value is replaced by a single huge outlier."""
    values = make_linear(count, max_value)
    values[-1] = max_value * OUTLIER_FACTOR
    return values


def make_quadratic(count: int, max_value: int = MAX_VALUE) -> list[int]:
    x = _unit_positions(count)
    return _scale(x * x, max_value)


def make_cubic(count: int, max_value: int = MAX_VALUE) -> list[int]:
    x = _unit_positions(count)
    return _scale(x * x * x, max_value)


def make_log(count: int, max_value: int = MAX_VALUE) -> list[int]:
    """
    log(index + 2), normalised by log(count + 1) so that the last value is
    exactly max_value and a single value list is well defined.
    """
    x = np.arange(count, dtype=np.float64) + 2.0
    y = np.log(x) / np.log(count + 1.0)
    return _scale(np.minimum(y, 1.0), max_value)


def generate_sequence(shape: Shape, count: int, rng: np.random.Generator, max_value: int = MAX_VALUE) -> list[int]:
    """
    Generates a non-decreasing list of `count` non-negative integers following `shape`.
    Only the Random shape draws from rng.
    """
    if count < 1:
        raise InvalidArgumentError(f"Sequence length must be at least 1, got {count}.")

    if shape is Shape.RANDOM:
        return make_random(count, rng, max_value)
    elif shape is Shape.LINEAR:
        return make_linear(count, max_value)
    elif shape is Shape.LINEAR_OUTLIER:
        return make_linear_outlier(count, max_value)
    elif shape is Shape.QUADRATIC:
        return make_quadratic(count, max_value)
    elif shape is Shape.CUBIC:
        return make_cubic(count, max_value)
    elif shape is Shape.LOG:
        return make_log(count, max_value)
    raise InvalidArgumentError(f"Unknown shape: {shape!r}")


def draw_query(rng: np.random.Generator, max_value: int = MAX_VALUE) -> int:
    """Draws a uniformly random query from [0, max_value]."""
    return int(rng.integers(0, max_value, endpoint=True))
