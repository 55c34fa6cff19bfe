import numpy as np
import pytest

from search_benchmark.data_generator import (
    MAX_VALUE,
    OUTLIER_FACTOR,
    Shape,
    draw_query,
    generate_sequence,
    make_linear,
)
from search_benchmark.exceptions import InvalidArgumentError


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.mark.parametrize("shape", list(Shape))
@pytest.mark.parametrize("count", [1, 2, 3, 10, 1000])
def test_sequence_is_sorted_and_sized(shape, count, rng):
    values = generate_sequence(shape, count, rng)
    assert len(values) == count
    assert all(isinstance(v, int) for v in values)
    assert all(a <= b for a, b in zip(values, values[1:]))
    assert min(values) >= 0


@pytest.mark.parametrize("shape", [s for s in Shape if s is not Shape.LINEAR_OUTLIER])
def test_values_stay_in_domain(shape, rng):
    values = generate_sequence(shape, 500, rng)
    assert max(values) <= MAX_VALUE


@pytest.mark.parametrize("shape", [Shape.LINEAR, Shape.QUADRATIC, Shape.CUBIC, Shape.LOG])
def test_deterministic_shapes_span_the_domain(shape, rng):
    values = generate_sequence(shape, 100, rng)
    assert values[-1] == MAX_VALUE
    assert generate_sequence(shape, 100, rng) == values


def test_linear_values():
    assert make_linear(5, 100) == [0, 25, 50, 75, 100]


def test_linear_outlier_ends_with_outlier(rng):
    values = generate_sequence(Shape.LINEAR_OUTLIER, 101, rng)
    assert values[-1] == MAX_VALUE * OUTLIER_FACTOR
    assert values[:-1] == make_linear(101)[:-1]


def test_random_shape_is_reproducible():
    a = generate_sequence(Shape.RANDOM, 50, np.random.default_rng(5))
    b = generate_sequence(Shape.RANDOM, 50, np.random.default_rng(5))
    assert a == b


@pytest.mark.parametrize("count", [0, -3])
def test_empty_sequence_rejected(count, rng):
    with pytest.raises(InvalidArgumentError):
        generate_sequence(Shape.LINEAR, count, rng)


def test_draw_query_in_domain(rng):
    queries = [draw_query(rng) for _ in range(1000)]
    assert all(0 <= q <= MAX_VALUE for q in queries)
    assert all(type(q) is int for q in queries)
