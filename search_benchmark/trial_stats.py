from typing import Optional

import numpy as np

from .data_generator import Shape, draw_query, generate_sequence, MAX_VALUE
from .exceptions import InvalidArgumentError
from .searches import Strategy
from .utils import lerp


class TrialStatistics:
    """
    Running guess-count statistics for one (shape, strategy, sequence size).
    """
    def __init__(self, size: int):
        self.size = size
        self.min_guesses: Optional[int] = None
        self.max_guesses: Optional[int] = None
        self.average = 0.0
        self.last_sample: Optional[int] = None
        self.trials = 0

    def update(self, guesses: int):
        if self.min_guesses is None or guesses < self.min_guesses:
            self.min_guesses = guesses
        if self.max_guesses is None or guesses > self.max_guesses:
            self.max_guesses = guesses
        # cumulative mean: equal to the arithmetic mean after every update
        self.average = lerp(self.average, float(guesses), 1.0 / (self.trials + 1))
        self.last_sample = guesses
        self.trials += 1

    def as_row(self) -> list:
        return [self.min_guesses, self.max_guesses, self.average, self.last_sample]

    def __repr__(self):
        return (f"TrialStatistics(size={self.size}, min={self.min_guesses}, max={self.max_guesses}, "
                f"avg={self.average:.3f}, single={self.last_sample}, trials={self.trials})")


def aggregate_trials(shape: Shape, strategy: Strategy, size: int, num_trials: int,
                     rng: np.random.Generator, verifier=None, max_value: int = MAX_VALUE) -> TrialStatistics:
    """
    Runs `num_trials` independent trials, each with a fresh query and a freshly
    generated sequence of `size` values, and reduces their guess counts.
    """
    if num_trials < 1:
        raise InvalidArgumentError(f"Number of trials must be at least 1, got {num_trials}.")

    stats = TrialStatistics(size)
    for _ in range(num_trials):
        query = draw_query(rng, max_value)
        values = generate_sequence(shape, size, rng, max_value)
        outcome = strategy.search(values, query)
        if verifier is not None:
            verifier.check(values, query, outcome, shape.label, strategy.label)
        stats.update(outcome.guesses)
    return stats
