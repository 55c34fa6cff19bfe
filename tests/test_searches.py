"""
Tests for the search strategies: concrete scenarios, the agreement law against
the linear scan, guess bounds and termination on the pathological outlier case.
"""

import math

import numpy as np
import pytest

from search_benchmark.data_generator import Shape, generate_sequence
from search_benchmark.exceptions import InvalidArgumentError
from search_benchmark.searches import (
    SearchOutcome,
    Step,
    Strategy,
    alternating_step_policy,
    bracketed_search,
    interpolation_step_policy,
    predict_index,
    search_binary,
    search_hybrid,
    search_line_fit,
    search_line_fit_blind,
    search_linear_scan,
)

ODDS = [1, 3, 5, 7, 9, 11, 13, 15]


# =============================================================================
# Concrete scenarios
# =============================================================================

class TestScenarios:

    def test_line_fit_finds_on_first_guess(self):
        assert search_line_fit(ODDS, 9) == SearchOutcome(True, 4, 1)

    def test_binary_search_visits_three_midpoints(self):
        assert search_binary(ODDS, 9) == SearchOutcome(True, 4, 3)

    def test_linear_scan_stops_at_first_overshoot(self):
        outcome = search_linear_scan(ODDS, 4)
        assert not outcome.found
        assert outcome.guesses == 3

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_absent_value_not_found_by_any_strategy(self, strategy):
        assert not strategy.search(ODDS, 4).found

    def test_linear_scan_past_the_end(self):
        assert search_linear_scan(ODDS, 100) == SearchOutcome(False, None, len(ODDS))

    def test_hybrid_interpolates_first(self):
        assert search_hybrid(ODDS, 9) == SearchOutcome(True, 4, 1)


# =============================================================================
# Line fit endpoint pre-checks and the blind surcharge
# =============================================================================

class TestEndpoints:

    @pytest.mark.parametrize("query, expected", [
        (1, SearchOutcome(True, 0, 0)),
        (15, SearchOutcome(True, 7, 0)),
        (0, SearchOutcome(False, None, 0)),
        (16, SearchOutcome(False, None, 0)),
    ])
    def test_endpoint_checks_are_free(self, query, expected):
        assert search_line_fit(ODDS, query) == expected

    @pytest.mark.parametrize("query", [0, 1, 4, 9, 15, 16])
    def test_blind_costs_two_more_guesses(self, query):
        fit = search_line_fit(ODDS, query)
        blind = search_line_fit_blind(ODDS, query)
        assert blind.guesses == fit.guesses + 2
        assert (blind.found, blind.index) == (fit.found, fit.index)

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_single_value_sequence(self, strategy):
        assert strategy.search([7], 7).found
        assert strategy.search([7], 7).index == 0
        assert not strategy.search([7], 3).found
        assert not strategy.search([7], 9).found

    @pytest.mark.parametrize("strategy", [Strategy.LINE_FIT, Strategy.HYBRID])
    def test_two_values_with_query_between(self, strategy):
        # one charged read of an endpoint, then the bracket is exhausted
        assert strategy.search([2, 8], 5) == SearchOutcome(False, None, 1)

    def test_min_endpoint_wins_on_flat_sequence(self):
        assert search_line_fit([4, 4, 4, 4], 4) == SearchOutcome(True, 0, 0)


# =============================================================================
# Linear outlier: the documented worst case for line fit
# =============================================================================

class TestLinearOutlier:
    values = list(range(100)) + [20000]

    def test_line_fit_creeps_but_terminates(self):
        outcome = search_line_fit(self.values, 50)
        assert outcome.found
        assert outcome.index == 50
        assert outcome.guesses <= len(self.values)
        # one position per guess
        assert outcome.guesses == 50

    def test_hybrid_bisection_breaks_the_creep(self):
        outcome = search_hybrid(self.values, 50)
        assert outcome == SearchOutcome(True, 50, 2)

    def test_binary_is_unaffected(self):
        outcome = search_binary(self.values, 50)
        assert outcome.found
        assert outcome.guesses <= math.ceil(math.log2(len(self.values))) + 1


# =============================================================================
# Step policies
# =============================================================================

class TestStepPolicy:

    def test_alternation_starts_with_interpolation(self):
        steps = [alternating_step_policy(i) for i in range(6)]
        assert steps == [Step.INTERPOLATE, Step.BISECT] * 3

    def test_line_fit_always_interpolates(self):
        assert {interpolation_step_policy(i) for i in range(10)} == {Step.INTERPOLATE}

    def test_bisect_prediction_is_midpoint(self):
        assert predict_index(Step.BISECT, 9, 2, 5, 7, 15) == 4

    def test_interpolation_prediction_inverts_the_line(self):
        # slope 2, intercept 1
        assert predict_index(Step.INTERPOLATE, 9, 0, 1, 7, 15) == 4

    def test_custom_policy_is_consulted_once_per_guess(self):
        calls = []

        def bisect_only(guess_number):
            calls.append(guess_number)
            return Step.BISECT

        values = list(range(0, 200, 2))
        outcome = bracketed_search(values, 151, bisect_only)
        assert not outcome.found
        assert calls == list(range(outcome.guesses))


# =============================================================================
# Properties over generated sequences
# =============================================================================

def _cases(seed=7, sizes=(1, 2, 3, 5, 8, 17, 64, 200)):
    rng = np.random.default_rng(seed)
    for shape in Shape:
        for size in sizes:
            values = generate_sequence(shape, size, rng)
            queries = sorted(set(values) | set(rng.integers(0, 2100, size=40).tolist()))
            yield shape, values, queries


class TestProperties:

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_agreement_with_linear_scan(self, strategy):
        for shape, values, queries in _cases():
            for query in queries:
                expected = search_linear_scan(values, query)
                outcome = strategy.search(values, query)
                assert outcome.found == expected.found, (shape, len(values), query)
                if outcome.found:
                    assert values[outcome.index] == query

    def test_binary_guess_bound(self):
        for _, values, queries in _cases():
            bound = math.ceil(math.log2(len(values))) + 1
            for query in queries:
                assert search_binary(values, query).guesses <= bound

    def test_binary_below_first_value(self):
        for _, values, _ in _cases():
            if values[0] > 0:
                assert not search_binary(values, values[0] - 1).found

    @pytest.mark.parametrize("strategy", [Strategy.LINE_FIT, Strategy.HYBRID])
    def test_bracketed_searches_terminate_within_n(self, strategy):
        for _, values, queries in _cases():
            for query in queries:
                assert strategy.search(values, query).guesses <= len(values)

    def test_surcharge_law(self):
        for _, values, queries in _cases():
            for query in queries:
                assert search_line_fit_blind(values, query).guesses == search_line_fit(values, query).guesses + 2

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_determinism(self, strategy):
        for _, values, queries in _cases(sizes=(50,)):
            for query in queries:
                assert strategy.search(values, query) == strategy.search(values, query)


# =============================================================================
# Invalid arguments
# =============================================================================

class TestInvalidArguments:

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_empty_sequence(self, strategy):
        with pytest.raises(InvalidArgumentError):
            strategy.search([], 3)

    @pytest.mark.parametrize("strategy", list(Strategy))
    @pytest.mark.parametrize("query", [-1, 2.5, "3", None, True])
    def test_bad_query(self, strategy, query):
        with pytest.raises(InvalidArgumentError):
            strategy.search(ODDS, query)

    def test_numpy_integer_query_is_accepted(self):
        assert search_binary(ODDS, np.int64(9)).found
