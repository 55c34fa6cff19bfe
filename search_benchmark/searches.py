# --- Search Strategies (Benchmarked against each other) ---
#
# Every strategy takes an ascending list of non-negative integers and a query,
# and returns a SearchOutcome. A "guess" is one charged read of the list.

from enum import Enum
from typing import Callable, NamedTuple, Optional

from .exceptions import check_search_inputs
from .utils import clamp


class SearchOutcome(NamedTuple):
    found: bool
    index: Optional[int]
    guesses: int


NOT_FOUND = SearchOutcome(False, None, 0)


def search_linear_scan(values: list[int], query: int) -> SearchOutcome:
    """
    Scans the list from the front until it reaches a value >= query.
    This is the ground truth the other strategies are verified against.
    Returns the outcome and the number of positions visited.
    """
    check_search_inputs(values, query)
    guesses = 0
    for i, val in enumerate(values):
        guesses += 1
        if val == query:
            return SearchOutcome(True, i, guesses)
        if val > query:
            break
    return SearchOutcome(False, None, guesses)


def search_binary(values: list[int], query: int) -> SearchOutcome:
    """
    Binary search algorithm.
    Returns the outcome and the number of guesses.
    """
    check_search_inputs(values, query)
    low, high = 0, len(values) - 1
    guesses = 0
    while True:
        guesses += 1
        mid = (low + high) // 2
        guess = values[mid]
        if guess == query:
            return SearchOutcome(True, mid, guesses)
        elif guess < query:
            low = mid + 1
        else:
            # the bracket is already [0, 0] here
            if mid == 0:
                return NOT_FOUND._replace(guesses=guesses)
            high = mid - 1

        if low > high:
            return NOT_FOUND._replace(guesses=guesses)


# --- Bracketed Searches (Line Fit, Line Fit Blind, Hybrid) ---

class Step(Enum):
    INTERPOLATE = "interpolate"
    BISECT = "bisect"


StepPolicy = Callable[[int], Step]


def interpolation_step_policy(guess_number: int) -> Step:
    return Step.INTERPOLATE


def alternating_step_policy(guess_number: int) -> Step:
    """
    Even guesses (0-based) fit a line, odd guesses bisect the bracket.
    The alternation is unconditional. Switching to bisection only when a line
    fit stops making progress might do better; that rule would go here.
    """
    if guess_number % 2 == 0:
        return Step.INTERPOLATE
    return Step.BISECT


def predict_index(step: Step, query: int, min_index: int, min_value: int,
                  max_index: int, max_value: int) -> int:
    """
    Predicts where the query lives inside the bracket.
    Interpolation fits y = mx + b through both endpoints and inverts it for x.
    """
    if step is Step.BISECT:
        return (min_index + max_index) // 2

    m = (max_value - min_value) / (max_index - min_index)
    b = min_value - m * min_index
    return int(0.5 + (query - b) / m)


def bracketed_search(values: list[int], query: int, step_policy: StepPolicy = interpolation_step_policy,
                     charge_endpoints: bool = False) -> SearchOutcome:
    """
    Shared loop of the line fit family.

    The first and last values form the initial bracket. Each guess is clamped
    strictly inside the bracket and replaces the endpoint on its side of the
    query, so the bracket shrinks by at least one position per guess.

    When charge_endpoints is set the two initial endpoint reads are added to
    the guess count, otherwise they are treated as known in advance.
    """
    check_search_inputs(values, query)
    surcharge = 2 if charge_endpoints else 0

    min_index = 0
    max_index = len(values) - 1
    min_value = values[min_index]
    max_value = values[max_index]

    if query < min_value or query > max_value:
        return SearchOutcome(False, None, surcharge)
    if query == min_value:
        return SearchOutcome(True, min_index, surcharge)
    if query == max_value:
        return SearchOutcome(True, max_index, surcharge)

    guesses = 0
    while True:
        step = step_policy(guesses)
        guesses += 1
        guess_index = predict_index(step, query, min_index, min_value, max_index, max_value)
        guess_index = clamp(min_index + 1, max_index - 1, guess_index)
        guess = values[guess_index]

        if guess == query:
            return SearchOutcome(True, guess_index, guesses + surcharge)

        if guess < query:
            min_index, min_value = guess_index, guess
        else:
            max_index, max_value = guess_index, guess

        # nothing left between the endpoints
        if min_index + 1 >= max_index:
            return SearchOutcome(False, None, guesses + surcharge)


def search_line_fit(values: list[int], query: int) -> SearchOutcome:
    """Interpolation search that gets the first and last values for free."""
    return bracketed_search(values, query, interpolation_step_policy)


def search_line_fit_blind(values: list[int], query: int) -> SearchOutcome:
    """Line fit search that pays 2 extra guesses to read the first and last values."""
    return bracketed_search(values, query, interpolation_step_policy, charge_endpoints=True)


def search_hybrid(values: list[int], query: int) -> SearchOutcome:
    """Line fit search that bisects the bracket on every other guess."""
    return bracketed_search(values, query, alternating_step_policy)


class Strategy(Enum):
    LINEAR_SCAN = "Linear Search"
    LINE_FIT = "Line Fit"
    LINE_FIT_BLIND = "Line Fit Blind"
    BINARY_SEARCH = "Binary Search"
    HYBRID = "Hybrid"

    @property
    def label(self) -> str:
        return self.value

    def search(self, values: list[int], query: int) -> SearchOutcome:
        return SEARCH_FUNCTIONS[self](values, query)


SEARCH_FUNCTIONS: dict[Strategy, Callable[[list[int], int], SearchOutcome]] = {
    Strategy.LINEAR_SCAN: search_linear_scan,
    Strategy.LINE_FIT: search_line_fit,
    Strategy.LINE_FIT_BLIND: search_line_fit_blind,
    Strategy.BINARY_SEARCH: search_binary,
    Strategy.HYBRID: search_hybrid,
}
