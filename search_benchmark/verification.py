import threading
from typing import NamedTuple, Optional

from .searches import SearchOutcome, search_linear_scan


class VerificationMismatch(NamedTuple):
    """A disagreement between a strategy and the linear scan. Advisory only."""
    shape: str
    strategy: str
    query: int
    expected: SearchOutcome
    actual: SearchOutcome
    reason: str

    def describe(self) -> str:
        return f"VERIFICATION FAILURE!! ({self.reason}) {self.shape}, {self.strategy}"


def verify_outcome(values: list[int], query: int, outcome: SearchOutcome) -> Optional[str]:
    """
    Re-runs the linear scan and compares it with `outcome`.
    Returns a short reason if they disagree, or None if they agree.
    Different indices holding the same value count as agreement.
    """
    expected = search_linear_scan(values, query)
    if outcome.found != expected.found:
        return f"found {str(outcome.found).lower()} vs {str(expected.found).lower()}"
    if outcome.found and outcome.index != expected.index and values[outcome.index] != values[expected.index]:
        return f"index {outcome.index} vs {expected.index}"
    return None


class Verifier:
    """
    Collects verification mismatches from any number of worker threads.
    Mismatches are printed and recorded; the outcome under test is never changed.
    """
    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.mismatches: list[VerificationMismatch] = []
        self._lock = threading.Lock()

    def check(self, values: list[int], query: int, outcome: SearchOutcome,
              shape: str = "", strategy: str = "") -> bool:
        reason = verify_outcome(values, query, outcome)
        if reason is None:
            return True

        mismatch = VerificationMismatch(shape, strategy, query, search_linear_scan(values, query), outcome, reason)
        with self._lock:
            self.mismatches.append(mismatch)
        if self.verbose:
            print(mismatch.describe())
        return False

    @property
    def ok(self) -> bool:
        return not self.mismatches
