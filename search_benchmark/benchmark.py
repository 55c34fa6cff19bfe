import csv
import os
import threading
import time
from typing import Iterable, NamedTuple, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from .data_generator import MAX_VALUE, Shape, draw_query, generate_sequence
from .exceptions import InvalidArgumentError
from .searches import SearchOutcome, Strategy
from .trial_stats import TrialStatistics, aggregate_trials
from .verification import Verifier

# Configuration
MAX_NUM_VALUES = 1000              # Sweeps cover sequence sizes 1..MAX_NUM_VALUES
NUM_RUNS_PER_TEST = 100            # Trials per (shape, strategy, size) to gather min, max, average
PERF_TEST_NUM_SEARCHES = 100000    # Queries per (strategy, shape) in the timing pass
OUTPUT_DIR = "out"


# --- Trials and Sweeps ---

def run_trial(shape: Shape, strategy: Strategy, size: int, rng: np.random.Generator,
              verifier: Optional[Verifier] = None, max_value: int = MAX_VALUE) -> SearchOutcome:
    """Runs a single trial: one fresh query against one freshly generated sequence."""
    query = draw_query(rng, max_value)
    values = generate_sequence(shape, size, rng, max_value)
    outcome = strategy.search(values, query)
    if verifier is not None:
        verifier.check(values, query, outcome, shape.label, strategy.label)
    return outcome


def run_sweep(shape: Shape, strategy: Strategy, sizes: Iterable[int], trials_per_size: int,
              rng: np.random.Generator, verifier: Optional[Verifier] = None,
              show_progress: bool = False) -> list[TrialStatistics]:
    """
    Aggregates `trials_per_size` trials for every size in `sizes`.
    Returns one TrialStatistics per size, in the order of `sizes`.
    """
    sizes = list(sizes)
    if not sizes:
        raise InvalidArgumentError("A sweep needs at least one sequence size.")

    if show_progress:
        sizes = tqdm(sizes, desc=f"{shape.label} / {strategy.label}", unit="size", leave=False)

    return [aggregate_trials(shape, strategy, size, trials_per_size, rng, verifier) for size in sizes]


def build_shape_sheet(shape: Shape, strategies: Iterable[Strategy], max_size: int, trials_per_size: int,
                      rng: np.random.Generator, verifier: Optional[Verifier] = None,
                      show_progress: bool = False) -> pd.DataFrame:
    """
    Sweeps every strategy over sizes 1..max_size for one shape.

    The sheet has a "Sample Count" column, then Min / Max / Avg / Single
    columns per strategy, then a "Sequence" column holding a sample sequence
    of max_size values for reference.
    """
    if max_size < 1:
        raise InvalidArgumentError(f"Maximum sequence size must be at least 1, got {max_size}.")

    sizes = range(1, max_size + 1)
    sheet = pd.DataFrame({"Sample Count": list(sizes)})

    for strategy in strategies:
        sweep = run_sweep(shape, strategy, sizes, trials_per_size, rng, verifier, show_progress)
        sheet[f"{strategy.label} Min"] = [stats.min_guesses for stats in sweep]
        sheet[f"{strategy.label} Max"] = [stats.max_guesses for stats in sweep]
        sheet[f"{strategy.label} Avg"] = [stats.average for stats in sweep]
        sheet[f"{strategy.label} Single"] = [stats.last_sample for stats in sweep]

    sheet["Sequence"] = generate_sequence(shape, max_size, rng)
    return sheet


def write_sheet(sheet: pd.DataFrame, shape: Shape, out_dir: str = OUTPUT_DIR) -> str:
    """Writes a shape's sheet to <out_dir>/<shape name>.csv and returns the path."""
    os.makedirs(out_dir, exist_ok=True)
    file_path = os.path.join(out_dir, f"{shape.label}.csv")
    sheet.to_csv(file_path, index=False, quoting=csv.QUOTE_ALL, float_format="%f")
    return file_path


# --- Multithreaded Sweeps over Shapes ---

class ShapeCounter:
    """Hands out shape indices; each index is claimed by exactly one worker."""
    def __init__(self):
        self._next = 0
        self._lock = threading.Lock()

    def fetch_add(self) -> int:
        with self._lock:
            index = self._next
            self._next += 1
            return index


def run_all_shapes(shapes: Iterable[Shape] = tuple(Shape), strategies: Iterable[Strategy] = tuple(Strategy),
                   max_size: int = MAX_NUM_VALUES, trials_per_size: int = NUM_RUNS_PER_TEST,
                   seed: Optional[int] = None, num_workers: Optional[int] = None,
                   verifier: Optional[Verifier] = None, out_dir: Optional[str] = OUTPUT_DIR,
                   show_progress: bool = False) -> dict[Shape, pd.DataFrame]:
    """
    Builds one sheet per shape on a pool of worker threads.

    Workers claim shapes from a shared counter. Each shape gets its own child
    seed, so a shape's sheet does not depend on which worker built it.
    If out_dir is None the sheets are only returned, not written.
    """
    shapes = list(shapes)
    strategies = list(strategies)
    if num_workers is None:
        num_workers = os.cpu_count() or 1
    if num_workers < 1:
        raise InvalidArgumentError(f"Number of workers must be at least 1, got {num_workers}.")
    num_workers = min(num_workers, len(shapes)) or 1

    shape_seeds = np.random.SeedSequence(seed).spawn(len(shapes))
    counter = ShapeCounter()
    sheets: dict[Shape, pd.DataFrame] = {}
    errors: list[BaseException] = []

    def worker():
        shape_index = counter.fetch_add()
        while shape_index < len(shapes):
            shape = shapes[shape_index]
            print(f"Starting {shape.label}")
            try:
                rng = np.random.default_rng(shape_seeds[shape_index])
                sheet = build_shape_sheet(shape, strategies, max_size, trials_per_size, rng, verifier, show_progress)
                if out_dir is not None:
                    write_sheet(sheet, shape, out_dir)
            except Exception as e:
                errors.append(e)
                return
            sheets[shape] = sheet
            print(f"Done with {shape.label}")
            shape_index = counter.fetch_add()

    threads = [threading.Thread(target=worker, name=f"shape-worker-{i}") for i in range(num_workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if errors:
        raise errors[0]

    return {shape: sheets[shape] for shape in shapes}


# --- Timing ---

class TimingResult(NamedTuple):
    strategy: Strategy
    shape: Shape
    elapsed: float         # seconds
    total_guesses: int


class TimingSummary:
    """Timing results of one strategy across every shape."""
    def __init__(self, strategy: Strategy, results: list[TimingResult]):
        self.strategy = strategy
        self.results = results

    @property
    def elapsed(self) -> float:
        return sum(r.elapsed for r in self.results)

    @property
    def total_guesses(self) -> int:
        return sum(r.total_guesses for r in self.results)

    @property
    def nanoseconds_per_guess(self) -> float:
        if self.total_guesses == 0:
            return 0.0
        return self.elapsed * 1e9 / self.total_guesses


def draw_queries(rng: np.random.Generator, count: int, max_value: int = MAX_VALUE) -> list[int]:
    if count < 1:
        raise InvalidArgumentError(f"Number of queries must be at least 1, got {count}.")
    return rng.integers(0, max_value, size=count, endpoint=True).tolist()


def time_searches(strategy: Strategy, shape: Shape, values: list[int], queries: list[int]) -> TimingResult:
    """Runs every query against `values` and measures the wall-clock time of the whole batch."""
    search = strategy.search
    total_guesses = 0

    start_time = time.perf_counter()
    for query in queries:
        total_guesses += search(values, query).guesses
    end_time = time.perf_counter()

    return TimingResult(strategy, shape, end_time - start_time, total_guesses)


def run_timing_pass(strategy: Strategy, shape: Shape, size: int, query_count: int,
                    rng: np.random.Generator) -> TimingResult:
    """Times `query_count` random queries against one generated sequence of `size` values."""
    values = generate_sequence(shape, size, rng)
    queries = draw_queries(rng, query_count)
    return time_searches(strategy, shape, values, queries)


def run_timing_comparison(strategies: Iterable[Strategy] = tuple(Strategy), shapes: Iterable[Shape] = tuple(Shape),
                          size: int = MAX_NUM_VALUES, query_count: int = PERF_TEST_NUM_SEARCHES,
                          seed: Optional[int] = None, verbose: bool = True) -> list[TimingSummary]:
    """
    Times every strategy on every shape, single threaded.
    All strategies see the same queries and the same sequence per shape.
    """
    shapes = list(shapes)
    rng = np.random.default_rng(seed)
    queries = draw_queries(rng, query_count)
    sequences = {shape: generate_sequence(shape, size, rng) for shape in shapes}

    summaries = []
    for strategy in strategies:
        results = []
        for shape in shapes:
            result = time_searches(strategy, shape, sequences[shape], queries)
            results.append(result)
            if verbose:
                print(f"  {strategy.label} {shape.label} : {result.elapsed:f} seconds")

        summary = TimingSummary(strategy, results)
        summaries.append(summary)
        if verbose:
            print(f"{strategy.label} total : {summary.elapsed:f} seconds  "
                  f"({summary.total_guesses} guesses = {summary.nanoseconds_per_guess:f} nanoseconds per guess)\n")
    return summaries
