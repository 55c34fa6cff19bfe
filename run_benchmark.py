import argparse
import time
from tabulate import tabulate

from search_benchmark.benchmark import (MAX_NUM_VALUES, NUM_RUNS_PER_TEST, OUTPUT_DIR, PERF_TEST_NUM_SEARCHES,
                                        run_all_shapes, run_timing_comparison)
from search_benchmark.data_generator import Shape
from search_benchmark.exceptions import InvalidArgumentError
from search_benchmark.searches import Strategy
from search_benchmark.verification import Verifier

def run_benchmark(max_size: int, num_runs: int, perf_searches: int, perf_size: int, out_dir: str,
                  seed: int = None, num_workers: int = None, make_csvs: bool = True, do_timing: bool = True,
                  show_progress: bool = False):
    """
    Sweeps every search strategy over every sequence shape, writes one CSV per shape,
    and then times the strategies against each other.
    """
    print("--- Sorted Sequence Search Benchmark ---")

    shapes = list(Shape)
    strategies = list(Strategy)
    verifier = Verifier()

    if make_csvs:
        # 1. Guess counts for every (shape, strategy, size)
        print(f"\n1. Sweeping sizes 1..{max_size} with {num_runs} runs per size...")
        start_time = time.perf_counter()
        sheets = run_all_shapes(shapes, strategies, max_size=max_size, trials_per_size=num_runs, seed=seed,
                                num_workers=num_workers, verifier=verifier, out_dir=out_dir,
                                show_progress=show_progress)
        end_time = time.perf_counter()
        print(f"Sweeps finished in {end_time - start_time:.2f} s, CSVs written to '{out_dir}'.")

        # 2. Summarize the largest size of every sheet
        print(f"\n--- Average Guesses at {max_size} Values ---")
        headers = ["Shape"] + [strategy.label for strategy in strategies]
        table_data = []
        for shape, sheet in sheets.items():
            last_row = sheet.iloc[-1]
            table_data.append([shape.label] + [f"{last_row[f'{strategy.label} Avg']:.2f}" for strategy in strategies])
        print(tabulate(table_data, headers=headers, tablefmt="grid"))

        if verifier.ok:
            print("All results verified against the linear scan.")
        else:
            print(f"{len(verifier.mismatches)} results disagreed with the linear scan.")

    if do_timing:
        # 3. Wall-clock comparison, single threaded
        print(f"\n--- Timing {perf_searches} searches per shape on {perf_size} values ---")
        summaries = run_timing_comparison(strategies, shapes, size=perf_size, query_count=perf_searches, seed=seed)

        headers = ["Search Method", "Total Time (s)", "Total Guesses", "ns / Guess"]
        table_data = [[s.strategy.label, f"{s.elapsed:.4f}", s.total_guesses, f"{s.nanoseconds_per_guess:.2f}"]
                      for s in summaries]
        print(tabulate(table_data, headers=headers, tablefmt="grid"))

    print("-" * 80)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Benchmark search strategies on sorted sequences of different shapes.")
    parser.add_argument("--max-size", type=int, default=MAX_NUM_VALUES,
                        help="Sweeps cover sequence sizes from 1 up to this many values.")
    parser.add_argument("--runs", type=int, default=NUM_RUNS_PER_TEST,
                        help="Number of random trials per (shape, strategy, size).")
    parser.add_argument("--perf-searches", type=int, default=PERF_TEST_NUM_SEARCHES,
                        help="Number of queries per (strategy, shape) in the timing pass.")
    parser.add_argument("--perf-size", type=int, default=MAX_NUM_VALUES,
                        help="Sequence size used by the timing pass.")
    parser.add_argument("--out-dir", default=OUTPUT_DIR, help="Directory the per-shape CSV files are written to.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs.")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of worker threads. Defaults to the number of CPUs.")
    parser.add_argument("--skip-csv", action="store_true", help="Skip the sweeps and CSV output.")
    parser.add_argument("--skip-timing", action="store_true", help="Skip the timing pass.")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar per sweep.")
    args = parser.parse_args()

    try:
        run_benchmark(args.max_size, args.runs, args.perf_searches, args.perf_size, args.out_dir,
                      seed=args.seed, num_workers=args.workers, make_csvs=not args.skip_csv,
                      do_timing=not args.skip_timing, show_progress=args.progress)
    except InvalidArgumentError as e:
        parser.error(str(e))
