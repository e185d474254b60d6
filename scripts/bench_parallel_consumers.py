#!/usr/bin/env python3
"""Benchmark the SampleFlow consumers under concurrent producer threads."""

import argparse
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import torch

from sampleflow import Histogram, MeanValue, SpuriousAutocovariance

logger = logging.getLogger("bench_parallel_consumers")


@dataclass
class BenchmarkResult:
    wall_time_s: float
    samples: int
    run_index: int

    def as_dict(self) -> dict:
        return {
            "run": self.run_index,
            "wall_time_s": self.wall_time_s,
            "samples": self.samples,
            "samples_per_sec": self.samples / self.wall_time_s if self.wall_time_s > 0.0 else 0.0,
        }


def produce(consumers, producer_index: int, args) -> None:
    """Feed ``args.samples_per_thread`` random-walk samples into every consumer."""

    generator = torch.Generator()
    generator.manual_seed(args.seed + producer_index)
    state = torch.zeros(args.dimension, dtype=torch.float64)
    mean, histogram, autocovariance = consumers
    for step in range(args.samples_per_thread):
        state = 0.9 * state + torch.randn(args.dimension, dtype=torch.float64, generator=generator)
        aux = {"producer": producer_index, "step": step}
        mean.consume(state, aux)
        histogram.consume(float(state[0]), aux)
        autocovariance.consume(state, aux)


def run_once(args, run_index: int) -> BenchmarkResult:
    consumers = (
        MeanValue(),
        Histogram(-args.histogram_range, args.histogram_range, args.bins),
        SpuriousAutocovariance(args.lag_depth),
    )

    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=args.threads) as pool:
        futures = [pool.submit(produce, consumers, index, args) for index in range(args.threads)]
        for future in futures:
            future.result()
    wall = time.perf_counter() - start

    logger.debug("run %d final autocovariance %s", run_index, consumers[2].get().squeeze(1).tolist())
    return BenchmarkResult(
        wall_time_s=wall,
        samples=consumers[0].n_samples,
        run_index=run_index,
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--threads", type=int, default=4, help="Number of concurrent producer threads.")
    parser.add_argument("--samples-per-thread", type=int, default=20_000, help="Samples each producer emits.")
    parser.add_argument("--dimension", type=int, default=8, help="Width of each sample vector.")
    parser.add_argument("--lag-depth", type=int, default=10, help="Lags tracked by the autocovariance consumer.")
    parser.add_argument("--bins", type=int, default=50, help="Histogram bin count.")
    parser.add_argument("--histogram-range", type=float, default=8.0, help="Histogram covers [-range, range].")
    parser.add_argument("--runs", type=int, default=3, help="How many repeated runs to execute.")
    parser.add_argument("--seed", type=int, default=1234, help="Base random seed for the producers.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--json-out",
        type=str,
        default=None,
        help="Optional path to dump the benchmark results as JSON for dashboards.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    results = []
    for run_index in range(args.runs):
        result = run_once(args, run_index)
        results.append(result)
        metrics = result.as_dict()
        print(
            f"Run {run_index}: wall={metrics['wall_time_s']:.2f}s "
            f"thr={metrics['samples_per_sec']:.1f}/s "
            f"samples={metrics['samples']}"
        )

    if args.json_out:
        payload = [result.as_dict() for result in results]
        with open(args.json_out, "w") as handle:
            json.dump(payload, handle, indent=2)
        print(f"Wrote results to {args.json_out}")

    aggregate = {
        "runs": args.runs,
        "mean_wall_time_s": sum(r.wall_time_s for r in results) / max(1, len(results)),
        "mean_samples_per_sec": sum(r.as_dict()["samples_per_sec"] for r in results) / max(1, len(results)),
    }
    print("Aggregate:", json.dumps(aggregate, indent=2))


if __name__ == "__main__":
    main()
