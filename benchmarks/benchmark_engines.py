"""
Benchmark for block filtering engines.

Measures:
- Throughput (samples/second) per engine vs. filter length
- Time per block at a fixed block size

Usage:
    python benchmarks/benchmark_engines.py
"""

import time

import numpy as np

from firstream import (
    BlockStreamFilter,
    CorrelateEngine,
    DirectNumpyEngine,
    NumbaEngine,
    SlidingWindowEngine,
    WeightVector,
)


def benchmark_engine(engine, L: int, block_size: int = 1024, n_blocks: int = 200) -> tuple[float, float]:
    """
    Benchmark one engine.

    Returns:
        (samples_per_second, ms_per_block)
    """
    weights = WeightVector.random(L, seed=0)
    filt = BlockStreamFilter(weights, block_size=block_size, engine=engine)
    x = np.random.default_rng(0).random(block_size * n_blocks)

    # Warm-up (Numba compiles on first call)
    filt.process(x[:block_size])

    start = time.perf_counter()
    filt.process(x)
    elapsed = time.perf_counter() - start

    return len(x) / elapsed, 1000 * elapsed / n_blocks


def run_filter_length_benchmark() -> dict:
    """Benchmark throughput vs. filter length."""
    print("=" * 70)
    print("BENCHMARK: Throughput vs. Filter Length (B=1024)")
    print("=" * 70)

    engines = {
        "direct": DirectNumpyEngine(),
        "sliding": SlidingWindowEngine(),
        "correlate": CorrelateEngine(),
        "numba": NumbaEngine(),
    }
    results = {}

    print(f"{'L':>6} " + " ".join(f"{name:>14}" for name in engines))
    for L in (10, 32, 128, 512, 2048):
        row = {}
        for name, engine in engines.items():
            throughput, _ = benchmark_engine(engine, L)
            row[name] = throughput
        results[L] = row
        print(f"{L:>6} " + " ".join(f"{row[name] / 1e6:>11.2f} MS/s" for name in engines))

    return results


if __name__ == "__main__":
    run_filter_length_benchmark()
