#!/usr/bin/env python3
"""Benchmark suite for wordbloom: add/check latency and observed false-positive rate."""

import argparse
import json
import logging
import os
import time
from pathlib import Path
from typing import Dict, List

import numpy as np
import plotly.graph_objects as go
from tqdm import tqdm

from wordbloom import BloomFilter

logger = logging.getLogger("wordbloom.benchmarks")


def _random_sentence(words: int) -> str:
    return " ".join(os.urandom(4).hex() for _ in range(words))


class Metrics:
    def __init__(self):
        self.add_latencies: List[float] = []
        self.check_latencies: List[float] = []
        self.false_positives = 0
        self.probes = 0

    @property
    def fp_rate(self) -> float:
        return self.false_positives / self.probes if self.probes else 0.0

    def to_dict(self) -> Dict:
        return {
            "add_latencies": {
                "p50": np.percentile(self.add_latencies, 50),
                "p95": np.percentile(self.add_latencies, 95),
                "p99": np.percentile(self.add_latencies, 99),
            },
            "check_latencies": {
                "p50": np.percentile(self.check_latencies, 50),
                "p95": np.percentile(self.check_latencies, 95),
                "p99": np.percentile(self.check_latencies, 99),
            },
            "false_positive_rate": self.fp_rate,
            "probes": self.probes,
        }

    def plot_latencies(self, title: str, output_path: Path):
        fig = go.Figure()

        fig.add_trace(go.Box(
            y=self.add_latencies,
            name="Add Latency",
            boxpoints="outliers"
        ))

        fig.add_trace(go.Box(
            y=self.check_latencies,
            name="Check Latency",
            boxpoints="outliers"
        ))

        fig.update_layout(
            title=title,
            yaxis_title="Latency (ms)",
            boxmode="group"
        )

        fig.write_html(output_path)


class BenchmarkSuite:
    def __init__(self, num_entries: int, error_rate: float, words: int):
        self.num_entries = num_entries
        self.error_rate = error_rate
        self.metrics = Metrics()
        self._sentences = [_random_sentence(words) for _ in range(num_entries)]
        # single-word probes so the rate is comparable to error_rate
        self._probes = [_random_sentence(1) for _ in range(num_entries)]

    def run(self) -> BloomFilter:
        bf = BloomFilter(self.num_entries, self.error_rate)
        logger.info("benchmarking %r", bf)

        for s in tqdm(self._sentences, desc="Add"):
            start = time.perf_counter()
            bf.add(s)
            self.metrics.add_latencies.append((time.perf_counter() - start) * 1000)

        for s in tqdm(self._sentences, desc="Check"):
            start = time.perf_counter()
            found = bf.check(s)
            self.metrics.check_latencies.append((time.perf_counter() - start) * 1000)
            assert found, f"false negative for {s!r}"

        for s in tqdm(self._probes, desc="Probe"):
            self.metrics.probes += 1
            if bf.check(s):
                self.metrics.false_positives += 1

        return bf


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--size", type=int, default=10000, help="Number of sentences (filter capacity)")
    parser.add_argument("--error-rate", type=float, default=0.01, help="Target false-positive rate")
    parser.add_argument("--words", type=int, default=1, help="Words per inserted sentence")
    parser.add_argument("--output", type=Path, default=Path("benchmark_results"), help="Output directory")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    args.output.mkdir(parents=True, exist_ok=True)

    suite = BenchmarkSuite(args.size, args.error_rate, args.words)
    bf = suite.run()
    metrics = suite.metrics
    logger.info(
        "observed fp rate %.4f (target %g), %d/%d bits set",
        metrics.fp_rate, args.error_rate, bf.count(), bf.m,
    )

    metrics.plot_latencies(
        "wordbloom Latency Distribution",
        args.output / "latencies.html"
    )

    with open(args.output / "metrics.json", "w") as f:
        json.dump({
            "m": bf.m,
            "k": bf.k,
            "capacity": args.size,
            "error_rate": args.error_rate,
            "metrics": metrics.to_dict(),
        }, f, indent=2)


if __name__ == "__main__":
    main()
