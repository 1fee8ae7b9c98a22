"""
Benchmark harness.

Times full renders (including the PPM write) over a fixed set of sizes,
split into a sample-count group and a resolution group.
"""

from __future__ import annotations
import logging
import statistics
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .renderer import raytrace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenchmarkCase:
    group: str
    width: int
    height: int
    samples: int

    @property
    def name(self) -> str:
        return f"{self.width}x{self.height}x{self.samples}"


@dataclass
class BenchmarkResult:
    case: BenchmarkCase
    timings: List[float] = field(default_factory=list)

    @property
    def best(self) -> float:
        return min(self.timings)

    @property
    def mean(self) -> float:
        return statistics.mean(self.timings)

    @property
    def samples_per_second(self) -> float:
        c = self.case
        return c.width * c.height * c.samples / self.best


DEFAULT_CASES = (
    BenchmarkCase("Sample Variation", 160, 120, 1),
    BenchmarkCase("Sample Variation", 160, 120, 2),
    BenchmarkCase("Resolution Variation", 150, 75, 1),
    BenchmarkCase("Resolution Variation", 150, 150, 1),
    BenchmarkCase("Resolution Variation", 300, 150, 1),
)


def run_benchmarks(
    output_dir: Union[str, Path],
    cases: Iterable[BenchmarkCase] = DEFAULT_CASES,
    repeat: int = 3,
    seed: Optional[int] = None
) -> List[BenchmarkResult]:
    """Render each case `repeat` times and collect wall-clock timings.

    Args:
        output_dir: Directory the benchmark images are written to
        cases: Benchmark cases to run
        repeat: Number of timed renders per case
        seed: Seed passed to every render

    Returns:
        One result per case, in the order given
    """
    if repeat <= 0:
        raise ValueError(f"repeat must be positive, got {repeat}")

    output_dir = Path(output_dir)
    results = []
    for case in cases:
        result = BenchmarkResult(case)
        output = output_dir / f"bench_{case.name}.ppm"
        for _ in range(repeat):
            start = time.perf_counter()
            raytrace(case.width, case.height, case.samples, output, seed=seed)
            result.timings.append(time.perf_counter() - start)
        logger.info("%s/%s: best %.3fs", case.group, case.name, result.best)
        results.append(result)
    return results
