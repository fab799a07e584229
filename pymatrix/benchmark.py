"""
Matrix-product benchmark.

Measures wall-clock time of squaring a square matrix, ``B = A * A``, for
each backend and size. The composition layer is treated as a black box.

Usage:
    pymatrix-benchmark
    pymatrix-benchmark -n 100 -n 200 -b blas -b numpy -r 5
    python -m pymatrix.benchmark --log bench.log
"""

import argparse
import logging
import sys
import warnings
from dataclasses import dataclass
from typing import Iterable, Sequence

from pymatrix.core.compute.timing import Timer
from pymatrix.dense.matrix import Matrix
from pymatrix.dense.registry import available_backends, matrix_type
from pymatrix.diagnostics import log_to_file

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (4, 8, 64, 256)
DEFAULT_REPEATS = 3


@dataclass(frozen=True)
class BenchmarkResult:
    """Timing of one backend at one size."""
    backend: str
    size: int
    repeats: int
    best_seconds: float
    median_seconds: float


def matrix_squared(cls: type[Matrix], size: int, repeats: int = DEFAULT_REPEATS) -> BenchmarkResult:
    """
    Time ``A * A`` for a size x size matrix of class cls.

    Args:
        cls: Concrete matrix class
        size: Matrix order
        repeats: Number of timed products

    Returns:
        BenchmarkResult with best and median lap times

    Raises:
        ValueError: If size or repeats is not positive
    """
    if size < 1:
        raise ValueError(f"size must be positive, got {size}")
    if repeats < 1:
        raise ValueError(f"repeats must be positive, got {repeats}")

    A = cls.randn(size, size)
    timer = Timer()
    timer.start()
    for _ in range(repeats):
        with timer.lap():
            B = A * A
        del B
    timer.stop()

    return BenchmarkResult(
        backend=cls.backend.name,
        size=size,
        repeats=repeats,
        best_seconds=timer.best(),
        median_seconds=timer.median(),
    )


def run_benchmark(
    backends: Iterable[str] | None = None,
    sizes: Iterable[int] = DEFAULT_SIZES,
    repeats: int = DEFAULT_REPEATS,
) -> list[BenchmarkResult]:
    """
    Benchmark every requested backend at every size.

    Unknown backend names are skipped with a warning.

    Returns:
        Results ordered by backend, then size
    """
    names = available_backends() if backends is None else tuple(backends)
    sizes = tuple(sizes)
    results = []
    for name in names:
        try:
            cls = matrix_type(name)
        except ValueError:
            warnings.warn(f"Skipping unknown backend {name!r}")
            continue
        for size in sizes:
            logger.info("benchmarking %s at n=%d", name, size)
            result = matrix_squared(cls, size, repeats)
            logger.info(
                "%s n=%d best=%.6fs median=%.6fs",
                name, size, result.best_seconds, result.median_seconds,
            )
            results.append(result)
    return results


def format_results(results: Sequence[BenchmarkResult]) -> str:
    """Render results as an aligned text table."""
    header = ('backend', 'n', 'repeats', 'best (s)', 'median (s)')
    rows = [
        (r.backend, str(r.size), str(r.repeats), f"{r.best_seconds:.6f}", f"{r.median_seconds:.6f}")
        for r in results
    ]
    widths = [max(len(row[i]) for row in (header, *rows)) for i in range(len(header))]
    lines = ['  '.join(cell.rjust(w) if i else cell.ljust(w) for i, (cell, w) in enumerate(zip(row, widths)))
             for row in (header, *rows)]
    lines.insert(1, '  '.join('-' * w for w in widths))
    return '\n'.join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pymatrix-benchmark',
        description='Time B = A * A for square matrices on each backend.',
    )
    parser.add_argument(
        '-n', '--size',
        type=int,
        action='append',
        dest='sizes',
        metavar='N',
        help=f'matrix order, repeatable (default: {" ".join(map(str, DEFAULT_SIZES))})',
    )
    parser.add_argument(
        '-b', '--backend',
        action='append',
        dest='backends',
        metavar='NAME',
        help=f'backend to run, repeatable (default: all of {", ".join(available_backends())})',
    )
    parser.add_argument(
        '-r', '--repeats',
        type=int,
        default=DEFAULT_REPEATS,
        help=f'timed products per size (default: {DEFAULT_REPEATS})',
    )
    parser.add_argument(
        '--log',
        metavar='FILE',
        help='write progress messages to FILE',
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    sizes = tuple(args.sizes) if args.sizes else DEFAULT_SIZES
    if any(n < 1 for n in sizes):
        parser.error(f"sizes must be positive, got {list(sizes)}")
    if args.repeats < 1:
        parser.error(f"repeats must be positive, got {args.repeats}")

    if args.log:
        with log_to_file(args.log, logger='pymatrix', level=logging.INFO):
            results = run_benchmark(args.backends, sizes, args.repeats)
    else:
        results = run_benchmark(args.backends, sizes, args.repeats)

    print(format_results(results))
    return 0


if __name__ == '__main__':
    sys.exit(main())
